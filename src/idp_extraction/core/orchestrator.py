# ============================================================================
# src/idp_extraction/core/orchestrator.py
# ============================================================================
"""
Extraction Orchestrator

Routes one document through the pipeline:

    raw text -> prompt -> RemoteExtractor (Gemini)
                    |-- payload     -> remote result     (status: success)
                    |-- None        -> LocalExtractor     (status: warning, no key)
                    '-- any error   -> LocalExtractor     (status: warning, unavailable)

and binds the result to its input text and a processing timestamp. The
orchestrator holds no state between calls.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, NamedTuple, Optional, Sequence

from ..extractors.local_extractor import LocalExtractor
from ..gemini.extractor import RemoteExtractor
from ..gemini.prompts import build_prompt
from ..utils.exceptions import ExtractionCancelledError, RemoteError
from ..utils.logging import log_performance
from .models import (
    NO_CREDENTIAL_MESSAGE,
    REMOTE_SUCCESS_MESSAGE,
    REMOTE_UNAVAILABLE_MESSAGE,
    ExtractionResult,
    Status,
    StatusTone,
    StructuredArtifact,
    utc_timestamp,
)
from .schema import SCHEMA_DESCRIPTION, SchemaField

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExtractionOutcome(NamedTuple):
    artifact: StructuredArtifact
    status: Status

    @property
    def used_remote(self) -> bool:
        return self.status.tone is StatusTone.SUCCESS


class ExtractionOrchestrator:
    """
    Chooses between remote and local extraction for a single document.

    Args:
        remote: Retrying remote extractor
        local: Offline extractor used as fallback
        schema: Schema description embedded in the prompt
        clock: Returns the processing time (injectable for tests)
    """

    def __init__(
        self,
        remote: RemoteExtractor,
        local: Optional[LocalExtractor] = None,
        schema: Sequence[SchemaField] = SCHEMA_DESCRIPTION,
        clock: Callable[[], datetime] = _utc_now
    ):
        self.remote = remote
        self.local = local or LocalExtractor()
        self.schema = schema
        self.clock = clock

    @log_performance(logger, "Document extraction")
    async def process(
        self,
        raw_text: str,
        credential: Optional[str],
        cancel_event: Optional[asyncio.Event] = None
    ) -> ExtractionOutcome:
        """
        Extract the schema fields from raw_text.

        Any remote failure switches to the local extractor. Only
        cancellation (ExtractionCancelledError or asyncio.CancelledError)
        propagates.
        """
        prompt = build_prompt(raw_text, self.schema)

        try:
            payload = await self.remote.call(prompt, credential, cancel_event)
        except ExtractionCancelledError:
            raise
        except Exception as e:
            if isinstance(e, RemoteError):
                logger.warning(f"Gemini extraction failed; using local extractor: {e}")
            else:
                logger.warning(
                    f"Unexpected Gemini error ({type(e).__name__}); using local extractor: {e}",
                    exc_info=True,
                )
            result = self.local.extract(raw_text)
            status = Status(StatusTone.WARNING, REMOTE_UNAVAILABLE_MESSAGE)
        else:
            if payload is not None:
                result = ExtractionResult.from_payload(payload, source=self.remote.source)
                status = Status(StatusTone.SUCCESS, REMOTE_SUCCESS_MESSAGE)
            else:
                result = self.local.extract(raw_text)
                status = Status(StatusTone.WARNING, NO_CREDENTIAL_MESSAGE)

        artifact = StructuredArtifact.from_result(
            result,
            raw_text=raw_text,
            processed_at=utc_timestamp(self.clock()),
        )
        logger.info(f"Extraction finished via {artifact.source} (status: {status.tone.value})")
        return ExtractionOutcome(artifact=artifact, status=status)
