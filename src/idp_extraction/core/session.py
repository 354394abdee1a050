# ============================================================================
# src/idp_extraction/core/session.py
# ============================================================================
"""
Extraction Session

Service layer between a host (API, UI) and the orchestrator. Owns the
SessionState, enforces one extraction at a time and writes the persistence
slot through after every text edit and every completed extraction.
"""

import asyncio
import logging
from typing import Optional

from ..utils.exceptions import ExtractionCancelledError, ExtractionInProgressError
from .orchestrator import ExtractionOrchestrator, ExtractionOutcome
from .persistence import ArtifactRepository
from .state import (
    SessionState,
    cancel_processing,
    complete_with_fallback,
    complete_with_remote,
    edit_text,
    fail_processing,
    restore,
    start_processing,
)

logger = logging.getLogger(__name__)


class ExtractionSession:

    def __init__(
        self,
        orchestrator: ExtractionOrchestrator,
        repository: ArtifactRepository,
        credential: str = "",
        state: Optional[SessionState] = None
    ):
        self.orchestrator = orchestrator
        self.repository = repository
        self.credential = credential
        self._state = state or SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def remote_enabled(self) -> bool:
        return bool(self.credential)

    def load(self) -> SessionState:
        """Restore the persisted slot, if any. Never raises."""
        snapshot = self.repository.load()
        if snapshot is not None:
            self._state = restore(self._state, snapshot)
            logger.info("Restored persisted session state")
        return self._state

    def _persist(self):
        self.repository.save(self._state.raw_text, self._state.artifact)

    def update_text(self, raw_text: str) -> SessionState:
        if self._state.processing:
            raise ExtractionInProgressError("Cannot edit the document while an extraction is running")
        self._state = edit_text(self._state, raw_text)
        self._persist()
        return self._state

    async def process(self, cancel_event: Optional[asyncio.Event] = None) -> ExtractionOutcome:
        """
        Run one extraction over the current text.

        Raises:
            ExtractionInProgressError: another extraction is running
            ExtractionCancelledError: cancel_event was set; the previous
                artifact is kept and nothing is persisted
        """
        # Check-and-set happens before the first await, so it is atomic on the loop
        if self._state.processing:
            raise ExtractionInProgressError("An extraction is already running")

        raw_text = self._state.raw_text
        self._state = start_processing(self._state)

        try:
            outcome = await self.orchestrator.process(raw_text, self.credential, cancel_event)
        except (ExtractionCancelledError, asyncio.CancelledError):
            self._state = cancel_processing(self._state)
            raise
        except Exception as e:
            logger.error(f"Extraction failed: {e}", exc_info=True)
            self._state = fail_processing(self._state, f"Extraction failed: {e}")
            raise

        if outcome.used_remote:
            self._state = complete_with_remote(self._state, outcome.artifact)
        else:
            self._state = complete_with_fallback(self._state, outcome.artifact, outcome.status.message)

        self._persist()
        return outcome
