# ============================================================================
# src/idp_extraction/extractors/local_extractor.py
# ============================================================================
"""
Local (offline) field extractor

Deterministic fallback used when the remote path is unavailable. Each field
has an ordered list of label matchers; the first matcher producing a
non-empty value wins and later ones are not consulted. Fields without a
match resolve to UNKNOWN, so extraction never fails.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from ..core.models import ExtractionResult
from ..core.schema import (
    APPLICANT_NAME,
    DOCUMENT_ID,
    ISSUE_DATE,
    LOCAL_SOURCE,
    UNKNOWN,
)
from .dates import normalize_date

logger = logging.getLogger(__name__)

_FLAGS = re.IGNORECASE | re.ASCII


def _strip(value: str) -> Optional[str]:
    return value.strip() or None


@dataclass(frozen=True)
class LabelMatcher:
    """A labelled capture plus the normalizer applied to the captured text."""
    name: str
    pattern: re.Pattern
    normalize: Callable[[str], Optional[str]] = _strip

    def match(self, text: str) -> Optional[str]:
        found = self.pattern.search(text)
        if not found:
            return None
        return self.normalize(found.group(1).strip())


NAME_MATCHERS = (
    LabelMatcher("name", re.compile(r"Name\s*[:\-]\s*([A-Za-z ,.'-]+)", _FLAGS)),
)

DOCUMENT_ID_MATCHERS = (
    LabelMatcher("passport_no", re.compile(r"Passport\s*No\.?\s*[:\-]?\s*([A-Z0-9]+)", _FLAGS)),
    LabelMatcher("document_id", re.compile(r"Document\s*ID\s*[:\-]\s*([A-Z0-9]+)", _FLAGS)),
)

ISSUE_DATE_MATCHERS = (
    LabelMatcher("issue_date", re.compile(r"Issue\s*Date\s*[:\-]\s*([\w\s.-]+)", _FLAGS), normalize_date),
    LabelMatcher("issued_on", re.compile(r"Issued\s*on\s*([\w\s.-]+)", _FLAGS), normalize_date),
)

FIELD_MATCHERS: Dict[str, Sequence[LabelMatcher]] = {
    APPLICANT_NAME: NAME_MATCHERS,
    DOCUMENT_ID: DOCUMENT_ID_MATCHERS,
    ISSUE_DATE: ISSUE_DATE_MATCHERS,
}


def first_match(matchers: Sequence[LabelMatcher], text: str) -> Optional[str]:
    for matcher in matchers:
        value = matcher.match(text)
        if value:
            logger.debug(f"Matched '{matcher.name}' -> {value!r}")
            return value
    return None


class LocalExtractor:
    """
    Regex-based extractor for applicant name, document ID and issue date.

    Total: any input, including the empty string, yields a complete result.
    """

    source = LOCAL_SOURCE

    def __init__(self, field_matchers: Optional[Dict[str, Sequence[LabelMatcher]]] = None):
        self.field_matchers = field_matchers or FIELD_MATCHERS

    def extract(self, raw_text: str) -> ExtractionResult:
        values = {
            field: first_match(matchers, raw_text or "") or UNKNOWN
            for field, matchers in self.field_matchers.items()
        }
        missing = [field for field, value in values.items() if value == UNKNOWN]
        if missing:
            logger.info(f"Local extractor found no value for: {', '.join(missing)}")

        return ExtractionResult(
            applicant_name=values.get(APPLICANT_NAME, UNKNOWN),
            document_id=values.get(DOCUMENT_ID, UNKNOWN),
            issue_date=values.get(ISSUE_DATE, UNKNOWN),
            source=self.source,
        )
