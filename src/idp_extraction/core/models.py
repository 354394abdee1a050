# ============================================================================
# src/idp_extraction/core/models.py
# ============================================================================
"""
Extraction data model
- ExtractionResult: the three schema fields plus provenance
- StructuredArtifact: a result bound to its input text and timestamp
- Status: last known outcome shown to the user
- PersistedSnapshot: the {rawText, artifact} pair kept in the persistence slot

Python attributes are snake_case; to_dict()/from_dict() use the camelCase
wire names.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .schema import APPLICANT_NAME, DOCUMENT_ID, ISSUE_DATE, UNKNOWN


class StatusTone(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


# User-facing status messages
READY_MESSAGE = "Ready to extract structured fields from your document text."
PROCESSING_MESSAGE = "Processing document with IDP extraction pipeline..."
REMOTE_SUCCESS_MESSAGE = "Extraction completed using the Gemini API."
NO_CREDENTIAL_MESSAGE = "Gemini API key not provided; used offline extractor."
REMOTE_UNAVAILABLE_MESSAGE = (
    "Gemini API unavailable; used local extractor with the latest document text."
)
RESTORED_MESSAGE = "Loaded saved artifact from storage."
CANCELLED_MESSAGE = "Extraction cancelled."


@dataclass(frozen=True)
class Status:
    tone: StatusTone
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"tone": self.tone.value, "message": self.message}


def _field_value(value: Any) -> str:
    if value is None:
        return UNKNOWN
    text = str(value).strip()
    return text or UNKNOWN


@dataclass(frozen=True)
class ExtractionResult:
    applicant_name: str
    document_id: str
    issue_date: str
    source: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], source: str) -> "ExtractionResult":
        """
        Build a result from a remote JSON object.

        Only the schema fields are kept; missing or null values become UNKNOWN
        so the result always carries exactly three fields.
        """
        return cls(
            applicant_name=_field_value(payload.get(APPLICANT_NAME)),
            document_id=_field_value(payload.get(DOCUMENT_ID)),
            issue_date=_field_value(payload.get(ISSUE_DATE)),
            source=source,
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            APPLICANT_NAME: self.applicant_name,
            DOCUMENT_ID: self.document_id,
            ISSUE_DATE: self.issue_date,
            "source": self.source,
        }


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class StructuredArtifact:
    applicant_name: str
    document_id: str
    issue_date: str
    source: str
    raw_text: str
    processed_at: str

    @classmethod
    def from_result(
        cls,
        result: ExtractionResult,
        raw_text: str,
        processed_at: str
    ) -> "StructuredArtifact":
        return cls(
            applicant_name=result.applicant_name,
            document_id=result.document_id,
            issue_date=result.issue_date,
            source=result.source,
            raw_text=raw_text,
            processed_at=processed_at,
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            APPLICANT_NAME: self.applicant_name,
            DOCUMENT_ID: self.document_id,
            ISSUE_DATE: self.issue_date,
            "source": self.source,
            "rawText": self.raw_text,
            "processedAt": self.processed_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StructuredArtifact":
        """Raises KeyError/TypeError on an incomplete record."""
        return cls(
            applicant_name=str(data[APPLICANT_NAME]),
            document_id=str(data[DOCUMENT_ID]),
            issue_date=str(data[ISSUE_DATE]),
            source=str(data["source"]),
            raw_text=str(data["rawText"]),
            processed_at=str(data["processedAt"]),
        )


@dataclass(frozen=True)
class PersistedSnapshot:
    raw_text: Optional[str]
    artifact: Optional[StructuredArtifact] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rawText": self.raw_text,
            "artifact": self.artifact.to_dict() if self.artifact else None,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PersistedSnapshot":
        raw_text = data.get("rawText")
        if raw_text is not None and not isinstance(raw_text, str):
            raise TypeError("rawText must be a string")
        artifact_data = data.get("artifact")
        artifact = StructuredArtifact.from_dict(artifact_data) if artifact_data else None
        return cls(raw_text=raw_text, artifact=artifact)

    @classmethod
    def from_json(cls, payload: str) -> "PersistedSnapshot":
        """Raises ValueError, KeyError or TypeError on malformed input."""
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise TypeError("persisted state must be a JSON object")
        return cls.from_dict(data)
