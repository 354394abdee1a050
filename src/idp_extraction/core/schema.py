# ============================================================================
# src/idp_extraction/core/schema.py
# ============================================================================
"""
Output Schema

The fixed set of fields extracted from every document. The description list
is serialized verbatim into the remote prompt and served by the API.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

APPLICANT_NAME = "applicantName"
DOCUMENT_ID = "documentId"
ISSUE_DATE = "issueDate"

FIELD_NAMES: Tuple[str, ...] = (APPLICANT_NAME, DOCUMENT_ID, ISSUE_DATE)

# Placeholder for a field the extractor could not find
UNKNOWN = "UNKNOWN"

LOCAL_SOURCE = "local-extractor"


@dataclass(frozen=True)
class SchemaField:
    field: str
    type: str
    description: str
    format: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Key order matches the prompt contract: field, type, format, description."""
        data: Dict[str, Any] = {"field": self.field, "type": self.type}
        if self.format is not None:
            data["format"] = self.format
        data["description"] = self.description
        return data


SCHEMA_DESCRIPTION: Tuple[SchemaField, ...] = (
    SchemaField(
        field=APPLICANT_NAME,
        type="STRING",
        description="The full name of the applicant.",
    ),
    SchemaField(
        field=DOCUMENT_ID,
        type="STRING",
        description="The unique document identification number.",
    ),
    SchemaField(
        field=ISSUE_DATE,
        type="STRING",
        format="YYYY-MM-DD",
        description="The date the document was issued.",
    ),
)


def schema_as_dicts(schema=SCHEMA_DESCRIPTION) -> List[Dict[str, Any]]:
    return [item.to_dict() for item in schema]
