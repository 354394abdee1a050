# ============================================================================
# src/idp_extraction/core/__init__.py
# ============================================================================
"""
Core components for the IDP extraction engine.

Only the data model and persistence are re-exported here; the orchestrator,
session and factory are imported from their modules (they depend on the
extractors and gemini packages, which themselves import the data model).
"""

from .schema import (
    APPLICANT_NAME,
    DOCUMENT_ID,
    FIELD_NAMES,
    ISSUE_DATE,
    LOCAL_SOURCE,
    SCHEMA_DESCRIPTION,
    UNKNOWN,
    SchemaField,
)
from .models import (
    ExtractionResult,
    PersistedSnapshot,
    Status,
    StatusTone,
    StructuredArtifact,
)
from .state import SessionState
from .persistence import (
    ArtifactRepository,
    InMemoryKeyValueStore,
    KeyValueStore,
    SqliteKeyValueStore,
)

__all__ = [
    "APPLICANT_NAME",
    "DOCUMENT_ID",
    "FIELD_NAMES",
    "ISSUE_DATE",
    "LOCAL_SOURCE",
    "SCHEMA_DESCRIPTION",
    "UNKNOWN",
    "SchemaField",
    "ExtractionResult",
    "PersistedSnapshot",
    "Status",
    "StatusTone",
    "StructuredArtifact",
    "SessionState",
    "ArtifactRepository",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SqliteKeyValueStore",
]
