# ============================================================================
# src/idp_extraction/gemini/prompts.py
# ============================================================================
"""
Prompt construction for the remote extraction call.
"""

import json
from typing import Sequence

from ..core.schema import SCHEMA_DESCRIPTION, SchemaField


def serialize_schema(schema: Sequence[SchemaField] = SCHEMA_DESCRIPTION) -> str:
    """Compact JSON, same shape the service has always been sent."""
    return json.dumps([item.to_dict() for item in schema], separators=(",", ":"))


def build_prompt(raw_text: str, schema: Sequence[SchemaField] = SCHEMA_DESCRIPTION) -> str:
    """
    Build the structured-extraction prompt.

    Deterministic: the same text and schema always produce the same prompt.
    The raw text is embedded verbatim.
    """
    return (
        "Act as an Intelligent Document Processing (IDP) engine. "
        f"Only return a JSON object matching this schema: {serialize_schema(schema)}. "
        "Use ISO date format (YYYY-MM-DD) for issueDate. "
        f"Raw text to extract from:\n\n{raw_text}"
    )
