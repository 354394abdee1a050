# ============================================================================
# src/idp_extraction/gemini/__init__.py
# ============================================================================
"""
Remote extraction through the Gemini generateContent API.

Usage:
    from idp_extraction.gemini import GeminiHttpTransport, RemoteExtractor, build_prompt

    extractor = RemoteExtractor(GeminiHttpTransport())
    payload = await extractor.call(build_prompt(text), api_key)
"""

from .prompts import build_prompt, serialize_schema
from .retry import RetryPolicy, RetryState
from .transport import (
    DEFAULT_GEMINI_BASE_URL,
    DEFAULT_GEMINI_MODEL,
    GeminiHttpTransport,
    RemoteTransport,
    TransportResponse,
    build_request_body,
)
from .extractor import RemoteExtractor, extract_response_text, parse_payload

__all__ = [
    "build_prompt",
    "serialize_schema",
    "RetryPolicy",
    "RetryState",
    "DEFAULT_GEMINI_BASE_URL",
    "DEFAULT_GEMINI_MODEL",
    "GeminiHttpTransport",
    "RemoteTransport",
    "TransportResponse",
    "build_request_body",
    "RemoteExtractor",
    "extract_response_text",
    "parse_payload",
]
