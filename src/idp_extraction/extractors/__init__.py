# ============================================================================
# src/idp_extraction/extractors/__init__.py
# ============================================================================
"""
Offline extraction: label matchers and date normalization.
"""

from .dates import normalize_date
from .local_extractor import FIELD_MATCHERS, LabelMatcher, LocalExtractor, first_match

__all__ = [
    "normalize_date",
    "FIELD_MATCHERS",
    "LabelMatcher",
    "LocalExtractor",
    "first_match",
]
