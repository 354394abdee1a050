# ============================================================================
# src/idp_extraction/__init__.py
# ============================================================================
"""
IDP Extraction Engine

Turns OCR text of identity documents into a structured record
(applicant name, document ID, issue date) using the Gemini API, with a
deterministic offline extractor as fallback.
"""

__version__ = "1.1.0"
