# ============================================================================
# src/idp_extraction/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the IDP extraction engine.

A missing credential is not an exception: the remote extractor returns None
and the orchestrator takes the offline path.
"""

from typing import Optional


class IDPExtractionError(Exception):
    """Base exception for all IDP extraction errors."""
    pass


class ConfigurationError(IDPExtractionError):
    """Invalid configuration."""
    pass


class RemoteError(IDPExtractionError):
    """Error on the remote (Gemini) extraction path."""
    pass


class RemoteTransientError(RemoteError):
    """Non-success status or empty payload. Retried."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemotePayloadMalformedError(RemoteError):
    """Response text is not a JSON object. Not retried."""
    pass


class RemoteExhaustedError(RemoteError):
    """All attempts consumed; wraps the error of the final attempt."""
    def __init__(self, message: str, attempts: int, last_error: BaseException):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class ExtractionCancelledError(IDPExtractionError):
    """The caller signalled cancellation while an extraction was running."""
    pass


class ExtractionInProgressError(IDPExtractionError):
    """Another extraction is already in flight for this session."""
    pass


class PersistenceError(IDPExtractionError):
    """The key-value store could not be read or written."""
    pass
