# ============================================================================
# src/idp_extraction/utils/__init__.py
# ============================================================================
"""
Utility modules for the IDP extraction engine.
"""

from .exceptions import (
    IDPExtractionError,
    ConfigurationError,
    RemoteError,
    RemoteTransientError,
    RemotePayloadMalformedError,
    RemoteExhaustedError,
    ExtractionCancelledError,
    ExtractionInProgressError,
    PersistenceError,
)

from .logging import (
    setup_logging,
    get_logger,
    log_performance,
    JsonFormatter,
    CredentialRedactionFilter,
    redact_credentials,
)

__all__ = [
    # Exceptions
    'IDPExtractionError',
    'ConfigurationError',
    'RemoteError',
    'RemoteTransientError',
    'RemotePayloadMalformedError',
    'RemoteExhaustedError',
    'ExtractionCancelledError',
    'ExtractionInProgressError',
    'PersistenceError',
    # Logging
    'setup_logging',
    'get_logger',
    'log_performance',
    'JsonFormatter',
    'CredentialRedactionFilter',
    'redact_credentials',
]
