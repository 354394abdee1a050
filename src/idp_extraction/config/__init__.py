# ============================================================================
# src/idp_extraction/config/__init__.py
# ============================================================================
"""
Convenient imports for all settings
"""

from .gemini_config import GeminiSettings, gemini_settings
from .storage_config import StorageSettings, storage_settings
from .logging_config import LoggingSettings, logging_settings

__all__ = [
    "GeminiSettings",
    "StorageSettings",
    "LoggingSettings",
    "gemini_settings",
    "storage_settings",
    "logging_settings",
]
