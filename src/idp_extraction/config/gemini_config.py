# ============================================================================
# src/idp_extraction/config/gemini_config.py
# ============================================================================
"""
Gemini Configuration (Remote Extraction)
- API key and model
- Endpoint
- Retry / backoff policy
- Request timeout
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    GEMINI_API_KEY: str = Field(
        default="",
        description="Credential for the Gemini API. Empty = offline extractor only"
    )
    GEMINI_MODEL: str = Field(
        default="gemini-2.5-flash-preview-09-2025",
        description="Model identifier, also used as the artifact source tag"
    )
    GEMINI_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Generative Language API"
    )
    GEMINI_REQUEST_TIMEOUT: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request timeout (seconds)"
    )
    GEMINI_MAX_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        description="Total attempts per extraction, including the first"
    )
    GEMINI_INITIAL_DELAY: float = Field(
        default=0.5,
        ge=0.0,
        description="Delay before the first retry (seconds)"
    )
    GEMINI_BACKOFF_FACTOR: float = Field(
        default=2.0,
        ge=1.0,
        description="Multiplier applied to the delay after each failed attempt"
    )

    @property
    def remote_enabled(self) -> bool:
        return bool(self.GEMINI_API_KEY)


gemini_settings = GeminiSettings()
