# ============================================================================
# src/idp_extraction/config/storage_config.py
# ============================================================================
"""
Persistence Settings
- Backend selection
- SQLite location
- Persistence slot key
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    STORAGE_BACKEND: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="Key-value backend for the persisted session state"
    )
    STORAGE_DB_PATH: Path = Field(
        default=Path("data/idp_state.db"),
        description="SQLite database used by the sqlite backend"
    )
    STORAGE_KEY: str = Field(
        default="kyc_artifact_data",
        description="Key of the single persistence slot"
    )


storage_settings = StorageSettings()
