# ============================================================================
# src/idp_extraction/core/persistence.py
# ============================================================================
"""
Persistence port and backends

The session keeps a single slot holding the latest {rawText, artifact} pair.
Stores expose a plain string key-value interface; ArtifactRepository does the
(de)serialization and makes every access best-effort: a failed load yields
nothing, a failed save is logged and reported as False.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from ..utils.exceptions import PersistenceError
from .models import PersistedSnapshot, StructuredArtifact

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "kyc_artifact_data"


class KeyValueStore(ABC):
    """get/set of string values. Implementations raise PersistenceError."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass


class InMemoryKeyValueStore(KeyValueStore):

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SqliteKeyValueStore(KeyValueStore):
    """
    SQLite-backed key-value store.

    One row per key; writes replace the previous value. The table is created
    on first access, so an unusable path surfaces as PersistenceError from
    get/set (where ArtifactRepository contains it) rather than at startup.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._initialized = False

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------
    def _init_database(self):
        if self._initialized:
            return
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
            try:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key         TEXT PRIMARY KEY,
                        value       TEXT NOT NULL,
                        updated_at  TEXT NOT NULL
                    )
                """)
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceError(f"Cannot initialize store at {self.db_path}: {e}") from e
        self._initialized = True
        logger.info(f"Key-value store initialized: {self.db_path}")

    # ------------------------------------------------------------------
    # Read / write
    # ------------------------------------------------------------------
    def get(self, key: str) -> Optional[str]:
        self._init_database()
        try:
            conn = sqlite3.connect(str(self.db_path))
            try:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot read '{key}': {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self._init_database()
        try:
            conn = sqlite3.connect(str(self.db_path))
            try:
                conn.execute("""
                    INSERT OR REPLACE INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                """, (key, value, datetime.now().isoformat()))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot write '{key}': {e}") from e


class ArtifactRepository:
    """Best-effort load/save of the session's persistence slot."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self) -> Optional[PersistedSnapshot]:
        """
        Read the slot. Missing, malformed or unreadable data yields None.
        """
        try:
            payload = self.store.get(self.key)
        except PersistenceError as e:
            logger.warning(f"Failed to load persisted state: {e}")
            return None

        if not payload:
            return None

        try:
            return PersistedSnapshot.from_json(payload)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring malformed persisted state under '{self.key}': {e}")
            return None

    def save(self, raw_text: str, artifact: Optional[StructuredArtifact]) -> bool:
        snapshot = PersistedSnapshot(raw_text=raw_text, artifact=artifact)
        try:
            self.store.set(self.key, snapshot.to_json())
        except PersistenceError as e:
            logger.error(f"Failed to persist state: {e}")
            return False
        return True
