# ============================================================================
# FILE: tests/unit/test_configuration.py
# ============================================================================
"""
Unit tests for settings and factory wiring
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from idp_extraction.config import GeminiSettings, LoggingSettings, StorageSettings
from idp_extraction.core.factory import create_remote_extractor, create_session, create_store
from idp_extraction.core.persistence import InMemoryKeyValueStore, SqliteKeyValueStore
from idp_extraction.gemini.transport import GeminiHttpTransport


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "GEMINI_API_KEY", "GEMINI_MODEL", "GEMINI_MAX_ATTEMPTS", "GEMINI_INITIAL_DELAY",
        "GEMINI_BACKOFF_FACTOR", "GEMINI_REQUEST_TIMEOUT", "STORAGE_BACKEND",
        "STORAGE_DB_PATH", "STORAGE_KEY", "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_gemini_defaults(clean_env):
    settings = GeminiSettings(_env_file=None)

    assert settings.GEMINI_API_KEY == ""
    assert settings.remote_enabled is False
    assert settings.GEMINI_MODEL == "gemini-2.5-flash-preview-09-2025"
    assert settings.GEMINI_MAX_ATTEMPTS == 3
    assert settings.GEMINI_INITIAL_DELAY == 0.5
    assert settings.GEMINI_BACKOFF_FACTOR == 2.0


def test_gemini_from_environment(clean_env):
    clean_env.setenv("GEMINI_API_KEY", "abc")
    clean_env.setenv("GEMINI_MAX_ATTEMPTS", "5")

    settings = GeminiSettings(_env_file=None)

    assert settings.remote_enabled is True
    assert settings.GEMINI_MAX_ATTEMPTS == 5


def test_gemini_validation(clean_env):
    clean_env.setenv("GEMINI_MAX_ATTEMPTS", "0")
    with pytest.raises(ValidationError):
        GeminiSettings(_env_file=None)


def test_storage_backend_validation(clean_env):
    clean_env.setenv("STORAGE_BACKEND", "redis")
    with pytest.raises(ValidationError):
        StorageSettings(_env_file=None)


def test_logging_defaults(clean_env):
    settings = LoggingSettings(_env_file=None)
    assert settings.LOG_LEVEL == "INFO"
    assert settings.LOG_FILE is None


def test_create_store_memory(clean_env):
    store = create_store(StorageSettings(_env_file=None, STORAGE_BACKEND="memory"))
    assert isinstance(store, InMemoryKeyValueStore)


def test_create_store_sqlite(clean_env, tmp_path):
    settings = StorageSettings(_env_file=None, STORAGE_DB_PATH=tmp_path / "idp.db")
    store = create_store(settings)

    assert isinstance(store, SqliteKeyValueStore)
    assert not Path(store.db_path).exists()
    store.set("k", "v")
    assert Path(store.db_path).exists()


def test_create_remote_extractor_uses_settings(clean_env):
    settings = GeminiSettings(
        _env_file=None,
        GEMINI_MODEL="gemini-custom",
        GEMINI_MAX_ATTEMPTS=4,
        GEMINI_INITIAL_DELAY=0.25,
    )
    remote = create_remote_extractor(settings)

    assert isinstance(remote.transport, GeminiHttpTransport)
    assert remote.source == "gemini-custom"
    assert remote.policy.max_attempts == 4
    assert remote.policy.initial_delay == 0.25


def test_create_session(clean_env, make_transport, memory_store):
    session = create_session(
        gemini=GeminiSettings(_env_file=None, GEMINI_API_KEY="key"),
        storage=StorageSettings(_env_file=None, STORAGE_KEY="slot"),
        store=memory_store,
        transport=make_transport(),
    )

    assert session.remote_enabled
    assert session.credential == "key"
    assert session.repository.key == "slot"
    assert session.repository.store is memory_store


@pytest.mark.asyncio
async def test_session_survives_unusable_storage_path(clean_env, tmp_path, make_transport):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    session = create_session(
        gemini=GeminiSettings(_env_file=None, GEMINI_API_KEY=""),
        storage=StorageSettings(_env_file=None, STORAGE_DB_PATH=blocker / "state.db"),
        transport=make_transport(),
    )

    state = session.load()
    assert state.artifact is None

    session.update_text("Name: Jane Doe\nPassport No: X1234567")
    outcome = await session.process()

    assert outcome.artifact.applicant_name == "Jane Doe"
    assert outcome.artifact.document_id == "X1234567"
    assert session.state.artifact == outcome.artifact
    assert not session.state.processing
