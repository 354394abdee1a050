# ============================================================================
# src/idp_extraction/core/factory.py
# ============================================================================
"""
Wiring from settings to a ready-to-use ExtractionSession.

Usage:
    from idp_extraction.core.factory import create_session

    session = create_session()
    session.load()
    outcome = await session.process()
"""

import logging
from typing import Optional

from ..config import GeminiSettings, StorageSettings, gemini_settings, storage_settings
from ..gemini.extractor import RemoteExtractor
from ..gemini.retry import RetryPolicy
from ..gemini.transport import GeminiHttpTransport, RemoteTransport
from ..utils.exceptions import ConfigurationError
from .orchestrator import ExtractionOrchestrator
from .persistence import (
    ArtifactRepository,
    InMemoryKeyValueStore,
    KeyValueStore,
    SqliteKeyValueStore,
)
from .session import ExtractionSession

logger = logging.getLogger(__name__)


def create_store(settings: Optional[StorageSettings] = None) -> KeyValueStore:
    settings = settings or storage_settings
    backend = settings.STORAGE_BACKEND

    if backend == "sqlite":
        return SqliteKeyValueStore(settings.STORAGE_DB_PATH)
    if backend == "memory":
        return InMemoryKeyValueStore()

    raise ConfigurationError(
        f"Unknown storage backend: {backend}. Supported backends: sqlite, memory"
    )


def create_remote_extractor(
    settings: Optional[GeminiSettings] = None,
    transport: Optional[RemoteTransport] = None
) -> RemoteExtractor:
    settings = settings or gemini_settings
    transport = transport or GeminiHttpTransport(
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.GEMINI_REQUEST_TIMEOUT,
    )
    policy = RetryPolicy(
        max_attempts=settings.GEMINI_MAX_ATTEMPTS,
        initial_delay=settings.GEMINI_INITIAL_DELAY,
        backoff_factor=settings.GEMINI_BACKOFF_FACTOR,
    )
    return RemoteExtractor(transport, policy=policy, source=settings.GEMINI_MODEL)


def create_session(
    gemini: Optional[GeminiSettings] = None,
    storage: Optional[StorageSettings] = None,
    store: Optional[KeyValueStore] = None,
    transport: Optional[RemoteTransport] = None
) -> ExtractionSession:
    gemini = gemini or gemini_settings
    storage = storage or storage_settings

    orchestrator = ExtractionOrchestrator(create_remote_extractor(gemini, transport))
    repository = ArtifactRepository(store or create_store(storage), key=storage.STORAGE_KEY)

    logger.info(
        f"Extraction session created (remote: {'enabled' if gemini.remote_enabled else 'disabled'}, "
        f"storage: {storage.STORAGE_BACKEND if store is None else type(store).__name__})"
    )
    return ExtractionSession(orchestrator, repository, credential=gemini.GEMINI_API_KEY)
