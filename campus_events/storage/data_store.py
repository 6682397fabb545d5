from __future__ import annotations

from .config import DEFAULT_STORAGE_CONFIG, StorageConfig
from .memory import MemoryStore
from .repository import EventStore
from .seed import seed_sample_data
from .sql import SQLStore

_store: EventStore | None = None


def create_store(config: StorageConfig = DEFAULT_STORAGE_CONFIG) -> EventStore:
    """Build the configured backend, seeding it when enabled."""
    store: EventStore = SQLStore(config.database_url) if config.database_url else MemoryStore()
    if config.seed_sample_data:
        seed_sample_data(store)
    return store


def get_store() -> EventStore:
    """Return the process-wide store, creating it on first call."""
    global _store
    if _store is None:
        _store = create_store()
    return _store
