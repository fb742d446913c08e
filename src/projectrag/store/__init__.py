"""Document storage for projectrag.

This module provides document persistence:
- DocumentStore: Storage interface (vectors excluded from default reads)
- Backends: Memory, SQLite, Redis
"""

from projectrag.utils.config import StoreConfig

from .base import DocumentStore
from .memory_store import MemoryDocumentStore
from .sqlite_store import SQLiteDocumentStore
from .redis_store import RedisDocumentStore


def create_store(config: StoreConfig) -> DocumentStore:
    """Construct the document store named by the configuration."""
    if config.backend == "sqlite":
        return SQLiteDocumentStore(config.sqlite_path)
    elif config.backend == "redis":
        return RedisDocumentStore(config.redis_url, key_prefix=config.key_prefix)
    return MemoryDocumentStore()


__all__ = [
    "DocumentStore",
    "MemoryDocumentStore",
    "SQLiteDocumentStore",
    "RedisDocumentStore",
    "create_store",
]
