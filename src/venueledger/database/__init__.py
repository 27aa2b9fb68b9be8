"""Storage layer for venueledger."""

from venueledger.database.base import CacheKeys, LocalCache, PersistenceAdapter
from venueledger.database.factories import create_sqlite_adapter, create_sqlite_cache

__all__ = [
    "CacheKeys",
    "LocalCache",
    "PersistenceAdapter",
    "create_sqlite_adapter",
    "create_sqlite_cache",
]
