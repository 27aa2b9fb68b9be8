"""SQLAlchemy-backed local cache."""

import logging
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from venueledger.database.base import LocalCache
from venueledger.database.models import CacheEntry, create_session_factory
from venueledger.domain.errors import PersistenceError

logger = logging.getLogger(__name__)


class SQLAlchemyCache(LocalCache):
    """Store each cached collection as one JSON payload row."""

    def __init__(self, database_url: str):
        """Initialize the cache.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def read(self, key: str) -> Optional[str]:
        session = self._get_session()
        try:
            entry = session.get(CacheEntry, key)
        except SQLAlchemyError as e:
            raise PersistenceError("cache.read", f"could not read '{key}'", e) from e
        return None if entry is None else entry.payload

    def write(self, key: str, payload: str) -> None:
        session = self._get_session()
        try:
            entry = session.get(CacheEntry, key)
            if entry is None:
                session.add(CacheEntry(key=key, payload=payload))
            else:
                entry.payload = payload
                entry.updated_at = datetime.now(UTC)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError("cache.write", f"could not write '{key}'", e) from e
        logger.debug("Cached %s (%d bytes)", key, len(payload))

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None


class MemoryCache(LocalCache):
    """Dict-backed cache for tests and throwaway sessions."""

    def __init__(self, entries: Optional[dict[str, str]] = None):
        self.entries: dict[str, str] = dict(entries or {})

    def read(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def write(self, key: str, payload: str) -> None:
        self.entries[key] = payload
