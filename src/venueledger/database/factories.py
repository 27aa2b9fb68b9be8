"""Factory functions for creating storage instances."""

import os
from pathlib import Path
from typing import Optional

from venueledger.database.cache import SQLAlchemyCache
from venueledger.database.remote import SQLAlchemyPersistenceAdapter


def resolve_database_path(database_path: Optional[str] = None) -> str:
    """Resolve the SQLite database file path.

    Args:
        database_path: Path to SQLite database file. If None, checks
            VENUELEDGER_DB_PATH environment variable, then defaults to
            ~/.venueledger/venueledger.db

    Returns:
        Database file path
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("VENUELEDGER_DB_PATH")

    if database_path is None:
        # Default to ~/.venueledger/venueledger.db
        home = Path.home()
        db_dir = home / ".venueledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "venueledger.db")

    return database_path


def create_sqlite_cache(database_path: Optional[str] = None) -> SQLAlchemyCache:
    """Create a SQLite-backed local cache."""
    return SQLAlchemyCache(f"sqlite:///{resolve_database_path(database_path)}")


def create_sqlite_adapter(database_path: Optional[str] = None) -> SQLAlchemyPersistenceAdapter:
    """Create a SQLite-backed persistence adapter using the aiosqlite driver."""
    return SQLAlchemyPersistenceAdapter(
        f"sqlite+aiosqlite:///{resolve_database_path(database_path)}"
    )
