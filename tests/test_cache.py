"""Tests for the SQLAlchemy local cache."""

from decimal import Decimal

import pytest

from venueledger.database.base import CacheKeys
from venueledger.database.cache import SQLAlchemyCache
from venueledger.database.factories import create_sqlite_cache, resolve_database_path
from venueledger.domain.ledger import LedgerStore

from conftest import make_payment


@pytest.fixture
def sqlite_cache(temp_db):
    cache = create_sqlite_cache(database_path=temp_db)
    yield cache
    cache.close()


def test_read_missing_key(sqlite_cache):
    assert sqlite_cache.read(CacheKeys.BOOKINGS) is None


def test_write_then_read(sqlite_cache):
    sqlite_cache.write(CacheKeys.VENDORS, "[]")

    assert sqlite_cache.read(CacheKeys.VENDORS) == "[]"


def test_write_replaces_payload(sqlite_cache):
    """Test that a second write overwrites the whole collection."""
    sqlite_cache.write(CacheKeys.VENDORS, "[1]")
    sqlite_cache.write(CacheKeys.VENDORS, "[1, 2]")

    assert sqlite_cache.read(CacheKeys.VENDORS) == "[1, 2]"


def test_payload_survives_new_connection(temp_db):
    """Test that writes are durable across cache instances."""
    first = SQLAlchemyCache(f"sqlite:///{temp_db}")
    first.write(CacheKeys.PACKAGES, '{"a": 1}')
    first.close()

    second = SQLAlchemyCache(f"sqlite:///{temp_db}")
    try:
        assert second.read(CacheKeys.PACKAGES) == '{"a": 1}'
    finally:
        second.close()


def test_store_reloads_from_sqlite(temp_db, sample_booking):
    """Test a store written through the cache can be loaded back."""
    cache = create_sqlite_cache(database_path=temp_db)
    store = LedgerStore.load(cache)
    store.add_booking(sample_booking)
    store.append_payment("B1", make_payment("p-1", "600"))
    cache.close()

    reopened = create_sqlite_cache(database_path=temp_db)
    try:
        reloaded = LedgerStore.load(reopened)
        booking = reloaded.get_booking("B1")
        assert booking is not None
        assert booking.payments[0].amount == Decimal("600")
        assert len(reloaded.bookings) == 3
    finally:
        reopened.close()


def test_resolve_database_path_from_env(monkeypatch, tmp_path):
    path = str(tmp_path / "env.db")
    monkeypatch.setenv("VENUELEDGER_DB_PATH", path)

    assert resolve_database_path() == path
    assert resolve_database_path("explicit.db") == "explicit.db"
