"""Unit-specific fixtures (no I/O beyond in-memory SQLite)."""

from __future__ import annotations

import aiosqlite
import pytest

from showdetails.cache import MemoryCacheStore, SqliteCacheStore


@pytest.fixture()
def memory_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture()
async def sqlite_store():
    """In-memory SQLite cache store for unit tests."""
    async with aiosqlite.connect(":memory:") as db:
        store = SqliteCacheStore(db)
        await store.init_db()
        yield store
