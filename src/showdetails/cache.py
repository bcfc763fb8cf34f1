"""Show-details cache stores.

Two interchangeable backends implement CacheStoreProtocol:

- ``MemoryCacheStore``: process-local dict, the default. Hits return the
  stored object itself.
- ``SqliteCacheStore``: aiosqlite-backed, survives restarts.

Entries carry an absolute expiry assigned at write time; an expired entry
reads as a miss. There is no explicit invalidation. Writes to an existing key
overwrite it in place, so concurrent misses on the same key simply race to
store the same value.

The SQLite store catches ``aiosqlite.Error`` and undecodable rows internally
and degrades gracefully: read failures return ``None`` (treated as a miss by the
service), write failures are logged and ignored. Infrastructure errors never
cross the store boundary.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import aiosqlite
import structlog
from showdetails.models.cache import CacheEntry
from showdetails.models.show import ShowDetails

if TYPE_CHECKING:
    from datetime import timedelta

log = structlog.get_logger()


class MemoryCacheStore:
    """In-process cache store implementing CacheStoreProtocol."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired:
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> ShowDetails | None:
        entry = await self.get_entry(key)
        return entry.value if entry is not None else None

    async def set(self, key: str, value: ShowDetails, ttl: timedelta) -> None:
        now = datetime.now(UTC)
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            fetched_at=now,
            expires_at=now + ttl,
        )

    async def cleanup_expired(self) -> None:
        expired = [key for key, entry in self._entries.items() if entry.expired]
        for key in expired:
            del self._entries[key]
        log.info("cache_cleanup_complete", backend="memory", deleted=len(expired))


_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS show_details_cache (
    cache_key   TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    fetched_at  TEXT NOT NULL,
    expires_at  TEXT NOT NULL
)
"""

_CREATE_INDEX = (
    "CREATE INDEX IF NOT EXISTS idx_show_details_expires ON show_details_cache(expires_at)"
)


class SqliteCacheStore:
    """SQLite-backed cache store implementing CacheStoreProtocol."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def init_db(self) -> None:
        """Create the table and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_TABLE)
        await self._db.execute(_CREATE_INDEX)
        await self._db.commit()

    async def get_entry(self, key: str) -> CacheEntry | None:
        """Read a live entry. Returns ``None`` on miss, expiry or read failure."""
        try:
            cursor = await self._db.execute(
                "SELECT cache_key, value, fetched_at, expires_at "
                "FROM show_details_cache WHERE cache_key = ?",
                (key,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            entry = CacheEntry(
                key=row[0],
                value=ShowDetails.model_validate_json(row[1]),
                fetched_at=datetime.fromisoformat(row[2]),
                expires_at=datetime.fromisoformat(row[3]),
            )
        except aiosqlite.Error:
            log.warning("cache_read_error", key=key, exc_info=True)
            return None
        except ValueError:
            log.warning("cache_entry_corrupt", key=key, exc_info=True)
            return None

        if entry.expired:
            return None
        return entry

    async def get(self, key: str) -> ShowDetails | None:
        entry = await self.get_entry(key)
        return entry.value if entry is not None else None

    async def set(self, key: str, value: ShowDetails, ttl: timedelta) -> None:
        """Write an entry. Non-fatal on failure."""
        try:
            now = datetime.now(UTC)
            await self._db.execute(
                "INSERT OR REPLACE INTO show_details_cache "
                "(cache_key, value, fetched_at, expires_at) VALUES (?, ?, ?, ?)",
                (
                    key,
                    value.model_dump_json(),
                    now.isoformat(),
                    (now + ttl).isoformat(),
                ),
            )
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_write_error", key=key, exc_info=True)

    async def cleanup_expired(self) -> None:
        """Delete all expired entries. Non-fatal on failure."""
        try:
            cursor = await self._db.execute(
                "DELETE FROM show_details_cache WHERE expires_at < ?",
                (datetime.now(UTC).isoformat(),),
            )
            deleted = cursor.rowcount
            await self._db.commit()
            log.info("cache_cleanup_complete", backend="sqlite", deleted=deleted)
        except aiosqlite.Error:
            log.warning("cache_cleanup_error", exc_info=True)
