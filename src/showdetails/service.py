"""Show-details service: the cache in front of the active content source.

A hit is returned without touching the source. On a miss the source is
asked to resolve the show; found content is cached for ``found_ttl`` and a
"not found" is cached as an empty ShowDetails for the shorter
``not_found_ttl``, so shows without details don't hit the upstream on every
request. Concurrent misses for the same show are not deduplicated: both
resolve and the last write wins.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import structlog

from showdetails.errors import ErrorCode, ShowDetailsError
from showdetails.models.show import ShowDetails

if TYPE_CHECKING:
    from datetime import date, datetime

    from showdetails.config import CacheSettings
    from showdetails.protocols import CacheStoreProtocol, ShowDetailsSourceProtocol

ENTITY_KIND = "ShowDetails"
DEFAULT_FOUND_TTL = timedelta(hours=24)
DEFAULT_NOT_FOUND_TTL = timedelta(hours=1)


class ShowDetailsService:
    def __init__(
        self,
        source: ShowDetailsSourceProtocol,
        store: CacheStoreProtocol,
        *,
        found_ttl: timedelta = DEFAULT_FOUND_TTL,
        not_found_ttl: timedelta = DEFAULT_NOT_FOUND_TTL,
    ) -> None:
        self._source = source
        self._store = store
        self.found_ttl = found_ttl
        self.not_found_ttl = not_found_ttl

    @classmethod
    def from_settings(
        cls,
        source: ShowDetailsSourceProtocol,
        store: CacheStoreProtocol,
        settings: CacheSettings,
    ) -> ShowDetailsService:
        return cls(
            source,
            store,
            found_ttl=timedelta(hours=settings.found_ttl_hours),
            not_found_ttl=timedelta(hours=settings.not_found_ttl_hours),
        )

    @property
    def source_name(self) -> str:
        return self._source.name

    def cache_key(self, show_id: str) -> str:
        return f"{self._source.name}_{ENTITY_KIND}_{show_id}"

    async def load(self, show_id: str, show_date: date | datetime | None = None) -> ShowDetails:
        """Return the show details for ``show_id``; empty description if none exist."""
        if not show_id or not show_id.strip():
            raise ShowDetailsError(
                code=ErrorCode.INVALID_INPUT,
                message="show_id must be a non-empty string.",
                suggestion="Pass the identifier of a scheduled show.",
                recoverable=False,
            )

        log = structlog.get_logger().bind(source=self._source.name, show_id=show_id)
        key = self.cache_key(show_id)

        cached = await self._store.get(key)
        if cached is not None:
            log.info("cache_hit", empty=cached.is_empty)
            return cached

        log.info("cache_miss_resolving")
        show_details = await self._source.resolve(show_id, show_date)

        found = show_details is not None
        if show_details is None:
            show_details = ShowDetails(show_id=show_id)
        ttl = self.found_ttl if found else self.not_found_ttl

        await self._store.set(key, show_details, ttl)
        log.info("cache_stored", found=found, ttl_seconds=ttl.total_seconds())
        return show_details

    async def save(self, show_details: ShowDetails) -> None:
        await self._source.save(show_details)

    async def delete(self, show_id: str) -> None:
        await self._source.delete(show_id)
