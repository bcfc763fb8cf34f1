"""Protocol interfaces for swappable components.

The show-details service references these protocols, not the concrete
implementations. This allows:
- Tests to use lightweight in-memory or call-counting implementations
- The content source (blog or GitHub) and the cache backend (memory or
  SQLite) to be chosen at startup without changing the service
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import date, datetime, timedelta

    from showdetails.models.cache import CacheEntry
    from showdetails.models.show import ShowDetails


class CacheStoreProtocol(Protocol):
    """Interface for the show-details cache backend."""

    async def get(self, key: str) -> ShowDetails | None: ...

    async def get_entry(self, key: str) -> CacheEntry | None: ...

    async def set(self, key: str, value: ShowDetails, ttl: timedelta) -> None: ...

    async def cleanup_expired(self) -> None: ...


class ShowDetailsSourceProtocol(Protocol):
    """Interface for an upstream that resolves show ids to show details.

    ``resolve`` returns None when the content does not exist or could not be
    fetched; it never raises for upstream failures.
    """

    name: str

    async def resolve(
        self, show_id: str, show_date: date | datetime | None = None
    ) -> ShowDetails | None: ...

    async def save(self, show_details: ShowDetails) -> None: ...

    async def delete(self, show_id: str) -> None: ...
