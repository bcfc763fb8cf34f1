from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel

from showdetails.models.show import ShowDetails


class CacheEntry(BaseModel):
    """One cached show-details value. A single entry exists per key."""

    key: str  # "{source}_{entity}_{show_id}"
    value: ShowDetails
    fetched_at: datetime
    expires_at: datetime

    @property
    def expired(self) -> bool:
        return datetime.now(UTC) >= self.expires_at
