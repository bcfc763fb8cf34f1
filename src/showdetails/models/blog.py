from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BlogLink:
    """A candidate recap post found on an archive listing page."""

    target_url: str
    month_token: str  # "may", "May", "05", ...
    day_token: str  # "10", "10th", ...
    year_token: str


@dataclass(frozen=True)
class PageState:
    """Listing page currently being scanned by the archive locator."""

    page_number: int
    html: str
