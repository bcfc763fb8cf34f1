from __future__ import annotations

from showdetails.models.blog import BlogLink, PageState
from showdetails.models.cache import CacheEntry
from showdetails.models.show import ContentsEnvelope, ShowDetails

__all__ = [
    # show details
    "ShowDetails",
    "ContentsEnvelope",
    # cache
    "CacheEntry",
    # blog archive
    "BlogLink",
    "PageState",
]
