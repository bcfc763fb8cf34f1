"""Content sources and the factory that picks the configured one."""

from __future__ import annotations

from typing import TYPE_CHECKING

from showdetails.sources.blog import BlogShowDetailsSource
from showdetails.sources.github import GitHubRepoShowDetailsSource

if TYPE_CHECKING:
    from showdetails.config import Settings
    from showdetails.fetcher import Fetcher
    from showdetails.protocols import ShowDetailsSourceProtocol
    from showdetails.telemetry import Telemetry

__all__ = [
    "BlogShowDetailsSource",
    "GitHubRepoShowDetailsSource",
    "build_source",
]


def build_source(
    settings: Settings, fetcher: Fetcher, telemetry: Telemetry
) -> ShowDetailsSourceProtocol:
    """Return the content source selected by ``settings.source``."""
    if settings.source == "blog":
        return BlogShowDetailsSource(fetcher, settings.blog, telemetry)
    return GitHubRepoShowDetailsSource(fetcher, settings.github, telemetry)
