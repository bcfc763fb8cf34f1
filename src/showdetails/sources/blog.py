"""Blog archive show-details source.

Finds the community standup recap post for a show date in the blog's
tag archive and narrows the post page down to its description. The blog is
a best-effort upstream: every failure on the resolution path is logged and
reported as "not found".
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

import structlog

from showdetails.errors import ErrorCode, ShowDetailsError, not_implemented
from showdetails.extractor import extract
from showdetails.locator import ArchiveLayout, MatchWindow, find_post_link
from showdetails.models.show import ShowDetails

if TYPE_CHECKING:
    from showdetails.config import BlogSettings
    from showdetails.fetcher import Fetcher
    from showdetails.telemetry import Telemetry


class BlogShowDetailsSource:
    """ShowDetailsSourceProtocol implementation backed by the blog archive."""

    name = "blog"

    def __init__(self, fetcher: Fetcher, settings: BlogSettings, telemetry: Telemetry) -> None:
        self._fetcher = fetcher
        self._settings = settings
        self._telemetry = telemetry
        self._layout = ArchiveLayout.from_settings(settings)
        self._window = MatchWindow(settings.min_days_after_show, settings.max_days_after_show)
        self._headers = {"Accept": "text/html", "User-Agent": settings.user_agent}

    async def resolve(
        self, show_id: str, show_date: date | datetime | None = None
    ) -> ShowDetails | None:
        log = structlog.get_logger().bind(source=self.name, show_id=show_id)
        if show_date is None:
            log.info("blog_resolve_skipped", reason="no_show_date")
            return None

        try:
            return await self._load_from_blog(show_id, show_date)
        except ShowDetailsError as exc:
            log.warning("blog_fetch_failed", code=exc.code, message=exc.message)
            if exc.code != ErrorCode.PAGE_NOT_FOUND:
                self._telemetry.track_exception(exc, source=self.name, show_id=show_id)
            return None
        except Exception as exc:
            log.warning("blog_resolve_error", exc_info=True)
            self._telemetry.track_exception(exc, source=self.name, show_id=show_id)
            return None

    async def save(self, show_details: ShowDetails) -> None:
        raise not_implemented("save", self.name)

    async def delete(self, show_id: str) -> None:
        raise not_implemented("delete", self.name)

    async def _load_from_blog(self, show_id: str, show_date: date | datetime) -> ShowDetails | None:
        log = structlog.get_logger().bind(source=self.name, show_id=show_id)

        with self._telemetry.dependency("BlogContent.FindBlogPostLinkForShow", show_id) as call:
            listing_html = await self._fetch(self._layout.archive_url)
            post_url = await find_post_link(
                show_date,
                listing_html,
                self._fetch_page,
                self._layout,
                window=self._window,
                max_pages=self._settings.max_pages,
            )
            call.success = post_url is not None

        if post_url is None:
            log.info("blog_post_not_found", show_date=str(show_date))
            return None

        with self._telemetry.dependency(
            "BlogContent.GetShowDescriptionFromBlogPost", show_id
        ) as call:
            post_html = await self._fetch(post_url)
            description = extract(post_html, post_url, self._settings.heading_mode)
            call.success = bool(description.strip())

        log.info("blog_post_extracted", url=post_url, description_length=len(description))
        return ShowDetails(show_id=show_id, description=description)

    async def _fetch_page(self, page_number: int) -> str:
        return await self._fetch(self._layout.page_url(page_number))

    async def _fetch(self, url: str) -> str:
        return await self._fetcher.fetch(url, headers=self._headers, operation="Blog.Get")
