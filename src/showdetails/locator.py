"""Archive locator: finds the recap post for a show in a paginated blog archive.

The archive is the tag-filtered listing of posts, newest first. Each listing
page is scanned for recap post links whose slug embeds a date
(``...-community-standup-may-10-2016/``); the first post published within the
acceptance window after the show date wins. Otherwise the locator follows the
pagination link for the next page number and keeps going.

Termination depends on the archive: traversal ends when a page has no link to
``current + 1``. ``max_pages`` caps the walk for archives that never stop
paginating; ``None`` leaves it unbounded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING

import structlog

from showdetails.dates import parse_day, parse_month
from showdetails.models.blog import BlogLink, PageState

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator

    from showdetails.config import BlogSettings

log = structlog.get_logger()

_YEAR_RE = re.compile(r"^\d+$")

DEFAULT_WINDOW_DAYS: tuple[int, int] = (0, 2)


class ArchiveLayout:
    """URL scheme and link patterns of one blog archive."""

    def __init__(self, base_url: str, tag: str, post_slug: str) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.tag = tag
        self.post_slug = post_slug
        self.archive_url = f"{self.base_url}tag/{tag}/"

        base = re.escape(self.base_url)
        self.post_link_re = re.compile(
            r'<h2 class="entry-title"><a href="('
            + base
            + r"\d{4}/\d{2}/\d{2}/"
            + re.escape(post_slug)
            + r'-(\w+)-(\w+)-(\w+)[^"]*)" rel="bookmark">(.+?)</a></h2>'
        )
        self.page_link_re = re.compile(
            r"<a class=['\"]page-numbers['\"] href=['\"]("
            + re.escape(self.archive_url)
            + r"page/(\d+)/)['\"]>\d+</a>"
        )

    @classmethod
    def from_settings(cls, settings: BlogSettings) -> ArchiveLayout:
        return cls(settings.base_url, settings.tag, settings.post_slug)

    def page_url(self, page_number: int) -> str:
        if page_number <= 1:
            return self.archive_url
        return f"{self.archive_url}page/{page_number}/"


@dataclass(frozen=True)
class MatchWindow:
    """Accept posts published ``min_days <= days_after_show < max_days``."""

    min_days: int = DEFAULT_WINDOW_DAYS[0]
    max_days: int = DEFAULT_WINDOW_DAYS[1]

    def accepts(self, days_after_show: int) -> bool:
        return self.min_days <= days_after_show < self.max_days


def iter_post_links(listing_html: str, layout: ArchiveLayout) -> Iterator[BlogLink]:
    """Yield recap post candidates in document order."""
    for match in layout.post_link_re.finditer(listing_html):
        yield BlogLink(
            target_url=match.group(1),
            month_token=match.group(2),
            day_token=match.group(3),
            year_token=match.group(4),
        )


def post_date(link: BlogLink) -> date | None:
    """Date encoded in the post slug, or None if the tokens don't form one."""
    if not _YEAR_RE.match(link.year_token):
        return None
    month = parse_month(link.month_token)
    day = parse_day(link.day_token)
    if month is None or day is None:
        return None

    try:
        return date(int(link.year_token), month, day)
    except (ValueError, OverflowError):
        log.warning(
            "blog_post_date_invalid",
            url=link.target_url,
            year=link.year_token,
            month=month,
            day=day,
        )
        return None


def match_post_link(
    show_date: date,
    listing_html: str,
    layout: ArchiveLayout,
    window: MatchWindow | None = None,
) -> str | None:
    """Return the URL of the first post on this page that falls in the window."""
    window = window or MatchWindow()
    for link in iter_post_links(listing_html, layout):
        published = post_date(link)
        if published is None:
            continue
        if window.accepts((published - show_date).days):
            return link.target_url
    return None


def next_page_link(listing_html: str, current_page: int, layout: ArchiveLayout) -> str | None:
    """Return the pagination link pointing at ``current_page + 1``, if present."""
    for match in layout.page_link_re.finditer(listing_html):
        if int(match.group(2)) == current_page + 1:
            return match.group(1)
    return None


async def find_post_link(
    show_date: date | datetime,
    listing_html: str,
    fetch_page: Callable[[int], Awaitable[str]],
    layout: ArchiveLayout,
    *,
    window: MatchWindow | None = None,
    max_pages: int | None = None,
) -> str | None:
    """Walk the archive from page 1 until a recap post for ``show_date`` is found.

    ``listing_html`` is page 1; ``fetch_page(n)`` returns the HTML of page
    ``n``. Fetch errors propagate to the caller.
    """
    if isinstance(show_date, datetime):
        show_date = show_date.date()

    page = PageState(page_number=1, html=listing_html)
    while True:
        url = match_post_link(show_date, page.html, layout, window)
        if url is not None:
            log.debug("blog_post_matched", url=url, page=page.page_number)
            return url

        if max_pages is not None and page.page_number >= max_pages:
            log.warning("blog_archive_page_limit_reached", max_pages=max_pages)
            return None

        if next_page_link(page.html, page.page_number, layout) is None:
            log.debug("blog_archive_exhausted", pages_scanned=page.page_number)
            return None

        next_number = page.page_number + 1
        page = PageState(page_number=next_number, html=await fetch_page(next_number))
