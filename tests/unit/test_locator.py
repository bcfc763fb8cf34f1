"""Unit tests for showdetails.locator."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from showdetails.locator import (
    ArchiveLayout,
    MatchWindow,
    find_post_link,
    iter_post_links,
    match_post_link,
    next_page_link,
    post_date,
)
from showdetails.models.blog import BlogLink

SHOW_DATE = date(2016, 5, 10)

# ---------------------------------------------------------------------------
# ArchiveLayout
# ---------------------------------------------------------------------------


class TestArchiveLayout:
    def test_page_urls(self, layout: ArchiveLayout) -> None:
        assert layout.archive_url == (
            "https://blogs.msdn.microsoft.com/webdev/tag/communitystandup/"
        )
        assert layout.page_url(1) == layout.archive_url
        assert layout.page_url(3) == layout.archive_url + "page/3/"

    def test_base_url_without_trailing_slash(self) -> None:
        layout = ArchiveLayout("https://example.com/blog", "standup", "recap")
        assert layout.archive_url == "https://example.com/blog/tag/standup/"


# ---------------------------------------------------------------------------
# Link parsing
# ---------------------------------------------------------------------------


class TestIterPostLinks:
    def test_extracts_tokens_in_document_order(
        self, layout: ArchiveLayout, archive_page: Callable[..., str]
    ) -> None:
        links = list(iter_post_links(archive_page(["may-10-2016", "05-3rd-2016"]), layout))
        assert [(link.month_token, link.day_token, link.year_token) for link in links] == [
            ("may", "10", "2016"),
            ("05", "3rd", "2016"),
        ]
        assert links[0].target_url.endswith(
            "/2016/05/11/notes-from-the-asp-net-community-standup-may-10-2016/"
        )

    def test_ignores_other_posts(self, layout: ArchiveLayout) -> None:
        html = (
            '<h2 class="entry-title"><a href="https://blogs.msdn.microsoft.com/webdev/'
            '2016/05/11/announcing-rc2/" rel="bookmark">Announcing RC2</a></h2>\n'
            '<h2 class="entry-title"><a href="https://other.example.com/webdev/2016/05/11/'
            'notes-from-the-asp-net-community-standup-may-10-2016/" rel="bookmark">x</a></h2>'
        )
        assert list(iter_post_links(html, layout)) == []


class TestPostDate:
    def _link(self, month: str, day: str, year: str) -> BlogLink:
        return BlogLink("https://example.com/post/", month, day, year)

    def test_named_month(self) -> None:
        assert post_date(self._link("September", "3", "2015")) == date(2015, 9, 3)

    def test_numeric_month_with_ordinal_day(self) -> None:
        assert post_date(self._link("05", "10th", "2016")) == date(2016, 5, 10)

    def test_out_of_range_month_is_not_a_date(self) -> None:
        assert post_date(self._link("13", "1", "2016")) is None

    def test_impossible_day_is_not_a_date(self) -> None:
        assert post_date(self._link("feb", "30", "2016")) is None

    def test_oversized_day_is_not_a_date(self) -> None:
        assert post_date(self._link("may", "99999999999999999999", "2016")) is None

    def test_oversized_year_is_not_a_date(self) -> None:
        assert post_date(self._link("may", "10", "99999999999999999999")) is None

    def test_non_numeric_year(self) -> None:
        assert post_date(self._link("may", "10", "twenty16")) is None

    def test_unparseable_month(self) -> None:
        assert post_date(self._link("xyz", "10", "2016")) is None


class TestNextPageLink:
    def test_finds_current_plus_one(self, layout: ArchiveLayout, archive_page) -> None:
        html = archive_page(page_links=[1, 2, 3, 10])
        assert next_page_link(html, 1, layout) == layout.page_url(2)
        assert next_page_link(html, 2, layout) == layout.page_url(3)

    def test_gap_in_pagination(self, layout: ArchiveLayout, archive_page) -> None:
        assert next_page_link(archive_page(page_links=[1, 3]), 1, layout) is None

    def test_double_quoted_anchor(self, layout: ArchiveLayout) -> None:
        html = f'<a class="page-numbers" href="{layout.page_url(2)}">2</a>'
        assert next_page_link(html, 1, layout) == layout.page_url(2)


# ---------------------------------------------------------------------------
# Date window matching
# ---------------------------------------------------------------------------


class TestMatchPostLink:
    def test_post_on_show_date(self, layout: ArchiveLayout, archive_page, post_url) -> None:
        html = archive_page(["may-3-2016", "may-10-2016"])
        assert match_post_link(SHOW_DATE, html, layout) == post_url("may-10-2016")

    def test_post_one_day_after_show(self, layout: ArchiveLayout, archive_page, post_url) -> None:
        html = archive_page(["may-11-2016"])
        assert match_post_link(SHOW_DATE, html, layout) == post_url("may-11-2016")

    def test_first_match_in_document_order_wins(
        self, layout: ArchiveLayout, archive_page, post_url
    ) -> None:
        html = archive_page(["may-11-2016", "may-10-2016"])
        assert match_post_link(SHOW_DATE, html, layout) == post_url("may-11-2016")

    def test_two_days_after_is_outside_window(self, layout: ArchiveLayout, archive_page) -> None:
        assert match_post_link(SHOW_DATE, archive_page(["may-12-2016"]), layout) is None

    def test_post_before_show_is_outside_window(
        self, layout: ArchiveLayout, archive_page
    ) -> None:
        assert match_post_link(SHOW_DATE, archive_page(["may-9-2016"]), layout) is None

    def test_invalid_candidate_is_skipped(
        self, layout: ArchiveLayout, archive_page, post_url
    ) -> None:
        html = archive_page(["13-10-2016", "may-10-2016"])
        assert match_post_link(SHOW_DATE, html, layout) == post_url("may-10-2016")

    def test_oversized_candidate_is_skipped(
        self, layout: ArchiveLayout, archive_page, post_url
    ) -> None:
        html = archive_page(["may-99999999999999999999-2016", "may-10-2016"])
        assert match_post_link(SHOW_DATE, html, layout) == post_url("may-10-2016")

    def test_custom_window(self, layout: ArchiveLayout, archive_page, post_url) -> None:
        html = archive_page(["may-9-2016"])
        window = MatchWindow(min_days=-1, max_days=1)
        assert match_post_link(SHOW_DATE, html, layout, window) == post_url("may-9-2016")


# ---------------------------------------------------------------------------
# Archive traversal
# ---------------------------------------------------------------------------


class TestFindPostLink:
    async def test_found_on_first_page(self, layout: ArchiveLayout, archive_page, post_url) -> None:
        fetch_page = AsyncMock()
        url = await find_post_link(
            SHOW_DATE, archive_page(["may-10-2016"], page_links=[2]), fetch_page, layout
        )
        assert url == post_url("may-10-2016")
        fetch_page.assert_not_awaited()

    async def test_not_found_without_next_page(self, layout: ArchiveLayout, archive_page) -> None:
        fetch_page = AsyncMock()
        url = await find_post_link(SHOW_DATE, archive_page(["may-12-2016"]), fetch_page, layout)
        assert url is None
        fetch_page.assert_not_awaited()

    async def test_follows_pagination(self, layout: ArchiveLayout, archive_page, post_url) -> None:
        pages = {
            2: archive_page(["jun-7-2016"], page_links=[1, 3]),
            3: archive_page(["may-17-2016", "may-10-2016"], page_links=[1, 2]),
        }
        fetch_page = AsyncMock(side_effect=lambda n: pages[n])

        url = await find_post_link(
            SHOW_DATE, archive_page(["jun-14-2016"], page_links=[2, 3]), fetch_page, layout
        )

        assert url == post_url("may-10-2016")
        assert [c.args for c in fetch_page.await_args_list] == [(2,), (3,)]

    async def test_stops_when_pagination_ends(self, layout: ArchiveLayout, archive_page) -> None:
        fetch_page = AsyncMock(return_value=archive_page(["jun-7-2016"], page_links=[1]))
        url = await find_post_link(
            SHOW_DATE, archive_page(["jun-14-2016"], page_links=[2]), fetch_page, layout
        )
        assert url is None
        fetch_page.assert_awaited_once_with(2)

    async def test_max_pages_bounds_traversal(self, layout: ArchiveLayout, archive_page) -> None:
        # Every page links to the next one
        fetch_page = AsyncMock(side_effect=lambda n: archive_page(page_links=[n + 1]))
        url = await find_post_link(
            SHOW_DATE, archive_page(page_links=[2]), fetch_page, layout, max_pages=3
        )
        assert url is None
        assert [c.args for c in fetch_page.await_args_list] == [(2,), (3,)]

    async def test_accepts_datetime_with_offset(
        self, layout: ArchiveLayout, archive_page, post_url
    ) -> None:
        show_start = datetime(2016, 5, 10, 16, 30, tzinfo=timezone(timedelta(hours=-7)))
        url = await find_post_link(show_start, archive_page(["may-11-2016"]), AsyncMock(), layout)
        assert url == post_url("may-11-2016")

    async def test_fetch_errors_propagate(self, layout: ArchiveLayout, archive_page) -> None:
        fetch_page = AsyncMock(side_effect=RuntimeError("boom"))
        with pytest.raises(RuntimeError, match="boom"):
            await find_post_link(SHOW_DATE, archive_page(page_links=[2]), fetch_page, layout)
