"""Shared test fixtures for the showdetails test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from showdetails.config import BlogSettings, GitHubSettings
from showdetails.locator import ArchiveLayout
from showdetails.telemetry import Telemetry

BLOG_BASE = "https://blogs.msdn.microsoft.com/webdev/"
ARCHIVE_URL = f"{BLOG_BASE}tag/communitystandup/"


@pytest.fixture()
def blog_settings() -> BlogSettings:
    return BlogSettings()


@pytest.fixture()
def github_settings() -> GitHubSettings:
    return GitHubSettings()


@pytest.fixture()
def layout(blog_settings: BlogSettings) -> ArchiveLayout:
    return ArchiveLayout.from_settings(blog_settings)


@pytest.fixture()
def telemetry() -> Telemetry:
    return Telemetry()


@pytest.fixture()
def post_url() -> Callable[[str], str]:
    """Build a recap post URL from a slug date such as ``"may-10-2016"``."""

    def _build(slug_date: str, published: str = "2016/05/11") -> str:
        return f"{BLOG_BASE}{published}/notes-from-the-asp-net-community-standup-{slug_date}/"

    return _build


@pytest.fixture()
def archive_page(post_url: Callable[..., str]) -> Callable[..., str]:
    """Build an archive listing page the way the blog theme renders it.

    ``slug_dates`` become recap post entries in order; ``page_links`` become
    pagination anchors.
    """

    def _build(slug_dates: Sequence[str] = (), page_links: Sequence[int] = ()) -> str:
        entries = [
            "<article>\n"
            f'<h2 class="entry-title"><a href="{post_url(slug_date)}" rel="bookmark">'
            f"Notes from the ASP.NET Community Standup &#8211; {slug_date}</a></h2>\n"
            "</article>"
            for slug_date in slug_dates
        ]
        pagination = [
            f"<a class='page-numbers' href='{ARCHIVE_URL}page/{n}/'>{n}</a>" for n in page_links
        ]
        return (
            "<html><body>\n"
            + "\n".join(entries)
            + '\n<nav class="navigation pagination">\n'
            + "\n".join(pagination)
            + "\n</nav>\n</body></html>"
        )

    return _build


POST_PAGE = """<!DOCTYPE html>
<html><head>
<script type="text/javascript">
  var heading = "<h1>";
</script>
</head>
<body>
<article id="post-7441" class="post-7441 post type-post">
<h1 class="entry-title">Notes from the ASP.NET Community Standup &#8211; May 10, 2016</h1>
<div class="entry-content"><p>This is the next in a series of blog posts.</p>
<p><iframe src="https://www.youtube.com/embed/abc123" width="640" height="360"></iframe></p>
<h2>Community Links</h2>
<p>Jon shared the links for the week.</p>
<h3>Questions and Answers</h3>
<div class="back-to-top-wrap"><a href="#top">Back to top</a></div>
</div><!-- .entry-content -->
</article>
</body></html>
"""


@pytest.fixture()
def post_page() -> str:
    return POST_PAGE
