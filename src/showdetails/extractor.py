"""Blog post HTML → show description fragment.

A fixed, ordered sequence of string transformations that narrows a full blog
post page down to the recap text below the embedded video. Each step returns
its input unchanged when the structure it looks for is missing, so pages
without an iframe, article wrapper or back-to-top link still pass through.
This is not an HTML parser: only the handful of structures the
archive's theme produces are recognised.
"""

from __future__ import annotations

import re
from typing import Literal

HeadingMode = Literal["legacy", "decrement"]

# Applied top to bottom so a demoted heading is never demoted twice.
# "legacy" collapses h1-h4 onto h5; "decrement" shifts each level down by one.
HEADING_MAPS: dict[HeadingMode, tuple[tuple[int, int], ...]] = {
    "legacy": ((5, 6), (4, 5), (3, 5), (2, 5), (1, 5)),
    "decrement": ((5, 6), (4, 5), (3, 4), (2, 3), (1, 2)),
}

_SCRIPT_RE = re.compile(r"<script.+?</script>", re.IGNORECASE | re.DOTALL)
_ARTICLE_RE = re.compile(r"<article\b[^>]*>(.+?)</article>", re.IGNORECASE | re.DOTALL)
_ENTRY_CONTENT_RE = re.compile(
    r'<div class="entry-content">(.+?)</div><!-- \.entry-content',
    re.IGNORECASE | re.DOTALL,
)
_IFRAME_RE = re.compile(r"<iframe.+?</iframe>", re.IGNORECASE | re.DOTALL)

_BACK_TO_TOP_OPEN = '<div class="back-to-top-wrap"'
_DIV_CLOSE = "</div>"


def extract(raw_html: str, source_url: str, heading_mode: HeadingMode = "legacy") -> str:
    """Reduce a blog post page to its show description, with an attribution line."""
    content = remove_script_elements(raw_html)
    content = demote_headings(content, heading_mode)
    content = extract_article_content(content)
    content = extract_entry_content(content)
    content = extract_content_below_video(content)
    content = remove_leading_closing_tags(content)
    content = remove_back_to_top_link(content)
    return prepend_source_attribution(content, source_url)


def remove_script_elements(html: str) -> str:
    return _SCRIPT_RE.sub("", html)


def demote_headings(html: str, mode: HeadingMode = "legacy") -> str:
    for from_level, to_level in HEADING_MAPS[mode]:
        html = re.sub(f"<h{from_level}>", f"<h{to_level}>", html, flags=re.IGNORECASE)
        html = re.sub(f"</h{from_level}>", f"</h{to_level}>", html, flags=re.IGNORECASE)
    return html


def extract_article_content(html: str) -> str:
    match = _ARTICLE_RE.search(html)
    if match and match.group(1).strip():
        return match.group(1)
    return html


def extract_entry_content(html: str) -> str:
    match = _ENTRY_CONTENT_RE.search(html)
    if match and match.group(1).strip():
        return match.group(1)
    return html


def extract_content_below_video(html: str) -> str:
    """Keep only what follows the first embedded iframe, if anything does."""
    match = _IFRAME_RE.search(html)
    if match is None:
        return html

    below = html[match.end() :]
    if below.strip():
        return below
    return html


def remove_leading_closing_tags(html: str) -> str:
    """Drop closing tags left dangling at the start by the previous cuts."""
    if not html.strip():
        return html

    while html.startswith("</"):
        tag_end = html.find(">")
        if tag_end == -1:
            return ""
        html = html[tag_end + 1 :]
        if not html.strip():
            return ""

    return html


def remove_back_to_top_link(html: str) -> str:
    if not html.strip():
        return html

    start = html.find(_BACK_TO_TOP_OPEN)
    if start == -1:
        return html

    close = html.find(_DIV_CLOSE, start)
    if close <= start:
        return html

    span = html[start : close + len(_DIV_CLOSE)]
    return html.replace(span, "")


def prepend_source_attribution(html: str, source_url: str) -> str:
    if not html.strip() or not source_url.strip():
        return html

    attribution = f'<p><i><a href="{source_url}">Content grabbed from {source_url}</a></i></p>'
    return f"{attribution}\r\n{html}"
