"""Lenient month/day parsing for date tokens scraped from post URLs.

Recap post slugs spell dates inconsistently (``may-10-2016``,
``05-10th-2016``, ``September-3-2015``), so both parsers accept loose
input and return ``None`` instead of raising when a token is unusable.
"""

from __future__ import annotations

import re

_DIGITS_RE = re.compile(r"\d+")
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")

MONTH_ABBREVIATIONS: dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}


def parse_month(token: str | None) -> int | None:
    """Parse a month token: an integer or a name starting with a 3-letter abbreviation.

    Integers are returned as-is without a 1-12 range check, so ``"13"``
    yields ``13``; building a date from it fails later in the locator.
    """
    if token is None or not token.strip():
        return None

    if _INTEGER_RE.match(token):
        return int(token)

    normalised = token.strip().lower()
    if len(normalised) < 3:
        return None

    return MONTH_ABBREVIATIONS.get(normalised[:3])


def parse_day(token: str | None) -> int | None:
    """Parse the first run of digits in a day token (``"3rd"`` → ``3``)."""
    if token is None or not token.strip():
        return None

    match = _DIGITS_RE.search(token)
    if match is None:
        return None
    return int(match.group())
