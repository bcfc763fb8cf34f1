"""HTTP fetcher for upstream show content.

All network I/O goes through a single Fetcher instance sharing one
httpx.AsyncClient. The lifespan owns the client lifecycle. Every request is
reported to the telemetry sink as a dependency call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from showdetails import __version__
from showdetails.errors import ErrorCode, ShowDetailsError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from showdetails.config import FetcherSettings
    from showdetails.telemetry import Telemetry

log = structlog.get_logger()


def build_http_client(settings: FetcherSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": f"showdetails/{__version__}"},
        limits=httpx.Limits(
            max_connections=settings.max_connections,
            max_keepalive_connections=max(1, settings.max_connections // 2),
        ),
    )


class Fetcher:
    """GETs a URL and returns its body text, raising ShowDetailsError on failure."""

    def __init__(self, client: httpx.AsyncClient, telemetry: Telemetry) -> None:
        self._client = client
        self._telemetry = telemetry

    async def fetch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        operation: str = "HTTP GET",
    ) -> str:
        """Fetch ``url`` and return the response text.

        Raises ShowDetailsError with ``PAGE_NOT_FOUND`` on 404 and
        ``PAGE_FETCH_FAILED`` on other non-2xx responses, network errors and
        timeouts.
        """
        with self._telemetry.dependency(operation, url) as call:
            try:
                response = await self._client.get(url, headers=headers)
            except httpx.HTTPError as exc:
                raise ShowDetailsError(
                    code=ErrorCode.PAGE_FETCH_FAILED,
                    message=f"Network error fetching {url}: {exc}",
                    suggestion="The upstream source may be temporarily unavailable.",
                    recoverable=True,
                ) from exc

            if not response.is_success:
                if response.status_code == 404:
                    raise ShowDetailsError(
                        code=ErrorCode.PAGE_NOT_FOUND,
                        message=f"HTTP 404 fetching {url}",
                        suggestion="The requested content does not exist at this URL.",
                        recoverable=False,
                    )
                raise ShowDetailsError(
                    code=ErrorCode.PAGE_FETCH_FAILED,
                    message=f"HTTP {response.status_code} fetching {url}",
                    suggestion="The upstream source may be temporarily unavailable.",
                    recoverable=True,
                )

            call.success = True

        log.info(
            "fetch_complete",
            url=url,
            status_code=response.status_code,
            content_length=len(response.text),
        )
        return response.text
