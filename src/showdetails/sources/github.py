"""GitHub content repository show-details source.

Show details live as ``{folder}/ShowDetails_{show_id}.json`` files in a
GitHub repository and are read through the contents API, which wraps the
file in a JSON envelope with base64 content. Writing would need an
authenticated API key, so save/delete are not supported.
"""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING
from urllib.parse import quote

import structlog

from showdetails.errors import ErrorCode, ShowDetailsError, not_implemented
from showdetails.models.show import ContentsEnvelope, ShowDetails

if TYPE_CHECKING:
    from datetime import date, datetime

    from showdetails.config import GitHubSettings
    from showdetails.fetcher import Fetcher
    from showdetails.telemetry import Telemetry


def content_url(settings: GitHubSettings, show_id: str) -> str:
    """Contents API URL of the show details file for ``show_id``."""
    api_url = settings.api_url.rstrip("/")
    path = f"{settings.folder}/ShowDetails_{show_id}.json"
    return (
        f"{api_url}/repos/{settings.owner}/{settings.repository}/contents/"
        f"{quote(path)}?ref={quote(settings.branch, safe='')}"
    )


def decode_show_details(envelope_json: str) -> ShowDetails:
    """Unwrap a contents API response into ShowDetails.

    Raises ValueError (including pydantic's ValidationError) when the envelope,
    the base64 payload or the decoded document is malformed.
    """
    envelope = ContentsEnvelope.model_validate_json(envelope_json)
    if envelope.encoding != "base64":
        raise ValueError(f"Unsupported content encoding: {envelope.encoding!r}")
    # GitHub wraps base64 content at 60 columns; b64decode drops the newlines
    raw = base64.b64decode(envelope.content)
    return ShowDetails.model_validate_json(raw.decode("utf-8"))


class GitHubRepoShowDetailsSource:
    """ShowDetailsSourceProtocol implementation backed by a GitHub repository."""

    name = "github"

    def __init__(self, fetcher: Fetcher, settings: GitHubSettings, telemetry: Telemetry) -> None:
        self._fetcher = fetcher
        self._settings = settings
        self._telemetry = telemetry
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": settings.user_agent,
        }

    async def resolve(
        self, show_id: str, show_date: date | datetime | None = None
    ) -> ShowDetails | None:
        log = structlog.get_logger().bind(source=self.name, show_id=show_id)
        url = content_url(self._settings, show_id)

        try:
            with self._telemetry.dependency("GitHub.Api", "repos.contents") as call:
                envelope_json = await self._fetcher.fetch(
                    url, headers=self._headers, operation="GitHub.Get"
                )
                show_details = decode_show_details(envelope_json)
                call.success = True
        except ShowDetailsError as exc:
            if exc.code == ErrorCode.PAGE_NOT_FOUND:
                log.info("github_show_details_not_found", url=url)
            else:
                log.warning("github_fetch_failed", code=exc.code, message=exc.message)
                self._telemetry.track_exception(exc, source=self.name, show_id=show_id)
            return None
        except ValueError as exc:
            log.warning("github_show_details_invalid", url=url, exc_info=True)
            self._telemetry.track_exception(exc, source=self.name, show_id=show_id)
            return None
        except Exception as exc:
            log.warning("github_resolve_error", url=url, exc_info=True)
            self._telemetry.track_exception(exc, source=self.name, show_id=show_id)
            return None

        if show_details.show_id != show_id:
            log.warning("github_show_id_mismatch", document_show_id=show_details.show_id)
            show_details = show_details.model_copy(update={"show_id": show_id})

        log.info("github_show_details_loaded", description_length=len(show_details.description))
        return show_details

    async def save(self, show_details: ShowDetails) -> None:
        # Supported by the contents API, but only with an authenticated key
        raise not_implemented("save", self.name)

    async def delete(self, show_id: str) -> None:
        raise not_implemented("delete", self.name)
