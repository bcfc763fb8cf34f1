"""HTTP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState inside the Starlette lifespan context manager
- Route show-details requests to the service
- Start uvicorn
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager, suppress
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
import structlog
import uvicorn
from starlette.applications import Starlette
from starlette.endpoints import HTTPEndpoint
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from showdetails import __version__
from showdetails.cache import MemoryCacheStore, SqliteCacheStore
from showdetails.config import Settings
from showdetails.errors import ErrorCode, ShowDetailsError
from showdetails.fetcher import Fetcher, build_http_client
from showdetails.models.show import ShowDetails
from showdetails.schedulers import run_cache_cleanup_scheduler
from showdetails.service import ShowDetailsService
from showdetails.sources import build_source
from showdetails.state import AppState
from showdetails.telemetry import Telemetry

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request

    from showdetails.protocols import CacheStoreProtocol

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


async def _open_store(settings: Settings) -> tuple[CacheStoreProtocol, aiosqlite.Connection | None]:
    if settings.cache.backend != "sqlite":
        return MemoryCacheStore(), None

    db_path = Path(settings.cache.db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    db = await aiosqlite.connect(str(db_path))
    store = SqliteCacheStore(db)
    await store.init_db()
    return store, db


@asynccontextmanager
async def build_state(settings: Settings) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    telemetry = Telemetry()
    http_client = build_http_client(settings.fetcher)
    store, db = await _open_store(settings)

    fetcher = Fetcher(http_client, telemetry)
    source = build_source(settings, fetcher, telemetry)
    service = ShowDetailsService.from_settings(source, store, settings.cache)

    state = AppState(
        settings=settings,
        store=store,
        service=service,
        telemetry=telemetry,
        http_client=http_client,
    )
    cache_cleanup_task = asyncio.create_task(run_cache_cleanup_scheduler(state))

    try:
        yield state
    finally:
        cache_cleanup_task.cancel()
        with suppress(asyncio.CancelledError):
            await cache_cleanup_task
        await http_client.aclose()
        if db is not None:
            await db.close()


# ---------------------------------------------------------------------------
# Request handling
# ---------------------------------------------------------------------------

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.PAGE_NOT_FOUND: 404,
    ErrorCode.NOT_IMPLEMENTED: 501,
    ErrorCode.PAGE_FETCH_FAILED: 502,
}


def _invalid_input(message: str, suggestion: str) -> ShowDetailsError:
    return ShowDetailsError(
        code=ErrorCode.INVALID_INPUT,
        message=message,
        suggestion=suggestion,
        recoverable=False,
    )


def _parse_show_date(raw: str | None) -> datetime | None:
    if raw is None or not raw.strip():
        return None
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError as exc:
        raise _invalid_input(
            f"Invalid show date: {raw!r}",
            "Pass the show date as ISO 8601, e.g. 2016-05-10 or 2016-05-10T16:30:00-07:00.",
        ) from exc


class ShowDetailsEndpoint(HTTPEndpoint):
    async def get(self, request: Request) -> Response:
        state: AppState = request.app.state.showdetails
        show_date = _parse_show_date(request.query_params.get("date"))
        show_details = await state.service.load(request.path_params["show_id"], show_date)
        return JSONResponse(show_details.model_dump(mode="json"))

    async def put(self, request: Request) -> Response:
        state: AppState = request.app.state.showdetails
        try:
            body = await request.json()
            if not isinstance(body, dict):
                raise ValueError("request body must be a JSON object")
            show_details = ShowDetails(
                show_id=request.path_params["show_id"],
                description=body.get("description", ""),
            )
        except ValueError as exc:
            raise _invalid_input(
                f"Invalid show details body: {exc}",
                'Send a JSON object such as {"description": "..."}.',
            ) from exc

        await state.service.save(show_details)
        return Response(status_code=204)

    async def delete(self, request: Request) -> Response:
        state: AppState = request.app.state.showdetails
        await state.service.delete(request.path_params["show_id"])
        return Response(status_code=204)


async def _handle_show_details_error(request: Request, exc: Exception) -> Response:
    """Convert a ShowDetailsError into the JSON error envelope."""
    if not isinstance(exc, ShowDetailsError):
        raise exc
    log.warning(
        "request_error",
        method=request.method,
        path=request.url.path,
        code=exc.code,
        message=exc.message,
        recoverable=exc.recoverable,
    )
    return JSONResponse(exc.to_dict(), status_code=_STATUS_BY_CODE.get(exc.code, 500))


def create_app(settings: Settings | None = None, *, state: AppState | None = None) -> Starlette:
    """Build the Starlette app.

    With ``state`` given the app serves it as-is and the lifespan builds
    nothing; otherwise the lifespan creates the state from ``settings``.
    """

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncGenerator[None, None]:
        if state is not None:
            yield
            return

        resolved = settings or Settings()
        _setup_logging(resolved)
        log.info("server_starting", version=__version__, source=resolved.source)

        async with build_state(resolved) as built:
            app.state.showdetails = built
            log.info(
                "server_started",
                version=__version__,
                source=built.service.source_name,
                cache_backend=resolved.cache.backend,
            )
            yield

        log.info("server_stopping")

    app = Starlette(
        routes=[Route("/shows/{show_id}/details", ShowDetailsEndpoint)],
        exception_handlers={ShowDetailsError: _handle_show_details_error},
        lifespan=lifespan,
    )
    if state is not None:
        app.state.showdetails = state
    return app


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()
    _setup_logging(settings)

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # Disable uvicorn's default logging; structlog handles it
    )


if __name__ == "__main__":
    main()
