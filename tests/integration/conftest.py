"""Integration test fixtures.

Provides a fully wired AppState around the real GitHub source, an in-memory
cache store and a respx-mockable httpx client, plus an ASGI client for the
Starlette app. Shared HTML builders come from tests/conftest.py.
"""

from __future__ import annotations

import httpx
import pytest

from showdetails.cache import MemoryCacheStore
from showdetails.config import Settings
from showdetails.fetcher import Fetcher
from showdetails.server import create_app
from showdetails.service import ShowDetailsService
from showdetails.sources import build_source
from showdetails.state import AppState
from showdetails.telemetry import Telemetry


@pytest.fixture()
async def app_state():
    """AppState wired like production, with the default (GitHub) source."""
    settings = Settings()
    telemetry = Telemetry()
    store = MemoryCacheStore()

    async with httpx.AsyncClient() as http_client:
        source = build_source(settings, Fetcher(http_client, telemetry), telemetry)
        yield AppState(
            settings=settings,
            store=store,
            service=ShowDetailsService.from_settings(source, store, settings.cache),
            telemetry=telemetry,
            http_client=http_client,
        )


@pytest.fixture()
async def api_client(app_state: AppState):
    """httpx client talking to the Starlette app in-process."""
    app = create_app(state=app_state)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://localhost") as client:
        yield client
