"""Application state container.

AppState is created once at startup (inside the server lifespan) and reached
from every request handler through ``request.app.state.showdetails``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from showdetails.config import Settings
    from showdetails.protocols import CacheStoreProtocol
    from showdetails.service import ShowDetailsService
    from showdetails.telemetry import Telemetry


@dataclass
class AppState:
    """Holds all shared runtime state."""

    settings: Settings
    store: CacheStoreProtocol
    service: ShowDetailsService
    telemetry: Telemetry
    http_client: httpx.AsyncClient | None = None
