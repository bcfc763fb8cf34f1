"""Background scheduler coroutine for cache cleanup."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from showdetails.state import AppState

log = structlog.get_logger()


async def run_cache_cleanup_scheduler(state: AppState) -> None:
    """Evict expired cache entries every ``cleanup_interval_hours``.

    Runs until cancelled. A failing cleanup is logged and retried on the
    next interval.
    """
    interval_seconds = state.settings.cache.cleanup_interval_hours * 3600

    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await state.store.cleanup_expired()
        except Exception:
            log.warning("cache_cleanup_scheduler_error", exc_info=True)
