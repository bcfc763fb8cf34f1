"""Structured telemetry side channel.

Dependency and exception events are emitted through structlog on a logger
bound to ``channel="telemetry"``, so they can be routed separately from the
application log by any processor downstream.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass
class DependencyCall:
    """Mutable record yielded by ``Telemetry.dependency``; set ``success`` before exit."""

    name: str
    target: str
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    success: bool = False


class Telemetry:
    def __init__(self, logger: Any = None) -> None:
        base = logger if logger is not None else structlog.get_logger()
        self._log = base.bind(channel="telemetry")

    def track_dependency(
        self,
        name: str,
        target: str,
        *,
        started_at: datetime,
        duration: timedelta,
        success: bool,
    ) -> None:
        self._log.info(
            "dependency",
            name=name,
            target=target,
            started_at=started_at.isoformat(),
            duration_ms=round(duration.total_seconds() * 1000, 3),
            success=success,
        )

    def track_exception(self, exc: BaseException, **context: Any) -> None:
        self._log.warning(
            "exception",
            exception_type=type(exc).__name__,
            exc_info=exc,
            **context,
        )

    @contextmanager
    def dependency(self, name: str, target: str) -> Iterator[DependencyCall]:
        """Time the enclosed block and emit one dependency event on exit.

        An exception escaping the block leaves ``success`` False and is
        re-raised.
        """
        call = DependencyCall(name=name, target=target)
        start = time.perf_counter()
        try:
            yield call
        finally:
            self.track_dependency(
                name,
                target,
                started_at=call.started_at,
                duration=timedelta(seconds=time.perf_counter() - start),
                success=call.success,
            )
