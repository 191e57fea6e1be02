"""Debounced coverage rebuilds."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from reviewcov import logger
from reviewcov.config import DEBOUNCE_SECONDS

if TYPE_CHECKING:
    from collections.abc import Callable

    from reviewcov.engine.aggregate import CoverageAggregator
    from reviewcov.engine.tree import CoverageTree


class RebuildScheduler:
    """Coalesce bursts of change notifications into one rebuild.

    Every :meth:`notify` cancels the pending timer and arms a new one, so a
    rebuild happens *delay* seconds after the last notification of a burst.
    Must be used from inside a running event loop.
    """

    def __init__(
        self,
        aggregator: CoverageAggregator,
        *,
        delay: float = DEBOUNCE_SECONDS,
        on_rebuilt: Callable[[CoverageTree], object] | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._delay = delay
        self._on_rebuilt = on_rebuilt
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task[CoverageTree] | None = None
        self.notifications = 0
        self.rebuilds = 0

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def notify(self) -> None:
        self.notifications += 1
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def flush(self) -> CoverageTree | None:
        """Run a pending rebuild now and wait for the in-flight one to finish."""
        if self._timer is not None:
            self.cancel()
            self._fire()
        if self._task is None:
            return None
        return await self._task

    def _fire(self) -> None:
        self._timer = None
        self._aggregator.refresh()
        self._task = asyncio.get_running_loop().create_task(self._rebuild())
        self._task.add_done_callback(_log_failure)

    async def _rebuild(self) -> CoverageTree:
        tree = await self._aggregator.tree()
        self.rebuilds += 1
        logger.debug("coverage rebuilt after %d notification(s)", self.notifications)
        if self._on_rebuilt is not None:
            self._on_rebuilt(tree)
        return tree


def _log_failure(task: asyncio.Task[CoverageTree]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Coverage rebuild failed: %s", exc)


__all__ = ["RebuildScheduler"]
