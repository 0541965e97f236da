"""Periodic one-second tick for the focus timer.

Runs as a task on the application's event loop, so every tick is a
synchronous transition that never overlaps another state change.
"""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class FocusTicker:
    """Calls a callback once per interval until stopped."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, on_tick: Callable[[], None]) -> None:
        """Start ticking on the running event loop (replaces any previous schedule)."""
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run(on_tick))

    def stop(self) -> None:
        """Cancel the schedule; no tick is delivered after this returns."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self, on_tick: Callable[[], None]) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                on_tick()
        except asyncio.CancelledError:
            logger.debug("Focus ticker stopped")
            raise
