"""Fixed-interval tick driver owned by the monitor."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Ticker:
    """Calls ``callback`` every ``interval_s`` seconds on the running loop.

    The callback is synchronous and runs to completion before the next
    wait begins, so ticks never overlap.  :meth:`cancel` stops the loop;
    no callback runs after it returns.
    """

    def __init__(self, name: str, interval_s: float, callback: Callable[[], object]) -> None:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be > 0, got {interval_s}")
        self.name = name
        self.interval_s = interval_s
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._cancelled = False
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"ticker:{self.name}"
        )

    async def _run(self) -> None:
        while not self._cancelled:
            await asyncio.sleep(self.interval_s)
            if self._cancelled:
                break
            try:
                self._callback()
            except Exception:
                logger.exception("Tick %s failed", self.name)

    async def cancel(self) -> None:
        self._cancelled = True
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
