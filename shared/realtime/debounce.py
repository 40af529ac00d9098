import asyncio
from typing import Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)


class DebouncedTask:
    """
    Collapses a burst of trigger() calls into a single run of `func`.

    Only a run that has not reached `func` yet is cancelled by a new
    trigger; a run already executing is left to finish, so the last run to
    complete wins.
    """

    def __init__(self, func: Callable[[], Awaitable[None]], delay: float):
        self.func = func
        self.delay = delay
        self._pending: asyncio.Task | None = None
        self._waiting: set[asyncio.Task] = set()
        self._running: set[asyncio.Task] = set()

    def trigger(self) -> None:
        if self._pending is not None and self._pending in self._waiting:
            self._pending.cancel()
        task = asyncio.get_running_loop().create_task(self._run())
        self._pending = task
        self._waiting.add(task)
        self._running.add(task)
        task.add_done_callback(self._forget)

    def _forget(self, task: asyncio.Task) -> None:
        self._waiting.discard(task)
        self._running.discard(task)

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        self._waiting.discard(asyncio.current_task())
        try:
            await self.func()
        except Exception as exc:
            logger.error("debounced_task_failed", error=str(exc))

    async def flush(self) -> None:
        """Wait for every scheduled run to finish."""
        while self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)

    def cancel(self) -> None:
        for task in list(self._running):
            task.cancel()
