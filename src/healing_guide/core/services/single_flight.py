"""Per-key coalescing of concurrent calls (single-flight)."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Generic, TypeVar

from loguru import logger

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Share one in-flight call among concurrent callers of the same key.

    The first caller for a key starts `func` as a task owned by the flight;
    every caller, the first included, awaits that task through a shield.
    Cancelling one caller therefore never cancels the shared work or the
    other callers. The key is forgotten as soon as the task settles, so
    later calls run again.
    """

    def __init__(self, name: str = "single-flight") -> None:
        self.name = name
        self._inflight: dict[str, asyncio.Task] = {}

    async def do(self, key: str, func: Callable[[], Awaitable[T]]) -> T:
        task = self._inflight.get(key)
        if task is not None:
            logger.debug(f"[{self.name}] joining in-flight call for '{key}'")
        else:
            task = asyncio.ensure_future(func())
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._settle(key, t))
        return await asyncio.shield(task)

    def _settle(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled() and task.exception() is not None:
            # Every caller may have gone away; the exception is still consumed.
            logger.debug(f"[{self.name}] call for '{key}' failed: {task.exception()}")

    def __contains__(self, key: Any) -> bool:
        return key in self._inflight
