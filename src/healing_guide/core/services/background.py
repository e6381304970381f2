"""Detached background writes.

Cache persistence must never delay or fail the value being returned to a
caller. `BackgroundWriter.spawn` starts the write as its own task and keeps
a reference until it settles; failures only reach the log.
"""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine

from loguru import logger


class BackgroundWriter:
    """Tracks fire-and-forget persistence tasks."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def spawn(self, coro: Coroutine[Any, Any, Any], description: str) -> asyncio.Task:
        """Run `coro` detached from the caller. Returns the task for inspection."""
        task = asyncio.get_running_loop().create_task(coro, name=description)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug(f"Background write cancelled: {task.get_name()}")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Background write failed ({task.get_name()}): {error}")
        else:
            logger.debug(f"Background write completed: {task.get_name()}")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every pending write to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
