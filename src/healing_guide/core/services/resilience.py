"""Retry scheduling with bounded exponential backoff."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

from ...config.settings import RetryPolicy

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]


def is_retryable(error: BaseException) -> bool:
    """Errors opt out of retries with a falsy `retryable` attribute."""
    return bool(getattr(error, "retryable", True))


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int,
    initial_delay: float,
    backoff_factor: float,
    sleep: SleepFunc = asyncio.sleep,
) -> T:
    """Run `operation`, retrying up to `max_retries` more times on failure.

    The k-th retry waits `initial_delay * backoff_factor ** k` seconds.
    Non-retryable errors are raised on the spot, whatever budget remains.
    """
    retries_left = max_retries
    delay = initial_delay
    while True:
        try:
            return await operation()
        except Exception as e:
            if retries_left <= 0 or not is_retryable(e):
                raise
            logger.warning(
                f"Retrying after {type(e).__name__}: {e} "
                f"(attempts left: {retries_left}, waiting {delay:.1f}s)"
            )
            await sleep(delay)
            retries_left -= 1
            delay *= backoff_factor


class SimpleResilienceManager:
    """ResilienceManager implementation backed by `with_retry`.

    `sleep` is injectable so callers (and tests) can observe or skip waits.
    """

    def __init__(self, sleep: SleepFunc | None = None) -> None:
        self._sleep = sleep or asyncio.sleep

    async def execute(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        max_retries: int = 2,
        initial_delay: float = 2.0,
        backoff_factor: float = 2.0,
        **kwargs: Any,
    ) -> Any:
        return await with_retry(
            lambda: func(*args, **kwargs),
            max_retries,
            initial_delay,
            backoff_factor,
            sleep=self._sleep,
        )

    async def execute_with_policy(
        self, func: Callable[..., Awaitable[Any]], policy: RetryPolicy, *args: Any, **kwargs: Any
    ) -> Any:
        return await self.execute(
            func,
            *args,
            max_retries=policy.max_retries,
            initial_delay=policy.initial_delay,
            backoff_factor=policy.backoff_factor,
            **kwargs,
        )
