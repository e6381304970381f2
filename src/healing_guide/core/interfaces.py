"""Async interfaces (protocols) for the resolution pipeline.

The resolvers depend on these protocols only, so stores and the provider
client can be swapped for fakes in tests.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol, runtime_checkable

from .models import CacheEntry, CandidateResult, SymptomDocument

if TYPE_CHECKING:
    from ..config.settings import RetryPolicy


@runtime_checkable
class TextGenerator(Protocol):
    """Single-attempt access to the generative provider."""

    async def generate(
        self,
        prompt: str,
        json_mode: bool = False,
        *,
        system_instruction: str | None = None,
        history: list[dict[str, str]] | None = None,
    ) -> str:
        """Return the raw text of the first candidate."""


@runtime_checkable
class CatalogReader(Protocol):
    """Read-only access to curated documents."""

    async def get(self, slug: str) -> SymptomDocument | None:
        """Return the curated document for `slug`, if any."""


@runtime_checkable
class DocumentCache(Protocol):
    """Previously generated documents, upserted by slug."""

    async def get(self, slug: str) -> CacheEntry | None:
        """Return the cached row for `slug`, if any."""

    async def upsert(self, slug: str, name: str, document: SymptomDocument) -> None:
        """Insert or replace the row for `slug`."""

    def is_toxic(self, entry: CacheEntry) -> bool:
        """Whether `entry` was written by the old generic fallback."""


@runtime_checkable
class SearchCache(Protocol):
    """Previously generated candidate lists, insert-only."""

    async def get(self, search_key: str) -> list[CandidateResult] | None:
        """Return the cached list for `search_key`, if any."""

    async def insert(self, search_key: str, results: list[CandidateResult]) -> None:
        """Store `results` unless `search_key` already has a list."""


@runtime_checkable
class ResilienceManager(Protocol):
    """Encapsulates retry / backoff logic for fragile ops."""

    async def execute(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        max_retries: int = 2,
        initial_delay: float = 2.0,
        backoff_factor: float = 2.0,
        **kwargs: Any,
    ) -> Any:
        """Execute `func(*args, **kwargs)` with retries applied.

        Should raise the last exception once retries are exhausted, and
        immediately for non-retryable errors.
        """

    async def execute_with_policy(
        self, func: Callable[..., Awaitable[Any]], policy: RetryPolicy, *args: Any, **kwargs: Any
    ) -> Any:
        """Same as `execute`, taking the retry parameters from `policy`."""
