"""Candidate search: search cache, then the generative provider.

Unlike document resolution, search never fails loudly. Any error yields the
built-in substitute list as a `SearchDegraded` outcome.
"""

from __future__ import annotations

from loguru import logger

from ..config.defaults import DEFAULT_SEARCH_ERROR, FALLBACK_CANDIDATES
from ..config.settings import SEARCH_RETRY, RetryPolicy
from .decoding import decode_candidates
from .interfaces import ResilienceManager, SearchCache, TextGenerator
from .models import CandidateResult, SearchDegraded, SearchOk, SearchOutcome
from .normalizer import to_search_key
from .prompts import search_prompt
from .services.background import BackgroundWriter
from .services.resilience import SimpleResilienceManager
from .services.single_flight import SingleFlight


def fallback_candidates() -> list[CandidateResult]:
    """Fresh copies of the built-in substitute list."""
    return [CandidateResult.model_validate(item) for item in FALLBACK_CANDIDATES]


class CandidateResolver:
    """Resolves a free-text query into a list of candidate symptoms."""

    def __init__(
        self,
        generator: TextGenerator,
        search_cache: SearchCache,
        resilience_manager: ResilienceManager | None = None,
        background: BackgroundWriter | None = None,
        retry_policy: RetryPolicy = SEARCH_RETRY,
        coalesce_inflight: bool = True,
    ) -> None:
        self.generator = generator
        self.search_cache = search_cache
        self.resilience_manager = resilience_manager or SimpleResilienceManager()
        self.background = background or BackgroundWriter()
        self.retry_policy = retry_policy
        self._flight: SingleFlight[list[CandidateResult]] | None = (
            SingleFlight("search") if coalesce_inflight else None
        )

    async def search(self, query: str) -> SearchOutcome:
        """Return candidates for `query`. Never raises."""
        key = to_search_key(query)

        cached = await self._check_cache(key)
        if cached:
            return SearchOk(results=cached, source="cache")

        try:
            if self._flight is None:
                results = await self._generate_and_persist(key, query)
            else:
                results = await self._flight.do(key, lambda: self._generate_and_persist(key, query))
        except Exception as e:
            reason = str(e) or DEFAULT_SEARCH_ERROR
            logger.warning(f"Search degraded to built-in candidates for '{key}': {reason}")
            return SearchDegraded(results=fallback_candidates(), reason=reason)

        return SearchOk(results=results, source="provider")

    async def search_payload(self, query: str) -> list[dict]:
        """`search` rendered as plain dicts, degraded marker on element 0."""
        outcome = await self.search(query)
        return outcome.to_payload()

    async def _check_cache(self, key: str) -> list[CandidateResult] | None:
        try:
            cached = await self.search_cache.get(key)
        except Exception as e:
            logger.warning(f"Search cache lookup failed for '{key}': {e}")
            return None
        if cached:
            logger.debug(f"Search cache hit for '{key}'")
        return cached

    async def _generate_and_persist(self, key: str, query: str) -> list[CandidateResult]:
        prompt = search_prompt(query)

        async def _attempt() -> list[CandidateResult]:
            raw = await self.generator.generate(prompt, json_mode=True)
            return decode_candidates(raw)

        results = await self.resilience_manager.execute_with_policy(_attempt, self.retry_policy)
        self.persist(key, results)
        return results

    def persist(self, key: str, results: list[CandidateResult]):
        """Insert `results` into the search cache without waiting for it."""
        return self.background.spawn(
            self.search_cache.insert(key, results),
            description=f"search_cache insert '{key}'",
        )
