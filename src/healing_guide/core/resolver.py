"""Document resolution: catalog, then cache, then the generative provider.

The catalog is authoritative and is never regenerated over. Generation
failures propagate to the caller: a guessed healing guide is worse than a
visible error.
"""

from __future__ import annotations

from loguru import logger

from ..config.settings import DOCUMENT_RETRY, RetryPolicy
from .decoding import decode_document
from .interfaces import CatalogReader, DocumentCache, ResilienceManager, TextGenerator
from .models import RegenerationStatus, SymptomDocument
from .normalizer import to_slug
from .prompts import document_prompt
from .services.background import BackgroundWriter
from .services.resilience import SimpleResilienceManager
from .services.single_flight import SingleFlight


class DocumentResolver:
    """Resolves a symptom name into a complete `SymptomDocument`."""

    def __init__(
        self,
        generator: TextGenerator,
        catalog: CatalogReader,
        cache: DocumentCache,
        resilience_manager: ResilienceManager | None = None,
        background: BackgroundWriter | None = None,
        retry_policy: RetryPolicy = DOCUMENT_RETRY,
        coalesce_inflight: bool = True,
    ) -> None:
        self.generator = generator
        self.catalog = catalog
        self.cache = cache
        self.resilience_manager = resilience_manager or SimpleResilienceManager()
        self.background = background or BackgroundWriter()
        self.retry_policy = retry_policy
        self._flight: SingleFlight[SymptomDocument] | None = (
            SingleFlight("documents") if coalesce_inflight else None
        )

    async def resolve(self, query: str) -> SymptomDocument:
        """Return the healing guide for `query`.

        Raises:
            ProviderError: Generation failed after the retry budget was spent
        """
        slug = to_slug(query)
        logger.debug(f"Resolving healing guide for '{query}' (slug '{slug}')")

        document = await self._check_catalog(slug)
        if document is not None:
            return document

        document = await self._check_cache(slug)
        if document is not None:
            return document

        return await self._generate_coalesced(slug, query.strip())

    async def regenerate(self, query: str) -> RegenerationStatus:
        """Force a fresh generation for `query`, bypassing the cache tier.

        A catalog entry still wins and is left untouched. Never raises.
        """
        slug = to_slug(query)
        try:
            if await self._check_catalog(slug) is not None:
                logger.info(f"'{slug}' is served from the catalog; nothing to regenerate")
                return RegenerationStatus.CATALOG
            await self._generate_coalesced(slug, query.strip())
        except Exception as e:
            logger.error(f"Regeneration failed for '{slug}': {e}")
            return RegenerationStatus.FAILED
        return RegenerationStatus.REGENERATED

    async def _check_catalog(self, slug: str) -> SymptomDocument | None:
        try:
            document = await self.catalog.get(slug)
        except Exception as e:
            logger.warning(f"Catalog lookup failed for '{slug}': {e}")
            return None
        if document is not None and document.is_complete:
            logger.debug(f"Catalog hit for '{slug}'")
            return document
        return None

    async def _check_cache(self, slug: str) -> SymptomDocument | None:
        try:
            entry = await self.cache.get(slug)
        except Exception as e:
            logger.warning(f"Cache lookup failed for '{slug}': {e}")
            return None
        if entry is None:
            return None

        if self.cache.is_toxic(entry):
            logger.warning(f"Toxic cache entry for '{slug}' (generic fallback); regenerating")
            return None
        if not entry.document.is_complete:
            logger.debug(f"Incomplete cache entry for '{slug}'; regenerating")
            return None

        logger.debug(f"Cache hit for '{slug}'")
        return entry.document

    async def _generate_coalesced(self, slug: str, name: str) -> SymptomDocument:
        if self._flight is None:
            return await self._generate_and_persist(slug, name)
        return await self._flight.do(slug, lambda: self._generate_and_persist(slug, name))

    async def _generate_and_persist(self, slug: str, name: str) -> SymptomDocument:
        logger.info(f"Generating healing guide for '{name}'")
        document = await self.generate(name)
        self.persist(slug, name, document)
        return document

    async def generate(self, name: str) -> SymptomDocument:
        """Ask the provider for a guide, retrying transient and shape errors."""
        prompt = document_prompt(name)

        async def _attempt() -> SymptomDocument:
            raw = await self.generator.generate(prompt, json_mode=True)
            return decode_document(raw, fallback_name=name)

        return await self.resilience_manager.execute_with_policy(_attempt, self.retry_policy)

    def persist(self, slug: str, name: str, document: SymptomDocument):
        """Upsert `document` into the cache without waiting for it."""
        return self.background.spawn(
            self.cache.upsert(slug, name, document),
            description=f"symptom_cache upsert '{slug}'",
        )
