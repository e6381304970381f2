"""SessionService: builds the pipeline once and owns its lifecycle."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from ...config.settings import AppConfig, load_config
from ...core.chat import ChatService
from ...core.database import CatalogStore, SearchCacheStore, SQLiteDatabase, SymptomCacheStore
from ...core.llm_client import GeminiClient
from ...core.resolver import DocumentResolver
from ...core.search import CandidateResolver
from ...core.services.background import BackgroundWriter
from ...core.services.resilience import SimpleResilienceManager


class SessionService:
    """Wires the provider client, stores and resolvers for one process.

    Everything is built once by `initialize()` and read-only afterwards;
    `cleanup()` waits for pending cache writes and closes the HTTP client.
    """

    def __init__(self, config: AppConfig | None = None, config_dir: Path | None = None):
        """Initialize session service.

        Args:
            config: Ready configuration (loaded from `config_dir` if None)
            config_dir: Directory holding `config.json` and the database
        """
        self.config_dir = config_dir
        self.config = config

        self.database: SQLiteDatabase | None = None
        self.client: GeminiClient | None = None
        self.background: BackgroundWriter | None = None
        self.catalog: CatalogStore | None = None
        self.cache: SymptomCacheStore | None = None
        self.search_cache: SearchCacheStore | None = None
        self.document_resolver: DocumentResolver | None = None
        self.candidate_resolver: CandidateResolver | None = None
        self.chat_service: ChatService | None = None

        self._initialized = False

    def _setup_database(self, config: AppConfig) -> None:
        self.database = SQLiteDatabase(config.database_path)
        self.catalog = CatalogStore(self.database)
        self.cache = SymptomCacheStore(self.database)
        self.search_cache = SearchCacheStore(self.database)

    def _setup_client(self, config: AppConfig) -> None:
        if not config.api_key:
            logger.warning("No provider API key configured; only catalog and cache hits will succeed")
        self.client = GeminiClient(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.request_timeout,
            temperature=config.temperature,
        )

    def _setup_resolvers(self, config: AppConfig) -> None:
        if not self.client or not self.database:
            raise RuntimeError("Client and database must be set up before resolvers")

        resilience = SimpleResilienceManager()
        self.background = BackgroundWriter()
        self.document_resolver = DocumentResolver(
            generator=self.client,
            catalog=self.catalog,
            cache=self.cache,
            resilience_manager=resilience,
            background=self.background,
            retry_policy=config.document_retry,
            coalesce_inflight=config.coalesce_inflight,
        )
        self.candidate_resolver = CandidateResolver(
            generator=self.client,
            search_cache=self.search_cache,
            resilience_manager=resilience,
            background=self.background,
            retry_policy=config.search_retry,
            coalesce_inflight=config.coalesce_inflight,
        )
        self.chat_service = ChatService(
            generator=self.client,
            resilience_manager=resilience,
            retry_policy=config.chat_retry,
        )

    async def initialize(self) -> None:
        """Initialize the session and all components."""
        if self._initialized:
            return

        try:
            if self.config is None:
                self.config = load_config(self.config_dir)
            self._setup_database(self.config)
            self._setup_client(self.config)
            self._setup_resolvers(self.config)
            self._initialized = True
            logger.info(f"Session initialized (database: {self.config.database_path})")
        except Exception as e:
            logger.error(f"Failed to initialize session: {e}")
            raise

    async def cleanup(self) -> None:
        """Drain pending writes and release the HTTP client."""
        if self.background:
            await self.background.drain()
        if self.client:
            await self.client.close()
            self.client = None
        self.document_resolver = None
        self.candidate_resolver = None
        self.chat_service = None
        self._initialized = False
        logger.info("Session cleanup completed")

    async def __aenter__(self) -> "SessionService":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.cleanup()

    @property
    def is_initialized(self) -> bool:
        return self._initialized
