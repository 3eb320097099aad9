"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.ports.search_provider import SearchProvider
from ..domain.ports.submission_store import SubmissionStore
from ..domain.ports.text_generator import TextGenerator
from ..domain.services.fact_checking_service import FactCheckingService
from .ai.openai_adapter import OpenAIAdapter
from .config import PipelineConfig
from .registry import ProviderRegistry
from .search.exa_adapter import ExaSearchAdapter
from .storage.memory_store import InMemorySubmissionStore

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection.

    Providers are created on first use and shared by every request.
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        """Initialize service container.

        Args:
            config: Pipeline configuration, read from the environment if omitted
        """
        self.config = config or PipelineConfig.from_env()
        self.text_generators: ProviderRegistry[TextGenerator] = ProviderRegistry("text-generation")
        self.text_generators.register("openai", OpenAIAdapter)
        self.search_providers: ProviderRegistry[SearchProvider] = ProviderRegistry("search")
        self.search_providers.register("exa", ExaSearchAdapter)
        self._services: Dict[str, Any] = {}
        self._setup_services()

    def _setup_services(self) -> None:
        """Setup services that need no external connection."""
        logger.info("🔧 Setting up service container...")
        self._services = {
            "submission_store": InMemorySubmissionStore(
                maxsize=self.config.submission_maxsize,
                ttl=self.config.submission_ttl,
            ),
            "fact_checking_service": None,  # Created on demand with providers
        }
        logger.info("✅ Service container setup completed")

    async def _setup_providers(self) -> tuple[TextGenerator, SearchProvider]:
        """Get or create the configured text-generation and search providers."""
        text_generator = await self.text_generators.acquire(self.config.text_generator)
        search_provider = await self.search_providers.acquire(self.config.search_provider)
        return text_generator, search_provider

    async def startup(self) -> None:
        """Connect providers eagerly; failures are retried on first request."""
        try:
            await self.get_fact_checking_service()
        except Exception as e:
            logger.warning(f"⚠️ Providers not ready at startup: {e}")

    async def shutdown(self) -> None:
        """Shut down every provider."""
        await self.text_generators.shutdown()
        await self.search_providers.shutdown()
        self._services["fact_checking_service"] = None

    def build_fact_checking_service(
        self,
        text_generator: TextGenerator,
        search_provider: SearchProvider,
    ) -> FactCheckingService:
        """Create a FactCheckingService wired with the pipeline configuration."""
        return FactCheckingService(
            text_generator,
            search_provider,
            max_claims=self.config.max_claims,
            results_per_claim=self.config.results_per_claim,
            excerpt_length=self.config.excerpt_length,
            search_field=self.config.search_field,
            max_concurrency=self.config.max_concurrency,
            call_timeout=self.config.call_timeout,
        )

    async def get_fact_checking_service(self) -> FactCheckingService:
        """Get fact checking service with providers."""
        if self._services["fact_checking_service"] is None:
            logger.info("🔧 Creating FactCheckingService with providers...")
            text_generator, search_provider = await self._setup_providers()
            self._services["fact_checking_service"] = self.build_fact_checking_service(
                text_generator, search_provider
            )
            logger.info("✅ FactCheckingService created with providers")
        return self._services["fact_checking_service"]

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_submission_store(self) -> SubmissionStore:
        """Get submission store."""
        return self.get("submission_store")


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
def get_pipeline_config() -> PipelineConfig:
    """FastAPI dependency for pipeline configuration."""
    return get_service_container().config


def get_submission_store() -> SubmissionStore:
    """FastAPI dependency for submission store."""
    return get_service_container().get_submission_store()


async def get_fact_checking_service() -> FactCheckingService:
    """FastAPI dependency for fact checking service."""
    return await get_service_container().get_fact_checking_service()
