"""Exa implementation of the web-search interface."""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from ...domain.errors import SchemaViolationError, SearchError
from ...domain.ports.search_provider import SearchDocument, SearchProvider

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class ExaConfig(BaseModel):
    """Configuration for Exa adapter."""

    api_key: str = Field(..., description="Exa API key")
    base_url: str = Field(default="https://api.exa.ai", description="Exa API base URL")
    search_type: str = Field(default="auto", description="Exa search type (auto, neural, keyword)")
    livecrawl: str = Field(default="always", description="Live crawl policy for page contents")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    max_retries: int = Field(default=2, description="Retries on transport errors and retryable statuses")
    retry_delay: float = Field(default=0.5, description="Base delay between retries in seconds")

    @classmethod
    def from_env(cls, **overrides: Any) -> "ExaConfig":
        """Create configuration from environment variables."""
        values: Dict[str, Any] = {
            "api_key": os.getenv("EXA_API_KEY", ""),
            "base_url": os.getenv("EXA_BASE_URL", "https://api.exa.ai"),
            "search_type": os.getenv("EXA_SEARCH_TYPE", "auto"),
            "livecrawl": os.getenv("EXA_LIVECRAWL", "always"),
            "timeout": float(os.getenv("EXA_TIMEOUT", "30")),
            "max_retries": int(os.getenv("EXA_MAX_RETRIES", "2")),
            "retry_delay": float(os.getenv("EXA_RETRY_DELAY", "0.5")),
        }
        values.update(overrides)
        return cls(**values)


class ExaSearchAdapter(SearchProvider):
    """Exa implementation of the web-search interface.

    Uses the ``/search`` endpoint with page contents included, returning
    documents in Exa's ranking.
    """

    def __init__(
        self,
        config: Optional[ExaConfig] = None,
        provider_name: str = "Exa",
    ):
        """Initialize the adapter."""
        self._config = config or ExaConfig(api_key="")
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "ExaSearchAdapter":
        """Create an adapter configured from environment variables."""
        return cls(config=ExaConfig.from_env(**overrides))

    async def initialize(self) -> None:
        """Initialize the HTTP client."""
        if not self._config.api_key:
            self._initialized = False
            raise ConnectionError("Failed to initialize Exa provider: EXA_API_KEY is not set")

        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={
                    "x-api-key": self._config.api_key,
                    "Content-Type": "application/json",
                },
            )
        self._initialized = True

    async def search(self, query: str, num_results: int = 3) -> List[SearchDocument]:
        """Search Exa and return documents with their text."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        payload = {
            "query": query,
            "type": self._config.search_type,
            "numResults": num_results,
            "contents": {
                "text": True,
                "livecrawl": self._config.livecrawl,
            },
        }

        data = await self._post_with_retry("/search", payload)
        results = data.get("results") or []

        documents: List[SearchDocument] = []
        for item in results[:num_results]:
            document = {
                "url": item.get("url"),
                "title": item.get("title"),
                "text": item.get("text") or "",
            }
            try:
                documents.append(SearchDocument.model_validate(document))
            except ValidationError as e:
                raise SchemaViolationError.from_validation_error("SearchDocument", document, e) from e
        return documents

    async def _post_with_retry(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST with retries on transport errors and retryable statuses."""
        attempts = self._config.max_retries + 1
        for attempt in range(attempts):
            if attempt > 0:
                await asyncio.sleep(self._config.retry_delay * (2 ** (attempt - 1)))
                logger.debug(f"🔁 Exa retry {attempt}/{self._config.max_retries} for {path}")

            try:
                response = await self._client.post(path, json=payload)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status in RETRYABLE_STATUS_CODES and attempt < attempts - 1:
                    logger.warning(f"⚠️ Exa returned {status}, retrying")
                    continue
                raise SearchError(f"Exa search failed with HTTP {status}: {e.response.text[:200]}") from e
            except httpx.TransportError as e:
                if attempt < attempts - 1:
                    logger.warning(f"⚠️ Exa transport error, retrying: {e}")
                    continue
                raise SearchError(f"Exa search failed: {type(e).__name__}: {e}") from e
            except ValueError as e:
                raise SearchError(f"Exa returned invalid JSON: {e}") from e

        raise SearchError("Exa search failed without a response")

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "web_search": True,
            "page_contents": True,
            "live_crawl": self._config.livecrawl != "never",
            "retry_mechanism": self._config.max_retries > 0,
        }
