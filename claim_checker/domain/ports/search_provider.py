"""Protocol for web-search services."""

from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, Field


class SearchDocument(BaseModel):
    """One ranked document returned by a search service."""

    url: str = Field(..., min_length=1, description="Document URL")
    title: Optional[str] = Field(None, description="Document title")
    text: str = Field(default="", description="Document text, untruncated")


class SearchProvider(Protocol):
    """Protocol for web-search providers."""

    async def initialize(self) -> None:
        """Initialize the provider and verify configuration."""
        ...

    async def search(self, query: str, num_results: int = 3) -> List[SearchDocument]:
        """Search the web, returning documents in the service's own ranking.

        Raises:
            SearchError: If the search request fails
        """
        ...

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        ...

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        ...
