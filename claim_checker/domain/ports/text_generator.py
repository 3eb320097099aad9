"""Protocol for text-generation services."""

from typing import Dict, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class TextGenerator(Protocol):
    """Protocol defining the interface for structured text generation.

    Implementations send a prompt together with the JSON schema of
    ``schema`` and must validate the reply against that schema before
    returning it.
    """

    async def initialize(self) -> None:
        """Initialize the provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def generate_object(
        self,
        prompt: str,
        schema: Type[T],
        schema_name: Optional[str] = None,
    ) -> T:
        """Generate an object conforming to ``schema``.

        Raises:
            GenerationError: If the service fails to respond
            SchemaViolationError: If the reply does not match the schema
        """
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
