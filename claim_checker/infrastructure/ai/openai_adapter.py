"""OpenAI implementation of the text-generation interface."""

import json
import logging
import os
from typing import Any, Dict, Optional, Type, TypeVar

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field, ValidationError

from ...domain.errors import GenerationError, SchemaViolationError
from ...domain.ports.text_generator import TextGenerator

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

SYSTEM_PROMPT = (
    "You are a careful assistant that answers only with JSON matching the provided schema. "
    "Do not wrap the JSON in markdown and do not add commentary."
)


class OpenAIConfig(BaseModel):
    """Configuration for OpenAI adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o", description="Model to use")
    temperature: float = Field(default=0.0, description="Temperature for responses")
    max_tokens: int = Field(default=4000, ge=1, description="Maximum tokens per response")
    timeout: float = Field(default=45.0, description="API timeout in seconds")
    max_retries: int = Field(default=2, description="Retries on connection errors and rate limits")
    schema_retries: int = Field(default=1, description="Extra attempts when a reply fails validation")
    base_url: Optional[str] = Field(default=None, description="Override for the API base URL")

    @classmethod
    def from_env(cls, **overrides: Any) -> "OpenAIConfig":
        """Create configuration from environment variables."""
        values: Dict[str, Any] = {
            "api_key": os.getenv("OPENAI_API_KEY", ""),
            "model": os.getenv("OPENAI_MODEL", "gpt-4o"),
            "temperature": float(os.getenv("OPENAI_TEMPERATURE", "0.0")),
            "max_tokens": int(os.getenv("OPENAI_MAX_TOKENS", "4000")),
            "timeout": float(os.getenv("OPENAI_TIMEOUT", "45")),
            "max_retries": int(os.getenv("OPENAI_MAX_RETRIES", "2")),
            "base_url": os.getenv("OPENAI_BASE_URL") or None,
        }
        values.update(overrides)
        return cls(**values)


class OpenAIAdapter(TextGenerator):
    """OpenAI implementation of the text-generation interface.

    Replies are requested with a JSON-schema response format derived from
    the target pydantic model and validated against that model before they
    are returned.
    """

    def __init__(
        self,
        config: Optional[OpenAIConfig] = None,
        provider_name: str = "OpenAI",
    ):
        """Initialize the adapter."""
        self._config = config or OpenAIConfig(api_key="")
        self._name = provider_name
        self._client: Optional[AsyncOpenAI] = None
        self._initialized = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "OpenAIAdapter":
        """Create an adapter configured from environment variables."""
        return cls(config=OpenAIConfig.from_env(**overrides))

    async def initialize(self) -> None:
        """Create the API client and verify access to the configured model."""
        try:
            if self._client is None:
                self._client = AsyncOpenAI(
                    api_key=self._config.api_key,
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                    max_retries=self._config.max_retries,
                )

            await self._client.models.retrieve(self._config.model)
            self._initialized = True
        except Exception as e:
            self._initialized = False
            if self._client:
                await self._client.close()
                self._client = None
            raise ConnectionError(f"Failed to initialize OpenAI provider: {e}")

    async def generate_object(
        self,
        prompt: str,
        schema: Type[T],
        schema_name: Optional[str] = None,
    ) -> T:
        """Generate an object conforming to ``schema``."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        name = schema_name or schema.__name__
        response_format = {
            "type": "json_schema",
            "json_schema": {
                "name": name,
                "schema": schema.model_json_schema(by_alias=True),
                "strict": False,
            },
        }
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        last_error: Optional[SchemaViolationError] = None
        for attempt in range(self._config.schema_retries + 1):
            try:
                response = await self._client.chat.completions.create(
                    model=self._config.model,
                    messages=messages,
                    temperature=self._config.temperature,
                    max_tokens=self._config.max_tokens,
                    response_format=response_format,
                )
            except OpenAIError as e:
                raise GenerationError(f"OpenAI request failed: {e}") from e

            if not response.choices:
                raise GenerationError(f"OpenAI returned an empty response for {name}")
            choice = response.choices[0]
            # Truncated replies are never retried
            if choice.finish_reason == "length":
                raise GenerationError(f"OpenAI reply for {name} was truncated at max_tokens")

            content = choice.message.content
            if not content or not content.strip():
                raise GenerationError(f"OpenAI returned an empty response for {name}")

            try:
                return schema.model_validate_json(content)
            except ValidationError as e:
                last_error = SchemaViolationError.from_validation_error(name, _parse_json(content), e)
                logger.warning(
                    f"⚠️ {name} reply failed validation "
                    f"(attempt {attempt + 1}/{self._config.schema_retries + 1}): {e.error_count()} errors"
                )

        raise last_error

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.close()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the provider."""
        return self._name

    @property
    def model(self) -> str:
        """Get the configured model name."""
        return self._config.model

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "structured_output": True,
            "schema_validation": True,
            "claim_extraction": True,
            "claim_verification": True,
        }


def _parse_json(content: str) -> Any:
    try:
        return json.loads(content)
    except ValueError:
        return content
