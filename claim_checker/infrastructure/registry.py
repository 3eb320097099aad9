"""Named registry of provider adapters with shared, lazily created instances."""

import logging
from typing import Any, Dict, Generic, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

P = TypeVar("P")


class ProviderRegistry(Generic[P]):
    """Registry mapping provider names to adapter classes.

    Adapter classes are built through their ``from_env`` constructor, so
    the registry needs no knowledge of any adapter's configuration. One
    instance per name is kept and shared until ``shutdown``.
    """

    def __init__(self, kind: str):
        """Initialize an empty registry.

        Args:
            kind: Capability served by the registered providers, used in messages
        """
        self.kind = kind
        self._classes: Dict[str, Type[P]] = {}
        self._instances: Dict[str, P] = {}

    def register(self, name: str, provider_class: Type[P]) -> None:
        """Register an adapter class under ``name``.

        Raises:
            ValueError: If the name is already registered
        """
        if name in self._classes:
            raise ValueError(f"{self.kind} provider '{name}' already registered")
        self._classes[name] = provider_class

    async def create(self, name: str, **overrides: Any) -> P:
        """Build and initialize a fresh instance, replacing any previous one.

        Args:
            name: Registered provider name
            **overrides: Settings passed to the adapter's ``from_env``

        Raises:
            ValueError: If the name is not registered
            RuntimeError: If the adapter fails to initialize
        """
        if name not in self._classes:
            raise ValueError(f"{self.kind} provider '{name}' not registered")

        provider = self._classes[name].from_env(**overrides)
        try:
            await provider.initialize()
        except Exception as e:
            raise RuntimeError(f"Failed to initialize {self.kind} provider {name}: {e}") from e

        self._instances[name] = provider
        logger.info(f"✅ {self.kind} provider '{name}' ready")
        return provider

    async def acquire(self, name: str, **overrides: Any) -> P:
        """Get the shared instance for ``name``, creating it on first use."""
        provider = self._instances.get(name)
        if provider is None:
            logger.info(f"🔧 Creating {self.kind} provider '{name}'...")
            provider = await self.create(name, **overrides)
        return provider

    def get(self, name: str) -> Optional[P]:
        """Get the active instance for ``name``, if any."""
        return self._instances.get(name)

    @property
    def available(self) -> Dict[str, bool]:
        """Registered names and whether their instance is ready."""
        return {
            name: name in self._instances and self._instances[name].is_available
            for name in self._classes
        }

    async def shutdown(self) -> None:
        """Shut down every active instance."""
        for name, provider in list(self._instances.items()):
            try:
                await provider.shutdown()
            except Exception as e:
                logger.error(f"❌ Error shutting down {self.kind} provider '{name}': {e}")
        self._instances.clear()
