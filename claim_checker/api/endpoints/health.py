"""Health check endpoints."""

from typing import Dict

from fastapi import APIRouter, Depends

from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> Dict[str, Dict[str, bool]]:
    """Check the health of all service components.

    Returns:
        Whether each registered text-generation and search provider is initialized
    """
    return {
        "text_generators": container.text_generators.available,
        "search_providers": container.search_providers.available,
    }
