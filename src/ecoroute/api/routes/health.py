"""Health and fallback operations endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...services.outputs.optimization_formatter import system_status_to_json
from ...services.routing.providers import check_health
from ...services.routing.service import get_provider, get_route_fallback

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/provider", status_code=status.HTTP_200_OK)
def health_provider() -> dict:
    """Check the live map provider."""
    provider = get_provider()
    return {
        "service": settings.map_provider,
        "configured": provider is not None,
        "healthy": check_health(provider),
    }


@router.get("/health/fallback", status_code=status.HTTP_200_OK)
def health_fallback() -> dict:
    return system_status_to_json(get_route_fallback().get_system_status())


@router.post("/health/cache/cleanup", status_code=status.HTTP_200_OK)
def cleanup_cache() -> dict:
    fallback = get_route_fallback()
    removed = fallback.cleanup_cache()
    return {"removed": removed, "cache_size": len(fallback.cache)}


@router.delete("/health/cache", status_code=status.HTTP_200_OK)
def clear_cache() -> dict:
    return {"cleared": get_route_fallback().clear_cache()}
