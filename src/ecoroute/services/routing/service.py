"""Routing service wiring shared by the API layer."""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache

from ...config import settings
from .cache import RouteCache
from .fallback import RouteFallback
from .optimizer import RouteOptimizer
from .providers import DistanceProvider, build_provider

logger = logging.getLogger(__name__)


@lru_cache()
def get_provider() -> DistanceProvider | None:
    return build_provider(settings)


@lru_cache()
def get_route_fallback() -> RouteFallback:
    cache = RouteCache(ttl_seconds=settings.route_cache_ttl_seconds)
    return RouteFallback(cache=cache, tolerance_deg=settings.corridor_match_tolerance_deg)


@lru_cache()
def get_route_optimizer() -> RouteOptimizer:
    return RouteOptimizer(
        provider=get_provider(),
        fallback=get_route_fallback(),
        max_parallel=settings.batch_max_parallel,
    )


async def sweep_cache_periodically(fallback: RouteFallback, interval_seconds: float) -> None:
    """Drop expired cache entries every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = fallback.cleanup_cache()
        except Exception as e:
            logger.exception(f"Route cache sweep failed: {e}")
            continue
        if removed:
            logger.debug(f"Cache sweep removed {removed} entries")
