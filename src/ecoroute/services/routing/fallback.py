"""Degraded-mode route calculation used when the map provider fails."""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from dataclasses import asdict, is_dataclass, replace
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from ...config import settings
from ...models.domain import (
    Coordinate,
    KnownCity,
    KnownCorridor,
    OptimizationOptions,
    OptimizationResult,
    SystemStatus,
)
from ..geospatial import haversine_km, point_in_bounds
from .cache import RouteCache
from .candidates import SHORTEST_SPEED_KMH, build_optimization_result
from .emissions import resolve_vehicle_category
from .providers import ProviderFailure

logger = logging.getLogger(__name__)

ROUTE_KEY_LENGTH = 32

CACHED_REASON = "Using cached route data"
CORRIDOR_REASON = "Map API unavailable - using known corridor data"
CALCULATED_REASON = "Map API unavailable - calculated fallback"

# Average road speed per vehicle category when no provider duration exists (km/h).
FALLBACK_SPEEDS_KMH = {"light": 50.0, "medium": SHORTEST_SPEED_KMH, "heavy": 35.0}

DEFAULT_CITIES: tuple[KnownCity, ...] = (
    KnownCity(code="NYC", name="New York", min_lat=40.7, max_lat=41.0, min_lon=-74.0, max_lon=-73.9),
    KnownCity(code="LA", name="Los Angeles", min_lat=33.7, max_lat=34.3, min_lon=-118.5, max_lon=-117.9),
    KnownCity(code="CHI", name="Chicago", min_lat=41.6, max_lat=42.1, min_lon=-87.9, max_lon=-87.5),
    KnownCity(code="SF", name="San Francisco", min_lat=37.4, max_lat=37.8, min_lon=-122.5, max_lon=-122.0),
)

DEFAULT_CORRIDORS: tuple[KnownCorridor, ...] = (
    KnownCorridor(origin="NYC", destination="LA", distance_km=3944.0, eco_distance_km=4256.0),
    KnownCorridor(origin="NYC", destination="CHI", distance_km=1278.0, eco_distance_km=1380.0),
    KnownCorridor(origin="LA", destination="SF", distance_km=615.0, eco_distance_km=680.0),
)

COMMON_ROUTES: tuple[tuple[Coordinate, Coordinate], ...] = (
    (Coordinate(40.7128, -74.0060), Coordinate(34.0522, -118.2437)),  # New York -> Los Angeles
    (Coordinate(41.8781, -87.6298), Coordinate(42.3601, -71.0589)),  # Chicago -> Boston
    (Coordinate(37.7749, -122.4194), Coordinate(34.0522, -118.2437)),  # San Francisco -> Los Angeles
)


def _options_payload(options: OptimizationOptions | Mapping[str, Any] | None) -> dict:
    if options is None:
        return {}
    if is_dataclass(options):
        return asdict(options)
    return dict(options)


class RouteFallback:
    """Cache, known corridors and haversine estimates behind one interface."""

    def __init__(
        self,
        cache: RouteCache | None = None,
        cities: Sequence[KnownCity] = DEFAULT_CITIES,
        corridors: Sequence[KnownCorridor] = DEFAULT_CORRIDORS,
        tolerance_deg: float | None = None,
    ) -> None:
        self.cache = cache if cache is not None else RouteCache(ttl_seconds=settings.route_cache_ttl_seconds)
        self.cities = {city.code: city for city in cities}
        self.corridors = list(corridors)
        self.tolerance_deg = (
            tolerance_deg if tolerance_deg is not None else settings.corridor_match_tolerance_deg
        )
        self.map_api_status = "unknown"
        self.last_fallback_used: datetime | None = None
        self._fallback_failed = False

    # -- cache -------------------------------------------------------------

    @staticmethod
    def generate_route_key(
        pickup: Coordinate,
        delivery: Coordinate,
        options: OptimizationOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Deterministic cache key; option key order never changes the result."""
        payload = {
            "pickupLat": float(pickup.latitude),
            "pickupLon": float(pickup.longitude),
            "deliveryLat": float(delivery.latitude),
            "deliveryLon": float(delivery.longitude),
            "options": _options_payload(options),
        }
        canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
        digest = hashlib.sha256(canonical.encode("utf-8")).digest()
        return base64.urlsafe_b64encode(digest).decode("ascii")[:ROUTE_KEY_LENGTH]

    def cache_route(self, key: str, payload: OptimizationResult) -> None:
        self.cache.put(key, payload)

    def get_cached_route(self, key: str) -> OptimizationResult | None:
        return self.cache.get(key)

    def cleanup_cache(self) -> int:
        return self.cache.cleanup()

    def clear_cache(self) -> int:
        return self.cache.clear()

    # -- distance ----------------------------------------------------------

    @staticmethod
    def calculate_distance(pickup: Coordinate, delivery: Coordinate) -> float:
        """Great-circle distance in km, rounded to 2 decimals."""
        distance = haversine_km(pickup.latitude, pickup.longitude, delivery.latitude, delivery.longitude)
        return round(distance, 2)

    def _find_city(self, point: Coordinate) -> str | None:
        for city in self.cities.values():
            if point_in_bounds(
                point.latitude,
                point.longitude,
                city.min_lat,
                city.max_lat,
                city.min_lon,
                city.max_lon,
                tolerance_deg=self.tolerance_deg,
            ):
                return city.code
        return None

    def find_corridor(self, pickup: Coordinate, delivery: Coordinate) -> KnownCorridor | None:
        origin = self._find_city(pickup)
        destination = self._find_city(delivery)
        if not origin or not destination:
            return None
        for corridor in self.corridors:
            if {corridor.origin, corridor.destination} == {origin, destination} and origin != destination:
                return corridor
        return None

    def calculate_fallback_route(
        self,
        pickup: Coordinate,
        delivery: Coordinate,
        options: OptimizationOptions | None = None,
    ) -> OptimizationResult:
        """Build a result without the provider: known corridor first, then haversine."""
        options = options or OptimizationOptions()
        category = resolve_vehicle_category(options)
        speed = FALLBACK_SPEEDS_KMH[category.name]

        corridor = self.find_corridor(pickup, delivery)
        if corridor is not None:
            logger.debug(f"Matched known corridor {corridor.origin}-{corridor.destination}")
            return build_optimization_result(
                pickup,
                delivery,
                options,
                distance_km=corridor.distance_km,
                duration_minutes=corridor.distance_km / speed * 60,
                eco_distance_km=corridor.eco_distance_km,
                provider="known_corridor",
                fallback_used=True,
                fallback_reason=CORRIDOR_REASON,
            )

        distance = self.calculate_distance(pickup, delivery)
        return build_optimization_result(
            pickup,
            delivery,
            options,
            distance_km=distance,
            duration_minutes=distance / speed * 60,
            provider="haversine_fallback",
            fallback_used=True,
            fallback_reason=CALCULATED_REASON,
        )

    def handle_provider_failure(
        self,
        failure: ProviderFailure,
        pickup: Coordinate,
        delivery: Coordinate,
        options: OptimizationOptions,
    ) -> OptimizationResult:
        """Resolve a request after the provider failed: cache, corridor, haversine."""
        self.map_api_status = "unavailable"
        self.last_fallback_used = datetime.now(timezone.utc)
        logger.warning(f"Map API failure ({failure.kind}), using fallback: {failure.message}")

        key = self.generate_route_key(pickup, delivery, options)
        cached = self.cache.get(key)
        if cached is not None:
            return replace(cached, fallback_used=True, fallback_reason=CACHED_REASON, cache_used=True)

        try:
            result = self.calculate_fallback_route(pickup, delivery, options)
        except Exception:
            self._fallback_failed = True
            logger.exception("Fallback route calculation failed")
            raise
        self.cache.put_if_absent(key, result)
        return result

    def record_provider_success(self) -> None:
        self.map_api_status = "available"

    # -- operations --------------------------------------------------------

    def get_system_status(self) -> SystemStatus:
        return SystemStatus(
            map_api_status=self.map_api_status,
            cache_size=len(self.cache),
            mock_routes_available=len(self.corridors),
            last_fallback_used=self.last_fallback_used,
            system_health="degraded" if self._fallback_failed else "operational",
        )

    def preload_common_routes(
        self, routes: Sequence[tuple[Coordinate, Coordinate]] = COMMON_ROUTES
    ) -> int:
        """Warm the cache for frequent corridors using default options."""
        options = OptimizationOptions()
        added = 0
        for pickup, delivery in routes:
            key = self.generate_route_key(pickup, delivery, options)
            if self.cache.contains(key):
                continue
            result = self.calculate_fallback_route(pickup, delivery, options)
            if self.cache.put_if_absent(key, result):
                added += 1
        logger.info(f"Preloaded {added} common routes into the route cache")
        return added
