"""Route optimization engine: shortest vs eco-friendly candidates."""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from ...config import settings
from ...errors import InvalidCoordinate, UnknownOptimizationFailure
from ...models.domain import (
    BatchOutcome,
    Coordinate,
    OptimizationRequest,
    OptimizationResult,
    OptimizationStatistics,
)
from .candidates import build_optimization_result
from .fallback import RouteFallback
from .providers import DistanceProvider, ProviderFailure, ProviderRoute, fetch_distance_and_time

logger = logging.getLogger(__name__)

COORDINATE_LIMITS = {"latitude": 90.0, "longitude": 180.0}


def validate_coordinates(coordinate: Coordinate | None, side: str) -> Coordinate:
    """Raise ``InvalidCoordinate`` naming the side and axis that failed."""
    if coordinate is None:
        raise InvalidCoordinate(side, None, f"Invalid {side} coordinates: {side} location is required")

    for axis, limit in COORDINATE_LIMITS.items():
        value = getattr(coordinate, axis, None)
        if value is None:
            raise InvalidCoordinate(side, axis, f"Invalid {side} {axis}: value is required")
        if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
            raise InvalidCoordinate(side, axis, f"Invalid {side} {axis}: must be a number")
        if value < -limit or value > limit:
            raise InvalidCoordinate(
                side, axis, f"Invalid {side} {axis}: must be between {-limit:g} and {limit:g}"
            )
    return coordinate


class RouteOptimizer:
    """Produces and compares the two candidate routes for a delivery."""

    def __init__(
        self,
        provider: DistanceProvider | None,
        fallback: RouteFallback,
        max_parallel: int | None = None,
    ) -> None:
        self.provider = provider
        self.fallback = fallback
        self.max_parallel = max_parallel or settings.batch_max_parallel

    def optimize_route(self, request: OptimizationRequest) -> OptimizationResult:
        pickup = validate_coordinates(request.pickup, "pickup")
        delivery = validate_coordinates(request.delivery, "delivery")
        options = request.options

        outcome = fetch_distance_and_time(self.provider, pickup, delivery)
        try:
            match outcome:
                case ProviderRoute():
                    self.fallback.record_provider_success()
                    result = build_optimization_result(
                        pickup,
                        delivery,
                        options,
                        distance_km=outcome.distance_km,
                        duration_minutes=outcome.duration_minutes,
                        provider=outcome.provider,
                    )
                    key = self.fallback.generate_route_key(pickup, delivery, options)
                    self.fallback.cache_route(key, result)
                    return result
                case ProviderFailure():
                    return self.fallback.handle_provider_failure(outcome, pickup, delivery, options)
        except Exception as exc:
            logger.exception(f"Route optimization failed: {exc}")
            raise UnknownOptimizationFailure(f"Route optimization failed: {exc}") from exc
        raise UnknownOptimizationFailure(f"Unexpected provider outcome: {outcome!r}")

    def _optimize_member(self, index: int, request: OptimizationRequest) -> BatchOutcome:
        try:
            result = self.optimize_route(request)
        except (InvalidCoordinate, UnknownOptimizationFailure) as exc:
            logger.warning(f"Batch route {index + 1} failed: {exc}")
            return BatchOutcome(index=index, request=request, success=False, error=str(exc))
        return BatchOutcome(index=index, request=request, success=True, result=result)

    def optimize_multiple_routes(self, requests: Sequence[OptimizationRequest]) -> list[BatchOutcome]:
        """Optimize independent requests with bounded parallelism, keeping input order."""
        if not requests:
            return []
        workers = min(self.max_parallel, len(requests))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._optimize_member, index, request)
                for index, request in enumerate(requests)
            ]
            outcomes = []
            for index, future in enumerate(futures):
                try:
                    outcomes.append(future.result())
                except Exception as exc:
                    logger.exception(f"Batch route {index + 1} crashed: {exc}")
                    outcomes.append(
                        BatchOutcome(index=index, request=requests[index], success=False, error=str(exc))
                    )
        return outcomes

    @staticmethod
    def get_optimization_statistics(outcomes: Sequence[BatchOutcome]) -> OptimizationStatistics:
        successful = [o.result for o in outcomes if o.success and o.result is not None]
        failed = len(outcomes) - len(successful)

        total_carbon = sum(r.comparison.carbon_savings.kg for r in successful)
        total_time = sum(r.comparison.time_impact.additional_minutes for r in successful)
        count = len(successful)

        return OptimizationStatistics(
            total_routes=len(outcomes),
            successful=count,
            failed=failed,
            total_carbon_savings=round(total_carbon, 2),
            average_carbon_savings=round(total_carbon / count, 2) if count else 0.0,
            total_time_impact=round(total_time, 1),
            average_time_impact=round(total_time / count, 1) if count else 0.0,
            eco_chosen=sum(1 for r in successful if r.recommendation.recommended == "eco"),
            shortest_chosen=sum(1 for r in successful if r.recommendation.recommended == "shortest"),
        )

    def compare_routes(
        self, requests: Sequence[OptimizationRequest]
    ) -> tuple[list[BatchOutcome], OptimizationStatistics]:
        """Optimize several requests side by side and summarize them."""
        outcomes = self.optimize_multiple_routes(requests)
        return outcomes, self.get_optimization_statistics(outcomes)
