from dataclasses import replace

import pytest

from ecoroute.errors import InvalidCoordinate, ProviderUnavailable, UnknownOptimizationFailure
from ecoroute.models.domain import BatchOutcome, Coordinate, OptimizationOptions, OptimizationRequest
from ecoroute.services.routing import optimizer as optimizer_module
from ecoroute.services.routing.cache import RouteCache
from ecoroute.services.routing.candidates import build_optimization_result
from ecoroute.services.routing.fallback import RouteFallback
from ecoroute.services.routing.optimizer import RouteOptimizer, validate_coordinates
from ecoroute.services.routing.providers import ProviderRoute

BERLIN = Coordinate(52.52, 13.40)
POTSDAM = Coordinate(52.40, 13.05)
MINNEAPOLIS = Coordinate(45.0, -93.0)
DENVER = Coordinate(39.7392, -104.9903)


class StubProvider:
    name = "stub"

    def __init__(self, distance_km: float = 30.0, duration_minutes: float = 40.0) -> None:
        self.distance_km = distance_km
        self.duration_minutes = duration_minutes
        self.calls = 0

    def calculate_distance_and_time(self, lat1, lon1, lat2, lon2):
        self.calls += 1
        return ProviderRoute(
            distance_km=self.distance_km,
            duration_minutes=self.duration_minutes,
            provider=self.name,
        )


class FailingProvider:
    name = "failing"

    def calculate_distance_and_time(self, lat1, lon1, lat2, lon2):
        raise ProviderUnavailable("timeout", "Map API timeout")


class FlakyProvider(StubProvider):
    """Answers once, then times out."""

    def calculate_distance_and_time(self, lat1, lon1, lat2, lon2):
        if self.calls >= 1:
            raise ProviderUnavailable("network", "connection refused")
        return super().calculate_distance_and_time(lat1, lon1, lat2, lon2)


def _optimizer(provider) -> RouteOptimizer:
    fallback = RouteFallback(cache=RouteCache(ttl_seconds=30), tolerance_deg=0.1)
    return RouteOptimizer(provider=provider, fallback=fallback, max_parallel=2)


def _request(pickup=BERLIN, delivery=POTSDAM, **options) -> OptimizationRequest:
    return OptimizationRequest(pickup=pickup, delivery=delivery, options=OptimizationOptions(**options))


def test_live_provider_result_is_returned_and_cached():
    provider = StubProvider(distance_km=30.0, duration_minutes=40.0)
    optimizer = _optimizer(provider)
    request = _request()

    result = optimizer.optimize_route(request)

    assert result.success is True
    assert result.provider == "stub"
    assert result.fallback_used is False
    assert result.routes.shortest.distance_km == 30.0
    assert result.routes.shortest.estimated_time_minutes == 40.0
    assert result.routes.eco.distance_km == pytest.approx(32.4)
    key = optimizer.fallback.generate_route_key(BERLIN, POTSDAM, request.options)
    assert optimizer.fallback.get_cached_route(key) is result
    assert optimizer.fallback.get_system_status().map_api_status == "available"


@pytest.mark.parametrize("provider", [FailingProvider(), None])
def test_provider_failure_falls_back(provider):
    optimizer = _optimizer(provider)

    result = optimizer.optimize_route(_request(MINNEAPOLIS, DENVER))

    assert result.success is True
    assert result.fallback_used is True
    assert result.warning is not None
    assert "Map API unavailable" in result.fallback_reason
    assert optimizer.fallback.get_system_status().map_api_status == "unavailable"


def test_outage_serves_previous_live_result_from_cache():
    optimizer = _optimizer(FlakyProvider(distance_km=30.0, duration_minutes=40.0))
    request = _request()

    live = optimizer.optimize_route(request)
    degraded = optimizer.optimize_route(request)

    assert live.fallback_used is False
    assert degraded.fallback_used is True
    assert degraded.cache_used is True
    assert degraded.fallback_reason == "Using cached route data"
    assert degraded.routes == live.routes


@pytest.mark.parametrize(
    "pickup, delivery, side, axis",
    [
        (Coordinate(95.0, 13.4), POTSDAM, "pickup", "latitude"),
        (Coordinate(52.5, -181.0), POTSDAM, "pickup", "longitude"),
        (BERLIN, Coordinate(-91.0, 13.0), "delivery", "latitude"),
        (BERLIN, Coordinate(52.4, 200.0), "delivery", "longitude"),
        (BERLIN, Coordinate(None, 13.0), "delivery", "latitude"),
        (None, POTSDAM, "pickup", None),
    ],
)
def test_invalid_coordinates_are_rejected(pickup, delivery, side, axis):
    provider = StubProvider()
    optimizer = _optimizer(provider)

    with pytest.raises(InvalidCoordinate) as exc_info:
        optimizer.optimize_route(_request(pickup, delivery))

    assert exc_info.value.side == side
    assert exc_info.value.axis == axis
    assert side in str(exc_info.value)
    assert provider.calls == 0


def test_range_error_message():
    with pytest.raises(InvalidCoordinate, match="Invalid pickup latitude: must be between -90 and 90"):
        validate_coordinates(Coordinate(91.0, 0.0), "pickup")


@pytest.mark.parametrize("value", [True, float("nan"), "52.5"])
def test_non_numeric_coordinates_are_rejected(value):
    with pytest.raises(InvalidCoordinate):
        validate_coordinates(Coordinate(value, 13.0), "pickup")


def test_boundary_coordinates_are_accepted():
    corner = Coordinate(-90.0, 180.0)

    assert validate_coordinates(corner, "delivery") is corner


def test_unexpected_error_is_wrapped(monkeypatch):
    def broken(*args, **kwargs):
        raise ZeroDivisionError("bad table")

    monkeypatch.setattr(optimizer_module, "build_optimization_result", broken)
    optimizer = _optimizer(StubProvider())

    with pytest.raises(UnknownOptimizationFailure) as exc_info:
        optimizer.optimize_route(_request())

    assert isinstance(exc_info.value.__cause__, ZeroDivisionError)


def test_batch_keeps_order_and_isolates_failures():
    optimizer = _optimizer(StubProvider())
    requests = [
        _request(),
        _request(Coordinate(100.0, 0.0), POTSDAM),
        _request(POTSDAM, BERLIN, fuel_type="electric"),
    ]

    outcomes = optimizer.optimize_multiple_routes(requests)

    assert [o.index for o in outcomes] == [0, 1, 2]
    assert [o.success for o in outcomes] == [True, False, True]
    assert "pickup latitude" in outcomes[1].error
    assert outcomes[1].result is None
    assert outcomes[2].result.routes.shortest.fuel_type == "electric"
    assert [o.request for o in outcomes] == requests


def test_empty_batch():
    assert _optimizer(StubProvider()).optimize_multiple_routes([]) == []


def _outcome_with_savings(index: int, kg: float, minutes: float, recommended: str) -> BatchOutcome:
    result = build_optimization_result(
        BERLIN, POTSDAM, OptimizationOptions(), distance_km=30.0, duration_minutes=40.0, provider="stub"
    )
    comparison = replace(
        result.comparison,
        carbon_savings=replace(result.comparison.carbon_savings, kg=kg),
        time_impact=replace(result.comparison.time_impact, additional_minutes=minutes),
    )
    recommendation = replace(result.recommendation, recommended=recommended)
    result = replace(result, comparison=comparison, recommendation=recommendation)
    return BatchOutcome(index=index, request=_request(), success=True, result=result)


def test_statistics_aggregate_successful_routes():
    outcomes = [
        _outcome_with_savings(0, 10.0, 12.0, "eco"),
        _outcome_with_savings(1, 5.0, 3.0, "shortest"),
        BatchOutcome(index=2, request=_request(), success=False, error="Invalid pickup latitude"),
    ]

    stats = RouteOptimizer.get_optimization_statistics(outcomes)

    assert stats.total_routes == 3
    assert stats.successful == 2
    assert stats.failed == 1
    assert stats.total_carbon_savings == 15.0
    assert stats.average_carbon_savings == 7.5
    assert stats.total_time_impact == 15.0
    assert stats.average_time_impact == 7.5
    assert stats.eco_chosen == 1
    assert stats.shortest_chosen == 1


def test_statistics_for_all_failures():
    outcomes = [BatchOutcome(index=0, request=_request(), success=False, error="boom")]

    stats = RouteOptimizer.get_optimization_statistics(outcomes)

    assert stats.successful == 0
    assert stats.failed == 1
    assert stats.average_carbon_savings == 0.0
    assert stats.average_time_impact == 0.0


def test_compare_routes_returns_outcomes_and_summary():
    optimizer = _optimizer(StubProvider())

    outcomes, stats = optimizer.compare_routes([_request(), _request(POTSDAM, BERLIN)])

    assert len(outcomes) == 2
    assert stats.total_routes == 2
    assert stats.successful == 2
    assert stats.eco_chosen + stats.shortest_chosen == 2
