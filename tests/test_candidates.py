import pytest

from ecoroute.models.domain import (
    CarbonSavings,
    Comparison,
    Coordinate,
    CostImpact,
    DistanceImpact,
    Efficiency,
    OptimizationOptions,
    PerKm,
    TimeImpact,
)
from ecoroute.services.routing.candidates import build_optimization_result, get_recommendation

PICKUP = Coordinate(52.52, 13.40)
DELIVERY = Coordinate(52.40, 13.05)


def _comparison(carbon_pct: float, time_pct: float) -> Comparison:
    return Comparison(
        carbon_savings=CarbonSavings(kg=1.0, percentage=carbon_pct),
        time_impact=TimeImpact(additional_minutes=1.0, percentage=time_pct),
        distance_impact=DistanceImpact(additional_km=1.0, percentage=8.0),
        cost_impact=CostImpact(additional_cost=1.0, percentage=8.0),
        efficiency=Efficiency(
            carbon_per_km=PerKm(shortest=0.2, eco=0.15),
            cost_per_km=PerKm(shortest=0.35, eco=0.35),
        ),
    )


@pytest.mark.parametrize(
    "carbon_pct, time_pct, recommended, confidence",
    [
        (25, 10, "eco", "high"),
        (5, 30, "shortest", "high"),
        (40, 25, "shortest", "high"),
        (15, 10, "eco", "medium"),
        (15, 22, "shortest", "low"),
        (5, 5, "shortest", "low"),
    ],
)
def test_recommendation_policy(carbon_pct, time_pct, recommended, confidence):
    recommendation = get_recommendation(_comparison(carbon_pct, time_pct))

    assert recommendation.recommended == recommended
    assert recommendation.confidence == confidence
    assert recommendation.reason


def test_build_result_from_provider_data():
    result = build_optimization_result(
        PICKUP,
        DELIVERY,
        OptimizationOptions(fuel_type="hybrid", cargo_weight_kg=1000),
        distance_km=100.0,
        duration_minutes=120.0,
        provider="stub",
    )

    shortest = result.routes.shortest
    eco = result.routes.eco
    assert shortest.type == "Shortest"
    assert shortest.distance_km == 100.0
    assert shortest.estimated_time_minutes == 120.0
    assert shortest.carbon_footprint_kg == 19.0
    assert shortest.cost_estimate == 35.0
    assert shortest.fuel_consumption_liters == 9.0
    assert shortest.average_speed_kmh == 50.0

    assert eco.type == "EcoFriendly"
    assert eco.distance_km == 108.0
    assert eco.estimated_time_minutes == pytest.approx(185.1)
    assert eco.carbon_footprint_kg == pytest.approx(13.34)
    assert eco.cost_estimate == pytest.approx(37.8)
    assert eco.fuel_consumption_liters == pytest.approx(6.32)
    assert eco.average_speed_kmh == pytest.approx(35.0)

    assert result.comparison.carbon_savings.kg == pytest.approx(5.66)
    assert result.comparison.carbon_savings.percentage == pytest.approx(29.79)
    assert result.comparison.time_impact.additional_minutes == pytest.approx(65.1)
    assert result.comparison.distance_impact.percentage == pytest.approx(8.0)
    assert result.comparison.efficiency.carbon_per_km == PerKm(shortest=0.19, eco=0.1235)
    assert result.comparison.efficiency.cost_per_km == PerKm(shortest=0.35, eco=0.35)
    assert result.recommendation.recommended == "shortest"
    assert result.recommendation.confidence == "high"
    assert result.fallback_used is False
    assert result.warning is None


@pytest.mark.parametrize("fuel_type", ["standard", "hybrid", "electric"])
@pytest.mark.parametrize("distance", [0.4, 12.0, 250.5, 3944.0])
def test_eco_trades_distance_for_emissions(fuel_type, distance):
    result = build_optimization_result(
        PICKUP,
        DELIVERY,
        OptimizationOptions(fuel_type=fuel_type),
        distance_km=distance,
        duration_minutes=distance / 45 * 60,
        provider="stub",
    )

    assert result.routes.eco.distance_km >= result.routes.shortest.distance_km
    assert result.routes.eco.carbon_footprint_kg <= result.routes.shortest.carbon_footprint_kg


def test_slow_heavy_vehicle_prefers_eco():
    result = build_optimization_result(
        PICKUP,
        DELIVERY,
        OptimizationOptions(vehicle_type="heavy", fuel_type="standard"),
        distance_km=70.0,
        duration_minutes=120.0,
        provider="stub",
    )

    assert result.comparison.time_impact.percentage < 25
    assert result.recommendation.recommended == "eco"
    assert result.selected_route.type == "EcoFriendly"


def test_zero_distance_has_no_division_errors():
    result = build_optimization_result(
        PICKUP,
        PICKUP,
        OptimizationOptions(),
        distance_km=0.0,
        duration_minutes=0.0,
        provider="stub",
    )

    assert result.routes.shortest.average_speed_kmh == 0.0
    assert result.comparison.carbon_savings.percentage == 0.0
    assert result.comparison.time_impact.percentage == 0.0
    assert result.comparison.efficiency.carbon_per_km == PerKm(shortest=0.0, eco=0.0)
    assert result.comparison.efficiency.cost_per_km == PerKm(shortest=0.0, eco=0.0)
    assert result.recommendation.recommended == "shortest"
    assert result.recommendation.confidence == "low"
