"""Candidate route construction, comparison and recommendation.

Both the live provider path and the fallback path build their results here,
so every ``OptimizationResult`` has the same shape regardless of where the
base distance came from.

Eco candidate rules:

* the route is 8% longer than the shortest one,
* it is driven at 35 km/h instead of the 45 km/h shortest-route assumption,
* slower, steadier driving burns 35% less fuel per km, which applies to both
  the carbon footprint and the fuel consumption. The fuel type of the request
  is kept; the emission gap comes only from distance and driving style.
"""

from __future__ import annotations

from typing import Optional

from ...models.domain import (
    CandidateRoute,
    CarbonSavings,
    Comparison,
    Coordinate,
    CostImpact,
    DistanceImpact,
    Efficiency,
    OptimizationOptions,
    OptimizationResult,
    PerKm,
    Recommendation,
    RouteCandidates,
    TimeImpact,
    VehicleCategory,
)
from .emissions import (
    calculate_carbon_footprint,
    calculate_cost,
    calculate_fuel_consumption,
    get_emission_factor,
    resolve_vehicle_category,
)

SHORTEST_SPEED_KMH = 45.0
ECO_SPEED_KMH = 35.0
ECO_DISTANCE_MULTIPLIER = 1.08
ECO_EMISSION_REDUCTION = 0.35

TIME_PENALTY_THRESHOLD = 25.0
HIGH_SAVINGS_THRESHOLD = 20.0
MODERATE_SAVINGS_THRESHOLD = 10.0
MODERATE_TIME_THRESHOLD = 20.0


def _average_speed(distance_km: float, minutes: float) -> float:
    if minutes <= 0:
        return 0.0
    return round(distance_km / minutes * 60, 1)


def _percentage(delta: float, base: float) -> float:
    if base <= 0:
        return 0.0
    return round(delta / base * 100, 2)


def _per_km(value: float, distance_km: float) -> float:
    if distance_km <= 0:
        return 0.0
    return round(value / distance_km, 4)


def build_shortest_candidate(
    distance_km: float,
    duration_minutes: float,
    options: OptimizationOptions,
    category: VehicleCategory,
) -> CandidateRoute:
    """Use the base distance and duration as-is."""
    factor = get_emission_factor(options.fuel_type, category.name)
    distance = round(max(distance_km, 0.0), 2)
    minutes = round(max(duration_minutes, 0.0), 1)
    return CandidateRoute(
        type="Shortest",
        distance_km=distance,
        estimated_time_minutes=minutes,
        carbon_footprint_kg=calculate_carbon_footprint(distance, factor),
        fuel_consumption_liters=calculate_fuel_consumption(distance, options.fuel_type, category.name),
        cost_estimate=calculate_cost(distance, options.fuel_type),
        vehicle_category=category.name,
        fuel_type=options.fuel_type,
        emission_factor=factor,
        optimization="distance",
        traffic_considered=options.include_traffic,
        average_speed_kmh=_average_speed(distance, minutes),
    )


def build_eco_candidate(
    base_distance_km: float,
    options: OptimizationOptions,
    category: VehicleCategory,
    eco_distance_km: Optional[float] = None,
) -> CandidateRoute:
    """Derive the eco-friendly candidate from the shortest-route distance.

    ``eco_distance_km`` replaces the 8% detour when a precomputed eco distance
    is known for the corridor.
    """
    factor = get_emission_factor(options.fuel_type, category.name)
    if eco_distance_km is None:
        eco_distance_km = base_distance_km * ECO_DISTANCE_MULTIPLIER
    distance = round(max(eco_distance_km, 0.0), 2)
    minutes = round(distance / ECO_SPEED_KMH * 60, 1)
    efficient_distance = distance * (1 - ECO_EMISSION_REDUCTION)
    return CandidateRoute(
        type="EcoFriendly",
        distance_km=distance,
        estimated_time_minutes=minutes,
        carbon_footprint_kg=calculate_carbon_footprint(efficient_distance, factor),
        fuel_consumption_liters=calculate_fuel_consumption(efficient_distance, options.fuel_type, category.name),
        cost_estimate=calculate_cost(distance, options.fuel_type),
        vehicle_category=category.name,
        fuel_type=options.fuel_type,
        emission_factor=factor,
        optimization="environmental",
        traffic_considered=options.include_traffic,
        average_speed_kmh=_average_speed(distance, minutes),
    )


def compare_routes(shortest: CandidateRoute, eco: CandidateRoute) -> Comparison:
    carbon_kg = shortest.carbon_footprint_kg - eco.carbon_footprint_kg
    extra_minutes = eco.estimated_time_minutes - shortest.estimated_time_minutes
    extra_km = eco.distance_km - shortest.distance_km
    extra_cost = eco.cost_estimate - shortest.cost_estimate
    return Comparison(
        carbon_savings=CarbonSavings(
            kg=round(carbon_kg, 2),
            percentage=_percentage(carbon_kg, shortest.carbon_footprint_kg),
        ),
        time_impact=TimeImpact(
            additional_minutes=round(extra_minutes, 1),
            percentage=_percentage(extra_minutes, shortest.estimated_time_minutes),
        ),
        distance_impact=DistanceImpact(
            additional_km=round(extra_km, 2),
            percentage=_percentage(extra_km, shortest.distance_km),
        ),
        cost_impact=CostImpact(
            additional_cost=round(extra_cost, 2),
            percentage=_percentage(extra_cost, shortest.cost_estimate),
        ),
        efficiency=Efficiency(
            carbon_per_km=PerKm(
                shortest=_per_km(shortest.carbon_footprint_kg, shortest.distance_km),
                eco=_per_km(eco.carbon_footprint_kg, eco.distance_km),
            ),
            cost_per_km=PerKm(
                shortest=_per_km(shortest.cost_estimate, shortest.distance_km),
                eco=_per_km(eco.cost_estimate, eco.distance_km),
            ),
        ),
    )


def get_recommendation(comparison: Comparison) -> Recommendation:
    carbon_pct = comparison.carbon_savings.percentage
    time_pct = comparison.time_impact.percentage

    if time_pct >= TIME_PENALTY_THRESHOLD:
        return Recommendation(
            recommended="shortest",
            confidence="high",
            reason="Eco route significantly impacts delivery time",
        )
    if carbon_pct >= HIGH_SAVINGS_THRESHOLD:
        return Recommendation(
            recommended="eco",
            confidence="high",
            reason="Significant carbon savings with acceptable time impact",
        )
    if carbon_pct >= MODERATE_SAVINGS_THRESHOLD and time_pct < MODERATE_TIME_THRESHOLD:
        return Recommendation(
            recommended="eco",
            confidence="medium",
            reason="Good environmental benefit with a moderate delay",
        )
    return Recommendation(
        recommended="shortest",
        confidence="low",
        reason="Carbon savings too small to justify the detour",
    )


def build_optimization_result(
    pickup: Coordinate,
    delivery: Coordinate,
    options: OptimizationOptions,
    *,
    distance_km: float,
    duration_minutes: float,
    provider: str,
    eco_distance_km: Optional[float] = None,
    fallback_used: bool = False,
    fallback_reason: Optional[str] = None,
) -> OptimizationResult:
    category = resolve_vehicle_category(options)
    shortest = build_shortest_candidate(distance_km, duration_minutes, options, category)
    eco = build_eco_candidate(distance_km, options, category, eco_distance_km=eco_distance_km)
    comparison = compare_routes(shortest, eco)
    return OptimizationResult(
        success=True,
        pickup=pickup,
        delivery=delivery,
        options=options,
        routes=RouteCandidates(shortest=shortest, eco=eco),
        comparison=comparison,
        recommendation=get_recommendation(comparison),
        provider=provider,
        fallback_used=fallback_used,
        fallback_reason=fallback_reason,
    )
