"""Serializers for optimization outputs."""

from __future__ import annotations

from dataclasses import asdict
from typing import Sequence

from ...models.domain import BatchOutcome, OptimizationResult, OptimizationStatistics, SystemStatus
from ..routing.candidates import (
    ECO_DISTANCE_MULTIPLIER,
    ECO_EMISSION_REDUCTION,
    ECO_SPEED_KMH,
    SHORTEST_SPEED_KMH,
)
from ..routing.emissions import (
    CONSUMPTION_PER_100KM,
    COST_PER_KM,
    EMISSION_FACTORS,
    FUEL_DESCRIPTIONS,
    VEHICLE_CATEGORIES,
)


def optimization_result_to_json(result: OptimizationResult) -> dict:
    payload = asdict(result)
    payload["calculated_at"] = result.calculated_at.isoformat()
    payload["warning"] = result.warning
    payload["selected_route"] = result.selected_route.type
    return payload


def batch_outcome_to_json(outcome: BatchOutcome) -> dict:
    payload: dict = {
        "index": outcome.index,
        "label": outcome.request.label or f"Route {outcome.index + 1}",
        "success": outcome.success,
    }
    if outcome.result is not None:
        payload["result"] = optimization_result_to_json(outcome.result)
    if outcome.error is not None:
        payload["error"] = outcome.error
    return payload


def batch_to_json(outcomes: Sequence[BatchOutcome]) -> list[dict]:
    return [batch_outcome_to_json(outcome) for outcome in outcomes]


def statistics_to_json(stats: OptimizationStatistics) -> dict:
    return {
        "total_routes": stats.total_routes,
        "successful": stats.successful,
        "failed": stats.failed,
        "total_carbon_savings": stats.total_carbon_savings,
        "average_carbon_savings": stats.average_carbon_savings,
        "total_time_impact": stats.total_time_impact,
        "average_time_impact": stats.average_time_impact,
        "recommendations": {
            "eco_chosen": stats.eco_chosen,
            "shortest_chosen": stats.shortest_chosen,
        },
    }


def system_status_to_json(status: SystemStatus) -> dict:
    payload = asdict(status)
    if status.last_fallback_used is not None:
        payload["last_fallback_used"] = status.last_fallback_used.isoformat()
    return payload


def optimization_parameters() -> dict:
    """Tables and business constants used by the engine."""
    return {
        "vehicle_types": [
            {
                "type": category.name,
                "size": category.size,
                "weight": category.weight_label,
            }
            for category in VEHICLE_CATEGORIES.values()
        ],
        "fuel_types": [
            {
                "type": fuel,
                "description": FUEL_DESCRIPTIONS[fuel],
                "cost_per_km": COST_PER_KM[fuel],
            }
            for fuel in EMISSION_FACTORS
        ],
        "optimization_strategies": [
            {
                "type": "Shortest",
                "description": "Minimize travel distance and time",
                "best_for": "Time-sensitive deliveries",
            },
            {
                "type": "EcoFriendly",
                "description": "Minimize carbon footprint",
                "best_for": "Environmentally conscious shipping",
            },
        ],
        "assumptions": {
            "emission_factors": EMISSION_FACTORS,
            "consumption_per_100km": CONSUMPTION_PER_100KM,
            "cost_per_km": COST_PER_KM,
            "eco_route_adjustments": {
                "distance_multiplier": ECO_DISTANCE_MULTIPLIER,
                "shortest_speed_kmh": SHORTEST_SPEED_KMH,
                "eco_speed_kmh": ECO_SPEED_KMH,
                "emission_reduction": ECO_EMISSION_REDUCTION,
            },
        },
    }
