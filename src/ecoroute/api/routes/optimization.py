"""Route optimization endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import InvalidCoordinate, UnknownOptimizationFailure
from ...schemas.optimization import (
    BatchOptimizationRequest,
    CarbonFootprintRequest,
    RouteComparisonRequest,
    RouteOptimizationRequest,
)
from ...services.outputs.optimization_formatter import (
    batch_to_json,
    optimization_parameters,
    optimization_result_to_json,
    statistics_to_json,
)
from ...services.routing.emissions import (
    calculate_carbon_footprint,
    carbon_equivalents,
    get_emission_factor,
)
from ...services.routing.service import get_route_optimizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/route-optimization", tags=["route-optimization"])


@router.post("/optimize", status_code=status.HTTP_200_OK)
def optimize(payload: RouteOptimizationRequest) -> dict:
    optimizer = get_route_optimizer()
    try:
        result = optimizer.optimize_route(payload.to_domain())
    except InvalidCoordinate as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except UnknownOptimizationFailure as exc:
        logger.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {exc}",
        ) from exc

    if result.fallback_used:
        logger.warning(f"Route optimization used fallback data: {result.fallback_reason}")
    return {
        "success": True,
        "data": optimization_result_to_json(result),
        "warning": result.warning,
    }


@router.post("/batch", status_code=status.HTTP_200_OK)
def optimize_batch(payload: BatchOptimizationRequest) -> dict:
    optimizer = get_route_optimizer()
    outcomes = optimizer.optimize_multiple_routes([route.to_domain() for route in payload.routes])
    return {
        "success": True,
        "data": batch_to_json(outcomes),
        "statistics": statistics_to_json(optimizer.get_optimization_statistics(outcomes)),
    }


@router.post("/compare", status_code=status.HTTP_200_OK)
def compare(payload: RouteComparisonRequest) -> dict:
    optimizer = get_route_optimizer()
    outcomes, stats = optimizer.compare_routes([route.to_domain() for route in payload.routes])
    return {
        "success": True,
        "data": batch_to_json(outcomes),
        "summary": statistics_to_json(stats),
    }


@router.get("/parameters", status_code=status.HTTP_200_OK)
def parameters() -> dict:
    return {"success": True, "data": optimization_parameters()}


@router.post("/carbon-footprint", status_code=status.HTTP_200_OK)
def carbon_footprint(payload: CarbonFootprintRequest) -> dict:
    """Footprint of an arbitrary distance for a vehicle/fuel combination."""
    factor = get_emission_factor(payload.fuel_type, payload.vehicle_type)
    carbon = calculate_carbon_footprint(payload.distance_km, factor)
    return {
        "success": True,
        "data": {
            "distance_km": payload.distance_km,
            "vehicle_type": payload.vehicle_type,
            "fuel_type": payload.fuel_type,
            "emission_factor": factor,
            "carbon_footprint_kg": carbon,
            "calculation": "carbon = distance_km x emission_factor",
            "environmental_equivalent": carbon_equivalents(carbon),
        },
    }
