"""Route optimization request schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import Coordinate, OptimizationOptions, OptimizationRequest


class CoordinateModel(BaseModel):
    # Range checks happen in the optimizer.
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_domain(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class OptimizationOptionsModel(BaseModel):
    vehicle_type: Optional[Literal["light", "medium", "heavy"]] = Field(
        default=None,
        description="Explicit vehicle category. Derived from cargo weight when omitted.",
    )
    fuel_type: Literal["standard", "electric", "hybrid"] = "hybrid"
    cargo_weight_kg: float = Field(default=1000.0, ge=0)
    include_traffic: bool = True
    time_of_day: str = "current"

    def to_domain(self) -> OptimizationOptions:
        return OptimizationOptions(
            vehicle_type=self.vehicle_type,
            fuel_type=self.fuel_type,
            cargo_weight_kg=self.cargo_weight_kg,
            include_traffic=self.include_traffic,
            time_of_day=self.time_of_day,
        )


class RouteOptimizationRequest(BaseModel):
    pickup: Optional[CoordinateModel] = None
    delivery: Optional[CoordinateModel] = None
    options: Optional[OptimizationOptionsModel] = None
    label: Optional[str] = Field(default=None, description="Friendly name used in batch and comparison output.")

    def to_domain(self) -> OptimizationRequest:
        options = self.options or OptimizationOptionsModel()
        return OptimizationRequest(
            pickup=self.pickup.to_domain() if self.pickup else None,
            delivery=self.delivery.to_domain() if self.delivery else None,
            options=options.to_domain(),
            label=self.label,
        )


class BatchOptimizationRequest(BaseModel):
    routes: List[RouteOptimizationRequest] = Field(..., min_length=1)


class RouteComparisonRequest(BaseModel):
    routes: List[RouteOptimizationRequest] = Field(..., min_length=2)


class CarbonFootprintRequest(BaseModel):
    distance_km: float = Field(..., gt=0)
    vehicle_type: Literal["light", "medium", "heavy"] = "medium"
    fuel_type: Literal["standard", "electric", "hybrid"] = "hybrid"
