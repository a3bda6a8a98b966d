"""Domain models for route optimization requests and results."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

FuelType = Literal["standard", "electric", "hybrid"]
VehicleClass = Literal["light", "medium", "heavy"]
RouteType = Literal["Shortest", "EcoFriendly"]
Confidence = Literal["high", "medium", "low"]

FALLBACK_WARNING = (
    "Route calculated using fallback data due to Map API unavailability. "
    "Accuracy may be reduced."
)


@dataclass(slots=True, frozen=True)
class Coordinate:
    """A latitude/longitude pair. Range checks happen in the optimizer."""

    latitude: Optional[float]
    longitude: Optional[float]


@dataclass(slots=True, frozen=True)
class OptimizationOptions:
    """Vehicle and fuel parameters for a single optimization request."""

    vehicle_type: Optional[VehicleClass] = None
    fuel_type: FuelType = "hybrid"
    cargo_weight_kg: float = 1000.0
    include_traffic: bool = True
    time_of_day: str = "current"


@dataclass(slots=True, frozen=True)
class OptimizationRequest:
    pickup: Optional[Coordinate]
    delivery: Optional[Coordinate]
    options: OptimizationOptions = field(default_factory=OptimizationOptions)
    label: Optional[str] = None


@dataclass(slots=True, frozen=True)
class VehicleCategory:
    name: VehicleClass
    size: str
    weight_label: str


@dataclass(slots=True, frozen=True)
class CandidateRoute:
    type: RouteType
    distance_km: float
    estimated_time_minutes: float
    carbon_footprint_kg: float
    fuel_consumption_liters: float
    cost_estimate: float
    vehicle_category: VehicleClass
    fuel_type: FuelType
    emission_factor: float
    optimization: str
    traffic_considered: bool
    average_speed_kmh: float


@dataclass(slots=True, frozen=True)
class RouteCandidates:
    shortest: CandidateRoute
    eco: CandidateRoute


@dataclass(slots=True, frozen=True)
class CarbonSavings:
    kg: float
    percentage: float


@dataclass(slots=True, frozen=True)
class TimeImpact:
    additional_minutes: float
    percentage: float


@dataclass(slots=True, frozen=True)
class DistanceImpact:
    additional_km: float
    percentage: float


@dataclass(slots=True, frozen=True)
class CostImpact:
    additional_cost: float
    percentage: float


@dataclass(slots=True, frozen=True)
class PerKm:
    shortest: float
    eco: float


@dataclass(slots=True, frozen=True)
class Efficiency:
    """Carbon (kg) and cost per km for each candidate; 0 for zero-length routes."""

    carbon_per_km: PerKm
    cost_per_km: PerKm


@dataclass(slots=True, frozen=True)
class Comparison:
    """Eco-minus-shortest deltas; carbon savings are positive when eco emits less."""

    carbon_savings: CarbonSavings
    time_impact: TimeImpact
    distance_impact: DistanceImpact
    cost_impact: CostImpact
    efficiency: Efficiency


@dataclass(slots=True, frozen=True)
class Recommendation:
    recommended: Literal["eco", "shortest"]
    confidence: Confidence
    reason: str


@dataclass(slots=True, frozen=True)
class OptimizationResult:
    """Outcome shared by the live and fallback paths."""

    success: bool
    pickup: Coordinate
    delivery: Coordinate
    options: OptimizationOptions
    routes: RouteCandidates
    comparison: Comparison
    recommendation: Recommendation
    provider: str
    fallback_used: bool = False
    fallback_reason: Optional[str] = None
    cache_used: bool = False
    calculated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def warning(self) -> Optional[str]:
        return FALLBACK_WARNING if self.fallback_used else None

    @property
    def selected_route(self) -> CandidateRoute:
        if self.recommendation.recommended == "eco":
            return self.routes.eco
        return self.routes.shortest


@dataclass(slots=True, frozen=True)
class CacheEntry:
    key: str
    payload: OptimizationResult
    timestamp: float
    ttl_seconds: float

    def is_expired(self, now: float) -> bool:
        return now - self.timestamp >= self.ttl_seconds


@dataclass(slots=True)
class BatchOutcome:
    """Per-request outcome inside a batch run."""

    index: int
    request: OptimizationRequest
    success: bool
    result: Optional[OptimizationResult] = None
    error: Optional[str] = None


@dataclass(slots=True)
class OptimizationStatistics:
    total_routes: int
    successful: int
    failed: int
    total_carbon_savings: float
    average_carbon_savings: float
    total_time_impact: float
    average_time_impact: float
    eco_chosen: int
    shortest_chosen: int


@dataclass(slots=True, frozen=True)
class KnownCity:
    """Named city area expressed as latitude/longitude bounds."""

    code: str
    name: str
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float


@dataclass(slots=True, frozen=True)
class KnownCorridor:
    """Precomputed long-haul distances between two known cities."""

    origin: str
    destination: str
    distance_km: float
    eco_distance_km: float


@dataclass(slots=True)
class SystemStatus:
    map_api_status: str
    cache_size: int
    mock_routes_available: int
    last_fallback_used: Optional[datetime]
    system_health: str
