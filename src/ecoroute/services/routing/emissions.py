"""Emission, consumption and cost tables for delivery vehicles.

Factors are industry averages for delivery vehicles:

* emission factors are kg CO2 per km,
* consumption rates are litres per 100 km (kWh per 100 km for electric
  vehicles, reported through the same field),
* cost per km covers fuel, maintenance and driver time.
"""

from __future__ import annotations

import math

from ...models.domain import FuelType, OptimizationOptions, VehicleCategory, VehicleClass

EMISSION_FACTORS: dict[str, dict[str, float]] = {
    "standard": {"light": 0.22, "medium": 0.28, "heavy": 0.35},
    "hybrid": {"light": 0.15, "medium": 0.19, "heavy": 0.25},
    "electric": {"light": 0.08, "medium": 0.12, "heavy": 0.18},
}

CONSUMPTION_PER_100KM: dict[str, dict[str, float]] = {
    "standard": {"light": 8.0, "medium": 12.0, "heavy": 18.0},
    "hybrid": {"light": 6.0, "medium": 9.0, "heavy": 14.0},
    "electric": {"light": 15.0, "medium": 25.0, "heavy": 40.0},
}

COST_PER_KM: dict[str, float] = {
    "standard": 0.45,
    "hybrid": 0.35,
    "electric": 0.25,
}

VEHICLE_CATEGORIES: dict[str, VehicleCategory] = {
    "light": VehicleCategory(name="light", size="small", weight_label="<1 ton"),
    "medium": VehicleCategory(name="medium", size="medium", weight_label="1-3 tons"),
    "heavy": VehicleCategory(name="heavy", size="large", weight_label=">3 tons"),
}

FUEL_DESCRIPTIONS: dict[str, str] = {
    "standard": "Standard fuel (diesel/gasoline)",
    "hybrid": "Hybrid vehicle",
    "electric": "Electric vehicle",
}

LIGHT_CARGO_LIMIT_KG = 1000.0
MEDIUM_CARGO_LIMIT_KG = 3000.0

# CO2 absorbed by one tree per year, emitted by an average car per day and by
# an average household per day (kg).
TREE_ABSORPTION_KG_PER_YEAR = 21.0
CAR_EMISSIONS_KG_PER_DAY = 4.6
HOUSEHOLD_EMISSIONS_KG_PER_DAY = 0.6


def get_vehicle_category(cargo_weight_kg: float) -> VehicleCategory:
    """Map cargo weight to a vehicle category."""
    if cargo_weight_kg < LIGHT_CARGO_LIMIT_KG:
        return VEHICLE_CATEGORIES["light"]
    if cargo_weight_kg <= MEDIUM_CARGO_LIMIT_KG:
        return VEHICLE_CATEGORIES["medium"]
    return VEHICLE_CATEGORIES["heavy"]


def resolve_vehicle_category(options: OptimizationOptions) -> VehicleCategory:
    """An explicit vehicle type wins over the weight-derived category."""
    if options.vehicle_type:
        try:
            return VEHICLE_CATEGORIES[options.vehicle_type]
        except KeyError:
            raise ValueError(f"Unknown vehicle type '{options.vehicle_type}'.") from None
    return get_vehicle_category(options.cargo_weight_kg)


def get_emission_factor(fuel_type: FuelType, vehicle: VehicleClass) -> float:
    try:
        return EMISSION_FACTORS[fuel_type][vehicle]
    except KeyError:
        raise ValueError(f"No emission factor for fuel '{fuel_type}' and vehicle '{vehicle}'.") from None


def calculate_carbon_footprint(distance_km: float, emission_factor: float) -> float:
    """carbon = distance_km x emission_factor, rounded to 2 decimals."""
    return round(distance_km * emission_factor, 2)


def calculate_fuel_consumption(distance_km: float, fuel_type: FuelType, vehicle: VehicleClass) -> float:
    rate = CONSUMPTION_PER_100KM[fuel_type][vehicle]
    return round(distance_km * rate / 100, 2)


def calculate_cost(distance_km: float, fuel_type: FuelType) -> float:
    return round(distance_km * COST_PER_KM[fuel_type], 2)


def carbon_equivalents(carbon_kg: float) -> dict[str, int]:
    """Express a footprint in everyday terms."""
    return {
        "trees_needed": math.ceil(carbon_kg / TREE_ABSORPTION_KG_PER_YEAR),
        "car_emission_days": round(carbon_kg / CAR_EMISSIONS_KG_PER_DAY),
        "household_days": round(carbon_kg / HOUSEHOLD_EMISSIONS_KG_PER_DAY),
    }
