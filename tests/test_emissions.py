import pytest

from ecoroute.models.domain import OptimizationOptions
from ecoroute.services.routing.emissions import (
    calculate_carbon_footprint,
    calculate_cost,
    calculate_fuel_consumption,
    carbon_equivalents,
    get_emission_factor,
    get_vehicle_category,
    resolve_vehicle_category,
)


def test_carbon_footprint_is_rounded_product():
    assert calculate_carbon_footprint(100, 0.28) == 28.0
    assert calculate_carbon_footprint(123.456, 0.19) == 23.46


@pytest.mark.parametrize(
    "weight, name, label",
    [
        (500, "light", "<1 ton"),
        (2000, "medium", "1-3 tons"),
        (5000, "heavy", ">3 tons"),
    ],
)
def test_vehicle_category_by_weight(weight, name, label):
    category = get_vehicle_category(weight)

    assert category.name == name
    assert category.weight_label == label


def test_vehicle_category_boundaries():
    assert get_vehicle_category(999.9).name == "light"
    assert get_vehicle_category(1000).name == "medium"
    assert get_vehicle_category(3000).name == "medium"
    assert get_vehicle_category(3000.1).name == "heavy"


def test_explicit_vehicle_type_overrides_weight():
    options = OptimizationOptions(vehicle_type="light", cargo_weight_kg=5000)

    assert resolve_vehicle_category(options).name == "light"
    assert resolve_vehicle_category(OptimizationOptions(cargo_weight_kg=5000)).name == "heavy"


def test_emission_factor_table():
    assert get_emission_factor("standard", "medium") == 0.28
    assert get_emission_factor("hybrid", "heavy") == 0.25
    assert get_emission_factor("electric", "light") == 0.08

    with pytest.raises(ValueError):
        get_emission_factor("diesel", "medium")


def test_fuel_and_cost():
    assert calculate_fuel_consumption(100, "electric", "medium") == 25.0
    assert calculate_fuel_consumption(50, "hybrid", "medium") == 4.5
    assert calculate_cost(100, "standard") == 45.0
    assert calculate_cost(100, "electric") == 25.0


def test_carbon_equivalents():
    assert carbon_equivalents(42.0) == {
        "trees_needed": 2,
        "car_emission_days": 9,
        "household_days": 70,
    }
