import pytest

from ridematch.services.pricing import calculate_price, per_km_rate


def test_price_base_fare_only():
    assert calculate_price(0, "economy") == 2.50


def test_price_premium():
    assert calculate_price(10, "premium") == 27.50


@pytest.mark.parametrize(
    "vehicle_class, expected",
    [("economy", 12.5), ("comfort", 17.5), ("premium", 27.5), ("helicopter", 14.5), ("", 14.5)],
)
def test_price_by_vehicle_class(vehicle_class: str, expected: float):
    assert calculate_price(10, vehicle_class) == expected


def test_unknown_class_uses_default_rate():
    assert per_km_rate("limousine") == 1.2


def test_price_rounds_to_cents():
    assert calculate_price(1.234, "economy") == 3.73


def test_price_rejects_negative_distance():
    with pytest.raises(ValueError):
        calculate_price(-0.5, "economy")
