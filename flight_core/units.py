from __future__ import annotations

from enum import Enum

METERS_PER_FOOT = 0.3048
KMH_PER_MS = 3.6
MPH_PER_MS = 3600.0 / 1609.344
GRAVITY = 9.80665


class UnitSystem(Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class Quantity(Enum):
    """Physical dimension of a channel, used to pick the display factor."""

    NONE = "none"
    TIME = "time"
    LENGTH = "length"
    SPEED = "speed"


UNIT_LABELS = {
    (Quantity.TIME, UnitSystem.METRIC): "s",
    (Quantity.TIME, UnitSystem.IMPERIAL): "s",
    (Quantity.LENGTH, UnitSystem.METRIC): "m",
    (Quantity.LENGTH, UnitSystem.IMPERIAL): "ft",
    (Quantity.SPEED, UnitSystem.METRIC): "km/h",
    (Quantity.SPEED, UnitSystem.IMPERIAL): "mph",
}


def unit_factor(quantity: Quantity, units: UnitSystem) -> float:
    """Multiplier converting an SI value of *quantity* into display units."""
    if quantity is Quantity.LENGTH:
        return 1.0 if units is UnitSystem.METRIC else 1.0 / METERS_PER_FOOT
    if quantity is Quantity.SPEED:
        return KMH_PER_MS if units is UnitSystem.METRIC else MPH_PER_MS
    return 1.0


def unit_label(quantity: Quantity, units: UnitSystem) -> str | None:
    return UNIT_LABELS.get((quantity, units))


def parse_unit_system(value: str | None, default: UnitSystem = UnitSystem.METRIC) -> UnitSystem:
    if not value:
        return default
    try:
        return UnitSystem(value.strip().lower())
    except ValueError:
        return default
