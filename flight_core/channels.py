"""Derived scalar channels that can be read from a track sample.

Every channel is identified by a :class:`ChannelKind` tag and evaluated through
the single ``_CHANNELS`` table below. Channels are pure: they never mutate the
sample and hold no display state (visibility and clamps live in
``flight_plot.channel_settings``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Callable, Dict, Tuple

from flight_core.model import Sample
from flight_core.units import GRAVITY, Quantity, UnitSystem, unit_factor, unit_label


class ChannelKind(Enum):
    TIME = "time"
    DISTANCE_2D = "distance_2d"
    DISTANCE_3D = "distance_3d"
    ELEVATION = "elevation"
    VERTICAL_SPEED = "vertical_speed"
    HORIZONTAL_SPEED = "horizontal_speed"
    TOTAL_SPEED = "total_speed"
    DIVE_ANGLE = "dive_angle"
    CURVATURE = "curvature"
    GLIDE_RATIO = "glide_ratio"
    HORIZONTAL_ACCURACY = "horizontal_accuracy"
    VERTICAL_ACCURACY = "vertical_accuracy"
    SPEED_ACCURACY = "speed_accuracy"
    NUMBER_OF_SATELLITES = "number_of_satellites"
    ACCELERATION = "acceleration"
    TOTAL_ENERGY = "total_energy"
    ENERGY_RATE = "energy_rate"
    LIFT = "lift"
    DRAG = "drag"
    COURSE = "course"
    COURSE_RATE = "course_rate"
    COURSE_ACCURACY = "course_accuracy"


def horizontal_speed(sample: Sample) -> float:
    return math.hypot(sample.vel_e, sample.vel_n)


def total_speed(sample: Sample) -> float:
    return math.sqrt(sample.vel_e ** 2 + sample.vel_n ** 2 + sample.vel_d ** 2)


def _glide_ratio(sample: Sample) -> float:
    if sample.vel_d == 0:
        return 0.0
    return horizontal_speed(sample) / sample.vel_d


def _total_energy(sample: Sample) -> float:
    v = total_speed(sample)
    return v * v / 2 + GRAVITY * sample.z


def _energy_rate(sample: Sample) -> float:
    # d/dt of v^2/2 + g*z, with vel_d positive downward
    return total_speed(sample) * sample.accel - GRAVITY * sample.vel_d


@dataclass(frozen=True)
class ChannelSpec:
    """Static description of one channel.

    ``evaluate`` returns the SI value; :meth:`value` applies the unit factor.
    ``fixed_unit`` is used for quantities whose label does not depend on the
    unit system (degrees, g, J/kg, ...).
    """

    kind: ChannelKind
    name: str
    evaluate: Callable[[Sample], float]
    quantity: Quantity = Quantity.NONE
    fixed_unit: str | None = None
    color: str = "#000000"
    axis_eligible: bool = False
    has_optimal: bool = False
    default_visible: bool = False

    def factor(self, units: UnitSystem) -> float:
        return unit_factor(self.quantity, units)

    def value(self, sample: Sample, units: UnitSystem) -> float:
        return self.evaluate(sample) * self.factor(units)

    def title(self, units: UnitSystem) -> str:
        label = unit_label(self.quantity, units) or self.fixed_unit
        if label is None:
            return self.name
        return f"{self.name} ({label})"


_CHANNELS: Dict[ChannelKind, ChannelSpec] = {
    spec.kind: spec
    for spec in (
        ChannelSpec(ChannelKind.TIME, "Time", lambda s: s.t,
                    Quantity.TIME, axis_eligible=True),
        ChannelSpec(ChannelKind.DISTANCE_2D, "Horizontal Distance", lambda s: s.dist_2d,
                    Quantity.LENGTH, axis_eligible=True),
        ChannelSpec(ChannelKind.DISTANCE_3D, "Total Distance", lambda s: s.dist_3d,
                    Quantity.LENGTH, axis_eligible=True),
        ChannelSpec(ChannelKind.ELEVATION, "Elevation", lambda s: s.z,
                    Quantity.LENGTH, color="#000000", has_optimal=True, default_visible=True),
        ChannelSpec(ChannelKind.VERTICAL_SPEED, "Vertical Speed", lambda s: s.vel_d,
                    Quantity.SPEED, color="#008000", has_optimal=True, default_visible=True),
        ChannelSpec(ChannelKind.HORIZONTAL_SPEED, "Horizontal Speed", horizontal_speed,
                    Quantity.SPEED, color="#ff0000", has_optimal=True, default_visible=True),
        ChannelSpec(ChannelKind.TOTAL_SPEED, "Total Speed", total_speed,
                    Quantity.SPEED, color="#0000ff", has_optimal=True),
        ChannelSpec(ChannelKind.DIVE_ANGLE, "Dive Angle",
                    lambda s: math.degrees(math.atan2(s.vel_d, horizontal_speed(s))),
                    fixed_unit="deg", color="#ff00ff", has_optimal=True),
        ChannelSpec(ChannelKind.CURVATURE, "Curvature", lambda s: s.curv,
                    fixed_unit="deg/s", color="#8b0000", has_optimal=True),
        ChannelSpec(ChannelKind.GLIDE_RATIO, "Glide Ratio", _glide_ratio,
                    color="#8b008b", has_optimal=True),
        ChannelSpec(ChannelKind.HORIZONTAL_ACCURACY, "Horizontal Accuracy", lambda s: s.h_acc,
                    Quantity.LENGTH, color="#000080"),
        ChannelSpec(ChannelKind.VERTICAL_ACCURACY, "Vertical Accuracy", lambda s: s.v_acc,
                    Quantity.LENGTH, color="#000080"),
        ChannelSpec(ChannelKind.SPEED_ACCURACY, "Speed Accuracy", lambda s: s.s_acc,
                    Quantity.SPEED, color="#000080"),
        ChannelSpec(ChannelKind.NUMBER_OF_SATELLITES, "Number of Satellites",
                    lambda s: float(s.num_sv), color="#808080"),
        ChannelSpec(ChannelKind.ACCELERATION, "Acceleration", lambda s: s.accel / GRAVITY,
                    fixed_unit="g", color="#008080", has_optimal=True),
        ChannelSpec(ChannelKind.TOTAL_ENERGY, "Total Energy", _total_energy,
                    fixed_unit="J/kg", color="#b8860b", has_optimal=True),
        ChannelSpec(ChannelKind.ENERGY_RATE, "Energy Rate", _energy_rate,
                    fixed_unit="W/kg", color="#b8860b", has_optimal=True),
        ChannelSpec(ChannelKind.LIFT, "Lift Coefficient", lambda s: s.lift,
                    color="#ff8c00", has_optimal=True),
        ChannelSpec(ChannelKind.DRAG, "Drag Coefficient", lambda s: s.drag,
                    color="#4b0082", has_optimal=True),
        ChannelSpec(ChannelKind.COURSE, "Course", lambda s: s.theta,
                    fixed_unit="deg", color="#556b2f"),
        ChannelSpec(ChannelKind.COURSE_RATE, "Course Rate", lambda s: s.omega,
                    fixed_unit="deg/s", color="#556b2f"),
        ChannelSpec(ChannelKind.COURSE_ACCURACY, "Course Accuracy", lambda s: s.c_acc,
                    fixed_unit="deg", color="#000080"),
    )
}

_missing = set(ChannelKind) - set(_CHANNELS)
if _missing:  # pragma: no cover - guards edits to the table above
    raise RuntimeError(f"channel table is missing {sorted(k.value for k in _missing)}")

AXIS_CHANNELS: Tuple[ChannelKind, ...] = tuple(
    kind for kind in ChannelKind if _CHANNELS[kind].axis_eligible
)
SERIES_CHANNELS: Tuple[ChannelKind, ...] = tuple(
    kind for kind in ChannelKind if not _CHANNELS[kind].axis_eligible
)


def channel_spec(kind: ChannelKind) -> ChannelSpec:
    return _CHANNELS[kind]


def channel_value(kind: ChannelKind, sample: Sample, units: UnitSystem) -> float:
    """Evaluate *kind* on *sample* in display units."""
    return _CHANNELS[kind].value(sample, units)


def channel_key(kind: ChannelKind, units: UnitSystem) -> Callable[[Sample], float]:
    """Bind *kind* and *units* into a one-argument coordinate function."""
    spec = _CHANNELS[kind]
    factor = spec.factor(units)
    evaluate = spec.evaluate
    return lambda sample: evaluate(sample) * factor


def is_axis_eligible(kind: ChannelKind) -> bool:
    return _CHANNELS[kind].axis_eligible


def parse_channel_kind(name: str) -> ChannelKind | None:
    try:
        return ChannelKind(name.strip().lower())
    except ValueError:
        return None
