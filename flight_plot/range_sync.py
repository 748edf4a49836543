"""Conversions between displayed axis ranges and the canonical time domain.

A view shows ``(lower, upper)`` in whatever channel currently defines its
horizontal axis, but the shared navigation window and marks are stored as
elapsed time. Every conversion goes through the interpolated sample at the
endpoint, so switching axis never carries raw numbers across units.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

from flight_core.channels import ChannelKind, channel_key
from flight_core.model import Sample
from flight_core.units import UnitSystem
from flight_plot.axis_selector import AxisSelector
from flight_plot.interpolation import interpolate_at

Range = Tuple[float, float]

DEFAULT_WHEEL_ZOOM_SCALE = 500.0


def to_time(samples: Sequence[Sample], axis: ChannelKind, units: UnitSystem, coordinate: float) -> float:
    sample = interpolate_at(samples, coordinate, channel_key(axis, units))
    if sample is None:
        return 0.0
    return sample.t


def to_axis_coordinate(samples: Sequence[Sample], axis: ChannelKind, units: UnitSystem, t: float) -> float:
    sample = interpolate_at(samples, t, channel_key(ChannelKind.TIME, units))
    if sample is None:
        return 0.0
    return channel_key(axis, units)(sample)


def to_time_range(samples: Sequence[Sample], axis: ChannelKind, units: UnitSystem, axis_range: Range) -> Range:
    lower, upper = axis_range
    return (
        to_time(samples, axis, units, lower),
        to_time(samples, axis, units, upper),
    )


def to_axis_range(samples: Sequence[Sample], axis: ChannelKind, units: UnitSystem, time_range: Range) -> Range:
    t0, t1 = time_range
    return (
        to_axis_coordinate(samples, axis, units, t0),
        to_axis_coordinate(samples, axis, units, t1),
    )


def convert_coordinate(
    samples: Sequence[Sample],
    units: UnitSystem,
    coordinate: float,
    from_axis: ChannelKind,
    to_axis: ChannelKind,
) -> float:
    """Re-express an axis coordinate after an axis switch."""
    t = to_time(samples, from_axis, units, coordinate)
    return to_axis_coordinate(samples, to_axis, units, t)


def zoom_range(axis_range: Range, focus: float, angle_delta: float,
               scale: float = DEFAULT_WHEEL_ZOOM_SCALE) -> Range:
    """Scale *axis_range* about *focus*; positive wheel deltas zoom in."""
    multiplier = math.exp(-angle_delta / scale)
    lower, upper = axis_range
    return (
        focus + (lower - focus) * multiplier,
        focus + (upper - focus) * multiplier,
    )


def pan_range(axis_range: Range, begin: float, cursor: float) -> Range:
    """Shift *axis_range* so the point grabbed at *begin* follows the cursor."""
    diff = begin - cursor
    lower, upper = axis_range
    return lower + diff, upper + diff


def ordered(value_range: Range) -> Range:
    lower, upper = value_range
    return (lower, upper) if lower <= upper else (upper, lower)


class RangeSynchronizer:
    """Binds the conversions above to a track session and an axis selector."""

    def __init__(self, session, selector: AxisSelector) -> None:
        self._session = session
        self._selector = selector

    def _context(self):
        return self._session.samples, self._selector.current_axis, self._session.active_unit_system()

    def to_time(self, coordinate: float) -> float:
        return to_time(*self._context(), coordinate)

    def to_axis_coordinate(self, t: float) -> float:
        return to_axis_coordinate(*self._context(), t)

    def to_time_range(self, axis_range: Range) -> Range:
        return to_time_range(*self._context(), axis_range)

    def to_axis_range(self, time_range: Range) -> Range:
        return to_axis_range(*self._context(), time_range)

    def current_axis_range(self) -> Range:
        return self.to_axis_range(self._session.current_time_range())

    def publish_axis_range(self, axis_range: Range) -> Range:
        """Store *axis_range* as the shared time window and return that window."""
        t0, t1 = self.to_time_range(ordered(axis_range))
        self._session.set_time_range(t0, t1)
        return t0, t1
