"""Windowed statistics over an axis interval.

The mean is time-weighted: each segment contributes the trapezoid
``(y1 + y2) / 2 * |dt|`` with ``dt`` taken from elapsed time rather than the
active axis, so the result stays meaningful when the axis is distance. The
window edges are the interpolated boundary samples, which gives the first and
last segments their partial weight.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from flight_core.channels import ChannelKind, channel_key
from flight_core.model import Sample
from flight_core.units import UnitSystem
from flight_plot.index_resolver import find_index_above, find_index_below
from flight_plot.interpolation import interpolate_at


@dataclass(frozen=True)
class WindowStats:
    """
    Statistics of one channel over a window.
    - value: channel value at the window's end coordinate
    - delta: value at end minus value at start
    - minimum / mean / maximum: over boundary and inner samples; mean is
      time-weighted
    - duration: elapsed seconds covered by the window
    """
    value: float
    delta: float
    minimum: float
    mean: float
    maximum: float
    duration: float = 0.0

    @classmethod
    def empty(cls) -> "WindowStats":
        return cls(value=0.0, delta=0.0, minimum=0.0, mean=0.0, maximum=0.0)


def window_points(
    samples: Sequence[Sample],
    axis: ChannelKind,
    units: UnitSystem,
    start: float,
    end: float,
) -> List[Sample]:
    """Boundary samples of ``[start, end]`` with every sample strictly inside."""
    key = channel_key(axis, units)
    low, high = (start, end) if start <= end else (end, start)

    dp_low = interpolate_at(samples, low, key)
    dp_high = interpolate_at(samples, high, key)
    if dp_low is None or dp_high is None:
        return []

    j_min = find_index_above(samples, low, key)
    j_max = find_index_below(samples, high, key)

    points = [dp_low]
    points.extend(samples[j] for j in range(j_min, j_max + 1))
    points.append(dp_high)
    return points


def _stats_over(points: Sequence[Sample], kind: ChannelKind, units: UnitSystem,
                first: Sample, last: Sample) -> WindowStats:
    value_of = channel_key(kind, units)
    time_of = channel_key(ChannelKind.TIME, units)

    value_end = value_of(last)
    value_start = value_of(first)

    y_prev = value_of(points[0])
    t_prev = time_of(points[0])
    minimum = maximum = y_prev
    total = 0.0
    duration = 0.0

    for point in points[1:]:
        y = value_of(point)
        t = time_of(point)
        dt = abs(t - t_prev)
        total += (y + y_prev) / 2 * dt
        duration += dt
        minimum = min(minimum, y)
        maximum = max(maximum, y)
        y_prev, t_prev = y, t

    if duration > 0:
        mean = min(max(total / duration, minimum), maximum)
    else:
        mean = value_end

    return WindowStats(
        value=value_end,
        delta=value_end - value_start,
        minimum=minimum,
        mean=mean,
        maximum=maximum,
        duration=duration,
    )


def aggregate(
    samples: Sequence[Sample],
    axis: ChannelKind,
    kind: ChannelKind,
    units: UnitSystem,
    start: float,
    end: float,
) -> WindowStats:
    """Min / time-weighted mean / max / delta of *kind* between two axis coordinates.

    *start* and *end* may be given in either order; ``delta`` and ``value``
    follow the order given.
    """
    return aggregate_channels(samples, axis, (kind,), units, start, end).get(
        kind, WindowStats.empty()
    )


def aggregate_channels(
    samples: Sequence[Sample],
    axis: ChannelKind,
    kinds: Iterable[ChannelKind],
    units: UnitSystem,
    start: float,
    end: float,
) -> Dict[ChannelKind, WindowStats]:
    kinds = list(kinds)
    points = window_points(samples, axis, units, start, end)
    if not points:
        return {kind: WindowStats.empty() for kind in kinds}

    key = channel_key(axis, units)
    first = interpolate_at(samples, start, key)
    last = interpolate_at(samples, end, key)
    return {kind: _stats_over(points, kind, units, first, last) for kind in kinds}
