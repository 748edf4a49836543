"""Plot-ready arrays and visible value bounds for series channels."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from flight_core.channels import ChannelKind, channel_key
from flight_core.model import Sample
from flight_core.units import UnitSystem


def channel_array(samples: Sequence[Sample], kind: ChannelKind, units: UnitSystem) -> np.ndarray:
    key = channel_key(kind, units)
    return np.fromiter((key(sample) for sample in samples), dtype=float, count=len(samples))


def resolved_series(
    samples: Sequence[Sample],
    axis: ChannelKind,
    kind: ChannelKind,
    units: UnitSystem,
) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(x, y)``: axis coordinate and channel value for every sample."""
    return channel_array(samples, axis, units), channel_array(samples, kind, units)


def bounds_in_range(
    x: np.ndarray,
    y: np.ndarray,
    axis_range: Tuple[float, float],
) -> Optional[Tuple[float, float]]:
    """Min and max of *y* where *x* lies inside *axis_range* (inclusive)."""
    lower, upper = axis_range
    if lower > upper:
        lower, upper = upper, lower
    mask = (x >= lower) & (x <= upper)
    if not mask.any():
        return None
    visible = y[mask]
    return float(visible.min()), float(visible.max())


def merge_bounds(
    first: Optional[Tuple[float, float]],
    second: Optional[Tuple[float, float]],
) -> Optional[Tuple[float, float]]:
    if first is None:
        return second
    if second is None:
        return first
    return min(first[0], second[0]), max(first[1], second[1])
