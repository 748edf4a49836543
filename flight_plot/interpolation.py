"""Point queries: the sample at an arbitrary axis coordinate."""

from __future__ import annotations

from typing import Optional, Sequence

from flight_core.model import Sample, interpolate_sample
from flight_plot.index_resolver import CoordinateKey, bracket


def interpolate_at(samples: Sequence[Sample], x: float, key: CoordinateKey) -> Optional[Sample]:
    """Return the sample at coordinate *x* along *key*.

    Coordinates outside the sequence clamp to the first or last sample and an
    exact hit returns the stored sample itself. ``None`` for an empty sequence.
    """
    count = len(samples)
    if count == 0:
        return None

    below, above = bracket(samples, x, key)
    if below < 0:
        return samples[0]
    if above >= count:
        return samples[count - 1]
    # A flat run of equal coordinates only matches exactly, so it lands here
    # and resolves to the first sample of the run.
    if above - below > 1:
        return samples[below + 1]

    # Adjacent bracket: key(s1) < x < key(s2).
    s1 = samples[below]
    s2 = samples[above]
    x1 = key(s1)
    return interpolate_sample(s1, s2, (x - x1) / (key(s2) - x1))
