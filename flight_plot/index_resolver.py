"""Binary search over a sample sequence keyed by an axis coordinate."""

from __future__ import annotations

from typing import Callable, Sequence, Tuple

from flight_core.model import Sample

CoordinateKey = Callable[[Sample], float]


def find_index_below(samples: Sequence[Sample], x: float, key: CoordinateKey) -> int:
    """Largest index whose coordinate is strictly below *x*, or ``-1``."""
    below = -1
    above = len(samples)
    while below + 1 != above:
        mid = (below + above) // 2
        if key(samples[mid]) < x:
            below = mid
        else:
            above = mid
    return below


def find_index_above(samples: Sequence[Sample], x: float, key: CoordinateKey) -> int:
    """Smallest index whose coordinate is strictly above *x*, or ``len(samples)``."""
    below = -1
    above = len(samples)
    while below + 1 != above:
        mid = (below + above) // 2
        if key(samples[mid]) > x:
            above = mid
        else:
            below = mid
    return above


def bracket(samples: Sequence[Sample], x: float, key: CoordinateKey) -> Tuple[int, int]:
    """Return ``(below, above)`` around *x*.

    The pair is adjacent unless samples sit exactly on *x*, in which case the
    indices between them are the exact matches.
    """
    return find_index_below(samples, x, key), find_index_above(samples, x, key)
