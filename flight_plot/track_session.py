"""Data-holding collaborator shared by every plot view.

The session owns the loaded sample sequence, the optional reference
("optimal") trajectory, the active unit system, the shared navigation window
and the current mark. All navigation state is stored as elapsed time so that
views with different horizontal axes stay in step.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Iterable, Optional, Tuple

from PyQt5 import QtCore

from flight_core.channels import ChannelKind, channel_key
from flight_core.model import Sample, shift_sample
from flight_core.units import UnitSystem
from flight_plot.interpolation import interpolate_at

logger = logging.getLogger(__name__)


class MarkKind(Enum):
    NONE = "none"
    POINT = "point"
    INTERVAL = "interval"


@dataclass(frozen=True)
class Selection:
    """Current mark in time units; ``start == end`` for a point mark."""

    kind: MarkKind = MarkKind.NONE
    start: float = 0.0
    end: float = 0.0

    @property
    def active(self) -> bool:
        return self.kind is not MarkKind.NONE


def _validated(samples: Iterable[Sample], label: str) -> Tuple[Sample, ...]:
    ordered = tuple(samples)
    duplicates = 0
    for index in range(1, len(ordered)):
        previous = ordered[index - 1].t
        current = ordered[index].t
        if current < previous:
            raise ValueError(
                f"{label} samples must be sorted by time: "
                f"index {index} has t={current} after t={previous}"
            )
        if current == previous:
            duplicates += 1
    if duplicates:
        logger.warning("%s track has %s duplicate timestamps", label, duplicates)
    return ordered


class TrackSession(QtCore.QObject):
    dataChanged = QtCore.pyqtSignal()
    timeRangeChanged = QtCore.pyqtSignal(float, float)
    selectionChanged = QtCore.pyqtSignal(object)
    unitsChanged = QtCore.pyqtSignal(object)

    def __init__(self, units: UnitSystem = UnitSystem.METRIC,
                 parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._samples: Tuple[Sample, ...] = ()
        self._optimal: Tuple[Sample, ...] = ()
        self._units = units
        self._time_range: Tuple[float, float] = (0.0, 0.0)
        self._selection = Selection()

    # --- sample access -------------------------------------------------
    @property
    def samples(self) -> Tuple[Sample, ...]:
        return self._samples

    @property
    def optimal_samples(self) -> Tuple[Sample, ...]:
        return self._optimal

    def sample_count(self) -> int:
        return len(self._samples)

    def sample_at(self, index: int) -> Sample:
        return self._samples[index]

    def optimal_sample_count(self) -> int:
        return len(self._optimal)

    def optimal_sample_at(self, index: int) -> Sample:
        return self._optimal[index]

    def load(self, samples: Iterable[Sample], optimal: Iterable[Sample] = ()) -> None:
        """Replace the track; the time window resets to the full span."""
        self._samples = _validated(samples, "Primary")
        self._optimal = _validated(optimal, "Optimal")
        self._selection = Selection()
        if self._samples:
            self._time_range = (self._samples[0].t, self._samples[-1].t)
        else:
            self._time_range = (0.0, 0.0)
        logger.info(
            "Loaded track: samples=%s optimal=%s span=%s",
            len(self._samples), len(self._optimal), self._time_range,
        )
        self.dataChanged.emit()
        self.timeRangeChanged.emit(*self._time_range)
        self.selectionChanged.emit(self._selection)

    def clear(self) -> None:
        logger.info("Cleared track")
        self.load(())

    def interpolate_at_time(self, t: float) -> Optional[Sample]:
        return interpolate_at(self._samples, t, channel_key(ChannelKind.TIME, self._units))

    # --- units ---------------------------------------------------------
    def active_unit_system(self) -> UnitSystem:
        return self._units

    def set_unit_system(self, units: UnitSystem) -> None:
        if units is self._units:
            return
        self._units = units
        self.unitsChanged.emit(units)

    # --- navigation window ---------------------------------------------
    def current_time_range(self) -> Tuple[float, float]:
        return self._time_range

    def set_time_range(self, t0: float, t1: float) -> None:
        lower, upper = (t0, t1) if t0 <= t1 else (t1, t0)
        if (lower, upper) == self._time_range:
            return
        self._time_range = (lower, upper)
        logger.debug("Time range set: %.3f..%.3f", lower, upper)
        self.timeRangeChanged.emit(lower, upper)

    # --- marks -----------------------------------------------------------
    def current_selection(self) -> Selection:
        return self._selection

    def set_point_mark(self, t: float) -> None:
        self._set_selection(Selection(MarkKind.POINT, t, t))

    def set_interval_mark(self, t0: float, t1: float) -> None:
        self._set_selection(Selection(MarkKind.INTERVAL, t0, t1))

    def clear_mark(self) -> None:
        self._set_selection(Selection())

    def _set_selection(self, selection: Selection) -> None:
        if selection == self._selection:
            return
        self._selection = selection
        self.selectionChanged.emit(selection)

    # --- re-basing -------------------------------------------------------
    def set_zero(self, t: float) -> None:
        """Re-base elapsed time so the instant *t* becomes zero."""
        if not self._samples:
            return
        dt = -t
        self._samples = tuple(shift_sample(s, dt=dt) for s in self._samples)
        self._optimal = tuple(shift_sample(s, dt=dt) for s in self._optimal)
        t0, t1 = self._time_range
        self._time_range = (t0 + dt, t1 + dt)
        if self._selection.active:
            self._selection = Selection(
                self._selection.kind, self._selection.start + dt, self._selection.end + dt
            )
        logger.info("Zero moved to t=%.3f", t)
        self.dataChanged.emit()
        self.timeRangeChanged.emit(*self._time_range)
        self.selectionChanged.emit(self._selection)

    def set_ground(self, t: float) -> None:
        """Re-base heights so the height at instant *t* becomes zero."""
        sample = self.interpolate_at_time(t)
        if sample is None:
            return
        dz = -sample.z
        self._samples = tuple(shift_sample(s, dz=dz) for s in self._samples)
        self._optimal = tuple(shift_sample(s, dz=dz) for s in self._optimal)
        logger.info("Ground moved to t=%.3f (dz=%.3f)", t, dz)
        self.dataChanged.emit()
