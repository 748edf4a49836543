"""Query facade used by a plot view.

One :class:`PlotEngine` backs one view. It owns that view's axis selector and
channel display settings and borrows the shared :class:`TrackSession`; every
query re-reads the session's current samples, so a reloaded track never
resolves against stale indices.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import numpy as np
from PyQt5 import QtCore

from flight_core.channels import ChannelKind, channel_spec
from flight_core.model import Sample
from flight_plot.aggregation import WindowStats, aggregate, aggregate_channels
from flight_plot.axis_selector import AxisSelector
from flight_plot.channel_settings import ChannelSettingsTable
from flight_plot.config import PlotConfig
from flight_plot.interpolation import interpolate_at
from flight_plot.mark_report import MarkReport, interval_report, point_report
from flight_plot.range_sync import (
    DEFAULT_WHEEL_ZOOM_SCALE,
    RangeSynchronizer,
    convert_coordinate,
    pan_range,
    zoom_range,
)
from flight_plot.series import bounds_in_range, merge_bounds, resolved_series
from flight_plot.track_session import MarkKind, TrackSession

logger = logging.getLogger(__name__)

Range = Tuple[float, float]


class PlotEngine(QtCore.QObject):
    axisRangeChanged = QtCore.pyqtSignal(float, float)

    def __init__(
        self,
        session: TrackSession,
        axis: ChannelKind = ChannelKind.TIME,
        settings: Optional[ChannelSettingsTable] = None,
        wheel_zoom_scale: float = DEFAULT_WHEEL_ZOOM_SCALE,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._selector = AxisSelector(axis)
        self._sync = RangeSynchronizer(session, self._selector)
        self._settings = settings or ChannelSettingsTable()
        self._wheel_zoom_scale = wheel_zoom_scale
        # Cursor and drag anchor in axis units, as the view last reported them.
        self.cursor: Optional[float] = None
        self.drag_begin: Optional[float] = None

        session.timeRangeChanged.connect(self._on_time_range_changed)
        session.dataChanged.connect(self._publish_axis_range)
        session.unitsChanged.connect(self._publish_axis_range)

    @classmethod
    def from_config(cls, session: TrackSession, cfg: PlotConfig,
                    parent: Optional[QtCore.QObject] = None) -> "PlotEngine":
        """Build a view engine from *cfg*; the configured units go to the shared session."""
        session.set_unit_system(cfg.units)
        return cls(
            session,
            axis=cfg.x_axis,
            settings=ChannelSettingsTable(cfg.channels),
            wheel_zoom_scale=cfg.wheel_zoom_scale,
            parent=parent,
        )

    # --- state -------------------------------------------------------------
    @property
    def session(self) -> TrackSession:
        return self._session

    @property
    def settings(self) -> ChannelSettingsTable:
        return self._settings

    def current_axis(self) -> ChannelKind:
        return self._selector.current_axis

    def axis_title(self) -> str:
        return self._selector.title(self._session.active_unit_system())

    def _key(self):
        return self._selector.key(self._session.active_unit_system())

    # --- axis and range ------------------------------------------------------
    def set_axis(self, axis: ChannelKind) -> Range:
        """Switch the horizontal axis, keeping the time meaning of the view."""
        previous = self._selector.current_axis
        self._selector.set_axis(axis)
        if axis is not previous:
            samples = self._session.samples
            units = self._session.active_unit_system()
            if self.cursor is not None:
                self.cursor = convert_coordinate(samples, units, self.cursor, previous, axis)
            if self.drag_begin is not None:
                self.drag_begin = convert_coordinate(samples, units, self.drag_begin, previous, axis)
        return self._publish_axis_range()

    def axis_range(self) -> Range:
        return self._sync.current_axis_range()

    def set_axis_range(self, lower: float, upper: float) -> Range:
        """Make ``[lower, upper]`` (axis units) the shared navigation window."""
        if not self._session.samples:
            return self.axis_range()
        self._sync.publish_axis_range((lower, upper))
        return self.axis_range()

    def zoom(self, focus: float, angle_delta: float) -> Range:
        new_range = zoom_range(self.axis_range(), focus, angle_delta, self._wheel_zoom_scale)
        return self.set_axis_range(*new_range)

    def pan(self, begin: float, cursor: float) -> Range:
        return self.set_axis_range(*pan_range(self.axis_range(), begin, cursor))

    def to_time(self, coordinate: float) -> float:
        return self._sync.to_time(coordinate)

    def to_axis_coordinate(self, t: float) -> float:
        return self._sync.to_axis_coordinate(t)

    def _on_time_range_changed(self, _t0: float, _t1: float) -> None:
        self._publish_axis_range()

    def _publish_axis_range(self, *_args) -> Range:
        axis_range = self.axis_range()
        logger.debug(
            "Publishing %s range %.3f..%.3f",
            self._selector.current_axis.value, axis_range[0], axis_range[1],
        )
        self.axisRangeChanged.emit(*axis_range)
        return axis_range

    # --- point queries -------------------------------------------------------
    def interpolate_at(self, coordinate: float) -> Optional[Sample]:
        return interpolate_at(self._session.samples, coordinate, self._key())

    def resolved_series(self, kind: ChannelKind, optimal: bool = False) -> Tuple[np.ndarray, np.ndarray]:
        samples = self._session.optimal_samples if optimal else self._session.samples
        return resolved_series(
            samples, self._selector.current_axis, kind, self._session.active_unit_system()
        )

    def value_bounds(self, kind: ChannelKind) -> Optional[Range]:
        """Y range of *kind* over the visible window, honouring fixed clamps."""
        axis_range = self.axis_range()
        bounds = bounds_in_range(*self.resolved_series(kind), axis_range)
        if channel_spec(kind).has_optimal:
            bounds = merge_bounds(
                bounds, bounds_in_range(*self.resolved_series(kind, optimal=True), axis_range)
            )
        if bounds is None:
            return None
        factor = channel_spec(kind).factor(self._session.active_unit_system())
        return self._settings.get(kind).clamp(factor, bounds)

    # --- range queries -------------------------------------------------------
    def aggregate(self, axis_range: Range, kind: ChannelKind, optimal: bool = False) -> WindowStats:
        samples = self._session.optimal_samples if optimal else self._session.samples
        start, end = axis_range
        return aggregate(
            samples,
            self._selector.current_axis,
            kind,
            self._session.active_unit_system(),
            start,
            end,
        )

    def aggregate_visible(self, axis_range: Range) -> Dict[ChannelKind, WindowStats]:
        start, end = axis_range
        return aggregate_channels(
            self._session.samples,
            self._selector.current_axis,
            self._settings.visible_channels(),
            self._session.active_unit_system(),
            start,
            end,
        )

    # --- marks ---------------------------------------------------------------
    def mark_point(self, coordinate: float) -> None:
        if not self._session.samples:
            return
        self._session.set_point_mark(self.to_time(coordinate))

    def mark_interval(self, start: float, end: float) -> None:
        if not self._session.samples:
            return
        self._session.set_interval_mark(self.to_time(start), self.to_time(end))

    def clear_mark(self) -> None:
        self._session.clear_mark()

    def mark_coordinates(self) -> Optional[Range]:
        """Current mark expressed in this view's axis units."""
        selection = self._session.current_selection()
        if selection.kind is MarkKind.NONE:
            return None
        return self.to_axis_coordinate(selection.start), self.to_axis_coordinate(selection.end)

    # --- reports -------------------------------------------------------------
    def _colors(self) -> dict:
        return {kind: settings.color for kind, settings in self._settings.items()}

    def point_report(self, coordinate: float) -> Optional[MarkReport]:
        sample = self.interpolate_at(coordinate)
        if sample is None:
            return None
        return point_report(
            sample,
            self._selector.current_axis,
            self._settings.visible_channels(),
            self._colors(),
            self._session.active_unit_system(),
        )

    def interval_report(self, start: float, end: float) -> Optional[MarkReport]:
        first = self.interpolate_at(start)
        last = self.interpolate_at(end)
        if first is None or last is None:
            return None
        return interval_report(
            first,
            last,
            self._selector.current_axis,
            self.aggregate_visible((start, end)),
            self._colors(),
            self._session.active_unit_system(),
        )
