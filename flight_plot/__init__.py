"""Time-series query and aggregation engine behind the track plot views."""

from flight_plot.aggregation import WindowStats, aggregate, aggregate_channels
from flight_plot.axis_selector import AxisEligibilityError, AxisSelector
from flight_plot.interpolation import interpolate_at
from flight_plot.plot_engine import PlotEngine
from flight_plot.track_session import MarkKind, Selection, TrackSession

__all__ = [
    "AxisEligibilityError",
    "AxisSelector",
    "MarkKind",
    "PlotEngine",
    "Selection",
    "TrackSession",
    "WindowStats",
    "aggregate",
    "aggregate_channels",
    "interpolate_at",
]
