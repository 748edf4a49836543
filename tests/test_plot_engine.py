from datetime import datetime, timedelta, timezone
import math

import pytest

pytest.importorskip("PyQt5")

from flight_core.channels import ChannelKind
from flight_core.model import Sample
from flight_core.units import METERS_PER_FOOT, UnitSystem
from flight_plot.aggregation import WindowStats
from flight_plot.axis_selector import AxisEligibilityError
from flight_plot.channel_settings import ChannelSettings
from flight_plot.config import PlotConfig, load_plot_config
from flight_plot.plot_engine import PlotEngine
from flight_plot.track_session import MarkKind, TrackSession

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _track():
    rows = [
        # t, dist_2d, dist_3d, z
        (0.0, 0.0, 0.0, 100.0),
        (1.0, 10.0, 12.0, 90.0),
        (2.0, 30.0, 35.0, 70.0),
        (3.0, 60.0, 70.0, 40.0),
        (4.0, 100.0, 120.0, 0.0),
    ]
    return [
        Sample(date_time=BASE + timedelta(seconds=t), t=t, dist_2d=d2, dist_3d=d3, z=z, vel_n=5.0 + t)
        for t, d2, d3, z in rows
    ]


def _engine(axis: ChannelKind = ChannelKind.TIME):
    session = TrackSession()
    session.load(_track())
    return session, PlotEngine(session, axis=axis)


def test_axis_switch_keeps_time_window():
    session, engine = _engine()
    session.set_time_range(1.0, 2.0)
    published = []
    engine.axisRangeChanged.connect(lambda lo, hi: published.append((lo, hi)))

    new_range = engine.set_axis(ChannelKind.DISTANCE_2D)

    assert new_range == pytest.approx((10.0, 30.0))
    assert published == [pytest.approx((10.0, 30.0))]
    assert session.current_time_range() == (1.0, 2.0)

    assert engine.set_axis(ChannelKind.DISTANCE_3D) == pytest.approx((12.0, 35.0))
    assert engine.set_axis(ChannelKind.TIME) == pytest.approx((1.0, 2.0))


def test_rejected_axis_leaves_view_untouched():
    _session, engine = _engine(ChannelKind.DISTANCE_2D)

    with pytest.raises(AxisEligibilityError):
        engine.set_axis(ChannelKind.ELEVATION)

    assert engine.current_axis() is ChannelKind.DISTANCE_2D


def test_set_axis_range_publishes_time_window_to_session():
    session, engine = _engine(ChannelKind.DISTANCE_2D)

    result = engine.set_axis_range(45.0, 20.0)

    assert session.current_time_range() == pytest.approx((1.5, 2.5))
    assert result == pytest.approx((20.0, 45.0))


def test_views_share_navigation_through_session():
    session, time_view = _engine()
    distance_view = PlotEngine(session, axis=ChannelKind.DISTANCE_2D)
    seen = []
    distance_view.axisRangeChanged.connect(lambda lo, hi: seen.append((lo, hi)))

    time_view.set_axis_range(1.0, 3.0)

    assert distance_view.axis_range() == pytest.approx((10.0, 60.0))
    assert seen[-1] == pytest.approx((10.0, 60.0))


def test_range_beyond_track_clamps_to_span():
    session, engine = _engine()

    engine.set_axis_range(-10.0, 50.0)

    assert session.current_time_range() == (0.0, 4.0)


def test_zoom_and_pan():
    session, engine = _engine()

    engine.zoom(2.0, 500.0 * math.log(2.0))
    assert session.current_time_range() == pytest.approx((1.0, 3.0))

    engine.pan(2.0, 1.5)
    assert session.current_time_range() == pytest.approx((1.5, 3.5))


def test_cursor_and_drag_anchor_follow_axis_switch():
    _session, engine = _engine()
    engine.cursor = 1.5
    engine.drag_begin = 3.0

    engine.set_axis(ChannelKind.DISTANCE_2D)

    assert engine.cursor == pytest.approx(20.0)
    assert engine.drag_begin == pytest.approx(60.0)


def test_interpolate_and_marks():
    session, engine = _engine(ChannelKind.DISTANCE_2D)

    assert engine.interpolate_at(20.0).z == pytest.approx(80.0)

    engine.mark_point(20.0)
    assert session.current_selection().kind is MarkKind.POINT
    assert session.current_selection().start == pytest.approx(1.5)

    engine.mark_interval(10.0, 60.0)
    assert (session.current_selection().start, session.current_selection().end) == pytest.approx((1.0, 3.0))
    engine.set_axis(ChannelKind.TIME)
    assert engine.mark_coordinates() == pytest.approx((1.0, 3.0))

    engine.clear_mark()
    assert engine.mark_coordinates() is None


def test_resolved_series_uses_active_axis_and_units():
    session, engine = _engine(ChannelKind.DISTANCE_2D)
    session.set_unit_system(UnitSystem.IMPERIAL)

    x, y = engine.resolved_series(ChannelKind.ELEVATION)

    assert x.tolist() == pytest.approx([d / METERS_PER_FOOT for d in (0.0, 10.0, 30.0, 60.0, 100.0)])
    assert y[0] == pytest.approx(100.0 / METERS_PER_FOOT)
    assert engine.axis_title() == "Horizontal Distance (ft)"


def test_value_bounds_cover_visible_window_optimal_and_clamps():
    session = TrackSession()
    optimal = [
        Sample(date_time=BASE, t=0.0, z=150.0),
        Sample(date_time=BASE + timedelta(seconds=4), t=4.0, z=-20.0),
    ]
    session.load(_track(), optimal=optimal)
    engine = PlotEngine(session)

    assert engine.value_bounds(ChannelKind.ELEVATION) == pytest.approx((-20.0, 150.0))

    session.set_time_range(1.0, 3.0)
    assert engine.value_bounds(ChannelKind.NUMBER_OF_SATELLITES) == (0.0, 0.0)
    assert engine.value_bounds(ChannelKind.HORIZONTAL_SPEED) == pytest.approx((6.0 * 3.6, 8.0 * 3.6))

    engine.settings.update(ChannelKind.HORIZONTAL_SPEED, minimum=0.0, use_minimum=True)
    assert engine.value_bounds(ChannelKind.HORIZONTAL_SPEED) == pytest.approx((0.0, 8.0 * 3.6))


def test_aggregate_over_axis_window():
    _session, engine = _engine(ChannelKind.DISTANCE_2D)

    stats = engine.aggregate((10.0, 60.0), ChannelKind.ELEVATION)

    assert stats.minimum == pytest.approx(40.0)
    assert stats.maximum == pytest.approx(90.0)
    assert stats.delta == pytest.approx(-50.0)
    assert stats.duration == pytest.approx(2.0)


def test_aggregate_visible_uses_visible_channels():
    _session, engine = _engine()
    engine.settings.toggle(ChannelKind.GLIDE_RATIO)

    result = engine.aggregate_visible((0.0, 4.0))

    assert set(result) == set(engine.settings.visible_channels())
    assert ChannelKind.GLIDE_RATIO in result


def test_reports():
    _session, engine = _engine()

    point = engine.point_report(2.0)
    assert point.heading == "2024-05-01 12:00:02.000 UTC"
    assert [row.title for row in point.rows[:2]] == ["Time (s)", "Horizontal Distance (m)"]

    interval = engine.interval_report(1.0, 3.0)
    elevation = next(row for row in interval.rows if row.title == "Elevation (m)")
    assert elevation.change == pytest.approx(-50.0)
    assert elevation.stats.maximum == pytest.approx(90.0)


def test_empty_session_queries_are_defined():
    session = TrackSession()
    engine = PlotEngine(session, axis=ChannelKind.DISTANCE_3D)

    assert engine.interpolate_at(3.0) is None
    assert engine.axis_range() == (0.0, 0.0)
    assert engine.set_axis_range(1.0, 2.0) == (0.0, 0.0)
    assert engine.aggregate((0.0, 1.0), ChannelKind.ELEVATION) == WindowStats.empty()
    assert engine.value_bounds(ChannelKind.ELEVATION) is None
    assert engine.resolved_series(ChannelKind.ELEVATION)[0].size == 0
    assert engine.point_report(1.0) is None
    engine.mark_point(1.0)
    assert not session.current_selection().active


def test_from_config():
    session = TrackSession()
    cfg = PlotConfig(
        x_axis=ChannelKind.DISTANCE_3D,
        wheel_zoom_scale=100.0,
        channels={ChannelKind.LIFT: ChannelSettings(visible=True, color="#abcdef")},
    )

    engine = PlotEngine.from_config(session, cfg)

    assert engine.current_axis() is ChannelKind.DISTANCE_3D
    assert engine.settings.is_visible(ChannelKind.LIFT)
    assert engine.settings.get(ChannelKind.LIFT).color == "#abcdef"


def test_from_config_applies_configured_units_to_session(tmp_path):
    ini = tmp_path / "flight_plot.ini"
    ini.write_text("[plot]\nunits = imperial\n", encoding="utf-8")
    session = TrackSession()
    session.load(_track())

    engine = PlotEngine.from_config(session, load_plot_config(ini))

    assert engine.session.active_unit_system() is UnitSystem.IMPERIAL
    assert engine.axis_title() == "Time (s)"
    assert engine.resolved_series(ChannelKind.ELEVATION)[1][0] == pytest.approx(100.0 / METERS_PER_FOOT)
