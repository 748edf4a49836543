"""
mark_report.py

Builds the rows shown in the cursor tooltip / status text for a point mark or
an interval mark. Returns plain strings and color hints; layout is left to the
view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from flight_core.channels import ChannelKind, channel_spec, channel_value
from flight_core.model import Sample
from flight_core.units import Quantity, UnitSystem, unit_label
from flight_plot.aggregation import WindowStats


@dataclass(frozen=True)
class ReportRow:
    title: str
    value: float
    change: Optional[float] = None
    stats: Optional[WindowStats] = None
    color: Optional[str] = None


@dataclass
class MarkReport:
    heading: str
    position: Optional[str] = None
    rows: List[ReportRow] = field(default_factory=list)


def format_timestamp(value: datetime) -> str:
    utc = value.astimezone(timezone.utc) if value.tzinfo else value
    return f"{utc:%Y-%m-%d %H:%M:%S}.{utc.microsecond // 1000:03d}"


def format_change(change: float) -> str:
    sign = "" if change < 0 else "+"
    return f"({sign}{change:g})"


def format_interval_heading(start: datetime, end: datetime) -> str:
    first = format_timestamp(start)
    last = format_timestamp(end)
    if first[:10] == last[:10]:
        return f"{first} to {last[11:]} UTC"
    return f"{first} to {last} UTC"


def format_position(sample: Sample, units: UnitSystem) -> str:
    factor = channel_spec(ChannelKind.ELEVATION).factor(units)
    label = unit_label(Quantity.LENGTH, units)
    return f"({sample.lat:.7f} deg, {sample.lon:.7f} deg, {sample.h_msl * factor:.3f} {label})"


def reference_channels(axis: ChannelKind) -> List[ChannelKind]:
    """Time and ground distance always, plus the active axis when it differs."""
    kinds = [ChannelKind.TIME, ChannelKind.DISTANCE_2D]
    if axis not in kinds:
        kinds.append(axis)
    return kinds


def point_report(
    sample: Sample,
    axis: ChannelKind,
    visible: Sequence[ChannelKind],
    colors: dict,
    units: UnitSystem,
) -> MarkReport:
    report = MarkReport(
        heading=f"{format_timestamp(sample.date_time)} UTC",
        position=format_position(sample, units),
    )
    for kind in reference_channels(axis):
        report.rows.append(
            ReportRow(channel_spec(kind).title(units), channel_value(kind, sample, units))
        )
    for kind in visible:
        report.rows.append(
            ReportRow(
                channel_spec(kind).title(units),
                channel_value(kind, sample, units),
                color=colors.get(kind),
            )
        )
    return report


def interval_report(
    start: Sample,
    end: Sample,
    axis: ChannelKind,
    stats: dict,
    colors: dict,
    units: UnitSystem,
) -> MarkReport:
    """*stats* maps each visible series channel to its :class:`WindowStats`."""
    report = MarkReport(heading=format_interval_heading(start.date_time, end.date_time))
    for kind in reference_channels(axis):
        value = channel_value(kind, end, units)
        report.rows.append(
            ReportRow(
                channel_spec(kind).title(units),
                value,
                change=value - channel_value(kind, start, units),
            )
        )
    for kind, window in stats.items():
        report.rows.append(
            ReportRow(
                channel_spec(kind).title(units),
                window.value,
                change=window.delta,
                stats=window,
                color=colors.get(kind),
            )
        )
    return report


def report_lines(report: MarkReport) -> List[str]:
    lines = [report.heading]
    if report.position:
        lines.append(report.position)
    for row in report.rows:
        text = f"{row.title}: {row.value:g}"
        if row.change is not None:
            text += f" {format_change(row.change)}"
        if row.stats is not None:
            text += f" [{row.stats.minimum:g}/{row.stats.mean:g}/{row.stats.maximum:g}]"
        lines.append(text)
    return lines
