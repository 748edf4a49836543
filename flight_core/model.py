"""
model.py

Immutable data model for a single track sample.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime


@dataclass(frozen=True)
class Sample:
    """
    One timestamped GNSS fix plus the physical fields derived from it.
    - date_time: UTC timestamp of the fix
    - t: elapsed seconds relative to the track's zero point
    - lat / lon: degrees, h_msl: metres above mean sea level
    - vel_n / vel_e / vel_d: velocity in m/s (down positive)
    - h_acc / v_acc: position accuracy (m), s_acc: speed accuracy (m/s),
      c_acc: course accuracy (deg)
    - num_sv: satellites used in the solution
    - x / y: local plane position (m), z: height above the ground reference (m)
    - dist_2d / dist_3d: cumulative ground / slant distance (m)
    - curv: curvature (deg/s), accel: acceleration along the path (m/s^2)
    - lift / drag: aerodynamic coefficients
    - theta: course (deg), omega: course rate (deg/s)
    """
    date_time: datetime
    t: float
    lat: float = 0.0
    lon: float = 0.0
    h_msl: float = 0.0
    vel_n: float = 0.0
    vel_e: float = 0.0
    vel_d: float = 0.0
    h_acc: float = 0.0
    v_acc: float = 0.0
    s_acc: float = 0.0
    c_acc: float = 0.0
    num_sv: int = 0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    dist_2d: float = 0.0
    dist_3d: float = 0.0
    curv: float = 0.0
    accel: float = 0.0
    lift: float = 0.0
    drag: float = 0.0
    theta: float = 0.0
    omega: float = 0.0


# Fields blended with a plain weighted sum.
_LINEAR_FIELDS = tuple(
    f.name for f in fields(Sample) if f.name not in {"date_time", "num_sv"}
)


def interpolate_sample(s1: Sample, s2: Sample, f: float) -> Sample:
    """Return the sample a fraction *f* of the way from *s1* to *s2*."""
    values = {
        name: getattr(s1, name) + f * (getattr(s2, name) - getattr(s1, name))
        for name in _LINEAR_FIELDS
    }
    values["date_time"] = s1.date_time + (s2.date_time - s1.date_time) * f
    values["num_sv"] = int(round(s1.num_sv + f * (s2.num_sv - s1.num_sv)))
    return Sample(**values)


def shift_sample(sample: Sample, *, dt: float = 0.0, dz: float = 0.0) -> Sample:
    """Copy of *sample* with elapsed time and height re-based."""
    return replace(sample, t=sample.t + dt, z=sample.z + dz)
