"""Track data model and derived channel definitions."""

from flight_core.channels import ChannelKind, channel_spec
from flight_core.model import Sample, interpolate_sample
from flight_core.units import UnitSystem

__all__ = ["ChannelKind", "Sample", "UnitSystem", "channel_spec", "interpolate_sample"]
