"""Ownership of the channel that defines the horizontal coordinate."""

from __future__ import annotations

import logging

from flight_core.channels import (
    AXIS_CHANNELS,
    ChannelKind,
    channel_key,
    channel_spec,
    is_axis_eligible,
)
from flight_core.units import UnitSystem
from flight_plot.index_resolver import CoordinateKey

logger = logging.getLogger(__name__)


class AxisEligibilityError(ValueError):
    """Raised when a non-monotonic channel is chosen as the horizontal axis."""


def _check_eligible(axis) -> None:
    if not isinstance(axis, ChannelKind) or not is_axis_eligible(axis):
        raise AxisEligibilityError(
            f"{axis!r} cannot be used as the horizontal axis; "
            f"choose one of {[kind.value for kind in AXIS_CHANNELS]}"
        )


class AxisSelector:
    """Holds the active axis channel for one view.

    Only channels that are monotonic along the sample sequence may be
    selected. Each view owns its own selector, so views never share an axis
    through hidden state.
    """

    def __init__(self, axis: ChannelKind = ChannelKind.TIME) -> None:
        _check_eligible(axis)
        self._axis = axis

    @property
    def current_axis(self) -> ChannelKind:
        return self._axis

    def set_axis(self, axis: ChannelKind) -> None:
        _check_eligible(axis)
        if axis is not self._axis:
            logger.debug("Axis changed: %s -> %s", self._axis.value, axis.value)
        self._axis = axis

    def key(self, units: UnitSystem) -> CoordinateKey:
        return channel_key(self._axis, units)

    def title(self, units: UnitSystem) -> str:
        return channel_spec(self._axis).title(units)
