"""Per-channel display state: visibility, color and fixed axis clamps."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from flight_core.channels import SERIES_CHANNELS, ChannelKind, channel_spec


@dataclass(frozen=True)
class ChannelSettings:
    """Display options for one series channel.

    ``minimum`` / ``maximum`` are stored in SI units and only applied when the
    matching ``use_*`` flag is set.
    """

    visible: bool
    color: str
    minimum: float = 0.0
    maximum: float = 0.0
    use_minimum: bool = False
    use_maximum: bool = False

    @classmethod
    def defaults(cls, kind: ChannelKind) -> "ChannelSettings":
        spec = channel_spec(kind)
        return cls(visible=spec.default_visible, color=spec.color)

    def clamp(self, factor: float, data_range: Tuple[float, float]) -> Tuple[float, float]:
        lower, upper = data_range
        if self.use_minimum:
            lower = self.minimum * factor
        if self.use_maximum:
            upper = self.maximum * factor
        return lower, upper


class ChannelSettingsTable:
    """Settings for every series channel, in display order."""

    def __init__(self, overrides: Optional[Mapping[ChannelKind, ChannelSettings]] = None) -> None:
        self._settings: Dict[ChannelKind, ChannelSettings] = {
            kind: ChannelSettings.defaults(kind) for kind in SERIES_CHANNELS
        }
        if overrides:
            for kind, settings in overrides.items():
                self.set(kind, settings)

    def get(self, kind: ChannelKind) -> ChannelSettings:
        return self._settings[kind]

    def set(self, kind: ChannelKind, settings: ChannelSettings) -> None:
        if kind not in self._settings:
            raise KeyError(f"{kind.value} is not a series channel")
        self._settings[kind] = settings

    def update(self, kind: ChannelKind, **changes) -> ChannelSettings:
        updated = replace(self.get(kind), **changes)
        self.set(kind, updated)
        return updated

    def is_visible(self, kind: ChannelKind) -> bool:
        return self._settings[kind].visible

    def toggle(self, kind: ChannelKind) -> bool:
        return self.update(kind, visible=not self.is_visible(kind)).visible

    def visible_channels(self) -> List[ChannelKind]:
        return [kind for kind, settings in self._settings.items() if settings.visible]

    def items(self) -> Iterable[Tuple[ChannelKind, ChannelSettings]]:
        return self._settings.items()
