"""Loading of plot engine defaults from ``flight_plot.ini``.

Example::

    [plot]
    x_axis = distance_2d
    units = imperial
    wheel_zoom_scale = 500

    [channel.glide_ratio]
    visible = yes
    color = #8b008b
    minimum = 0
    use_minimum = yes
"""
from __future__ import annotations

from configparser import ConfigParser, Error
from dataclasses import dataclass, field
import logging
from pathlib import Path
import sys
from typing import Dict, Optional

from flight_core.channels import ChannelKind, is_axis_eligible, parse_channel_kind
from flight_core.units import UnitSystem, parse_unit_system
from flight_plot.channel_settings import ChannelSettings
from flight_plot.range_sync import DEFAULT_WHEEL_ZOOM_SCALE

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "flight_plot.ini"
_PLOT_SECTION = "plot"
_CHANNEL_PREFIX = "channel."


@dataclass
class PlotConfig:
    x_axis: ChannelKind = ChannelKind.TIME
    units: UnitSystem = UnitSystem.METRIC
    wheel_zoom_scale: float = DEFAULT_WHEEL_ZOOM_SCALE
    channels: Dict[ChannelKind, ChannelSettings] = field(default_factory=dict)


def _config_dir(main_script_path: Optional[Path]) -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent
    if main_script_path is not None:
        return main_script_path.resolve().parent
    main_module = sys.modules.get("__main__")
    if main_module and getattr(main_module, "__file__", None):
        return Path(main_module.__file__).resolve().parent
    return Path.cwd()


def config_path(main_script_path: Optional[Path] = None) -> Path:
    return _config_dir(main_script_path) / CONFIG_FILENAME


def load_plot_config(path: Optional[Path] = None) -> PlotConfig:
    """Read *path* (or the default location); fall back to defaults on error."""
    ini_path = path if path is not None else config_path()
    cfg = PlotConfig()
    if not ini_path.exists():
        return cfg

    parser = ConfigParser()
    try:
        with ini_path.open("r", encoding="utf-8") as handle:
            parser.read_file(handle)
    except (OSError, Error) as exc:
        logger.warning("Could not read plot config %s: %s", ini_path, exc)
        return cfg

    _apply_plot_section(cfg, parser)
    for section in parser.sections():
        if section.lower().startswith(_CHANNEL_PREFIX):
            _apply_channel_section(cfg, parser, section)

    logger.info(
        "Loaded plot config: path=%s axis=%s units=%s channels=%s",
        ini_path, cfg.x_axis.value, cfg.units.value, len(cfg.channels),
    )
    return cfg


def _apply_plot_section(cfg: PlotConfig, parser: ConfigParser) -> None:
    if not parser.has_section(_PLOT_SECTION):
        return

    axis_name = parser.get(_PLOT_SECTION, "x_axis", fallback=None)
    if axis_name:
        axis = parse_channel_kind(axis_name)
        if axis is None or not is_axis_eligible(axis):
            logger.warning("Ignoring x_axis=%s: not an axis channel", axis_name)
        else:
            cfg.x_axis = axis

    cfg.units = parse_unit_system(parser.get(_PLOT_SECTION, "units", fallback=None), cfg.units)

    try:
        scale = parser.getfloat(_PLOT_SECTION, "wheel_zoom_scale", fallback=cfg.wheel_zoom_scale)
    except ValueError:
        logger.warning("Ignoring non-numeric wheel_zoom_scale")
    else:
        if scale > 0:
            cfg.wheel_zoom_scale = scale


def _apply_channel_section(cfg: PlotConfig, parser: ConfigParser, section: str) -> None:
    kind = parse_channel_kind(section[len(_CHANNEL_PREFIX):])
    if kind is None or is_axis_eligible(kind):
        logger.warning("Ignoring unknown series channel section [%s]", section)
        return

    base = ChannelSettings.defaults(kind)
    try:
        settings = ChannelSettings(
            visible=parser.getboolean(section, "visible", fallback=base.visible),
            color=parser.get(section, "color", fallback=base.color),
            minimum=parser.getfloat(section, "minimum", fallback=base.minimum),
            maximum=parser.getfloat(section, "maximum", fallback=base.maximum),
            use_minimum=parser.getboolean(section, "use_minimum", fallback=base.use_minimum),
            use_maximum=parser.getboolean(section, "use_maximum", fallback=base.use_maximum),
        )
    except ValueError as exc:
        logger.warning("Ignoring invalid channel section [%s]: %s", section, exc)
        return
    cfg.channels[kind] = settings
