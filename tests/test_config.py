from flight_core.channels import ChannelKind
from flight_core.units import UnitSystem
from flight_plot.config import CONFIG_FILENAME, PlotConfig, config_path, load_plot_config


def _write(tmp_path, text: str):
    ini_path = tmp_path / CONFIG_FILENAME
    ini_path.write_text(text, encoding="utf-8")
    return ini_path


def test_missing_file_returns_defaults(tmp_path):
    assert load_plot_config(tmp_path / "missing.ini") == PlotConfig()


def test_reads_plot_and_channel_sections(tmp_path):
    ini_path = _write(
        tmp_path,
        "[plot]\n"
        "x_axis = distance_2d\n"
        "units = imperial\n"
        "wheel_zoom_scale = 250\n"
        "\n"
        "[channel.glide_ratio]\n"
        "visible = yes\n"
        "color = #123456\n"
        "minimum = 0\n"
        "maximum = 4\n"
        "use_minimum = true\n",
    )

    cfg = load_plot_config(ini_path)

    assert cfg.x_axis is ChannelKind.DISTANCE_2D
    assert cfg.units is UnitSystem.IMPERIAL
    assert cfg.wheel_zoom_scale == 250.0
    glide = cfg.channels[ChannelKind.GLIDE_RATIO]
    assert glide.visible
    assert glide.color == "#123456"
    assert glide.maximum == 4.0
    assert glide.use_minimum and not glide.use_maximum


def test_invalid_values_fall_back(tmp_path, caplog):
    ini_path = _write(
        tmp_path,
        "[plot]\n"
        "x_axis = elevation\n"
        "units = furlongs\n"
        "wheel_zoom_scale = fast\n"
        "\n"
        "[channel.time]\n"
        "visible = yes\n"
        "\n"
        "[channel.bogus]\n"
        "visible = yes\n"
        "\n"
        "[channel.lift]\n"
        "minimum = low\n",
    )

    cfg = load_plot_config(ini_path)

    assert cfg.x_axis is ChannelKind.TIME
    assert cfg.units is UnitSystem.METRIC
    assert cfg.wheel_zoom_scale == PlotConfig().wheel_zoom_scale
    assert cfg.channels == {}
    assert "x_axis=elevation" in caplog.text


def test_unreadable_file_falls_back(tmp_path):
    ini_path = _write(tmp_path, "no section header\n")

    assert load_plot_config(ini_path) == PlotConfig()


def test_config_path_sits_next_to_main_script(tmp_path):
    script = tmp_path / "viewer.py"
    script.write_text("", encoding="utf-8")

    assert config_path(script) == tmp_path / CONFIG_FILENAME
