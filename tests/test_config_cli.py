import logging
from pathlib import Path

import pytest
import yaml

from shadowcast import FovSettings, Shape
from shadowcast.cli import main
from shadowcast.config import DEFAULT_CONFIG, load_fov_config, load_yaml_config
from shadowcast.logging_utils import resolve_level, setup_logging

MAP_TEXT = """\
###########
#.........#
#...#.....#
#....@....#
#.........#
###########
"""


def _noop_opaque(grid, x, y):
    return False


def _noop_apply(grid, x, y, sx, sy):
    return None


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text)
    return path


def test_load_yaml_config_reads_mapping(tmp_path):
    path = _write(tmp_path, "fov.yaml", "shape: octagon\nradius: 4\n")
    assert load_yaml_config(path, "FOV") == {"shape": "octagon", "radius": 4}


def test_load_yaml_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml_config(tmp_path / "missing.yaml", "FOV")


def test_load_yaml_config_empty_file_is_empty_mapping(tmp_path):
    path = _write(tmp_path, "empty.yaml", "")
    assert load_yaml_config(path, "FOV") == {}


def test_load_yaml_config_parse_error_is_reraised(tmp_path):
    path = _write(tmp_path, "bad.yaml", "shape: [circle\n")
    with pytest.raises(yaml.YAMLError):
        load_yaml_config(path, "FOV")


def test_load_yaml_config_rejects_non_mapping(tmp_path):
    path = _write(tmp_path, "list.yaml", "- circle\n- octagon\n")
    with pytest.raises(ValueError):
        load_yaml_config(path, "FOV")


def test_load_fov_config_merges_over_defaults(tmp_path):
    path = _write(tmp_path, "fov.yaml", "radius: 3\nmode: beam\nbogus: 1\n")
    config = load_fov_config(path)
    assert config["radius"] == 3
    assert config["mode"] == "beam"
    assert config["shape"] == DEFAULT_CONFIG["shape"]
    assert "bogus" not in config
    assert load_fov_config(None) == DEFAULT_CONFIG


def test_settings_from_config():
    settings = FovSettings.from_config(
        {"shape": "Octagon", "opaque_apply": True}, opaque=_noop_opaque, apply=_noop_apply
    )
    assert settings.shape is Shape.OCTAGON
    assert settings.opaque_apply is True

    defaults = FovSettings.from_config({}, opaque=_noop_opaque, apply=_noop_apply)
    assert defaults.shape is Shape.CIRCLE
    assert defaults.opaque_apply is False


def test_settings_from_config_rejects_bad_values():
    with pytest.raises(ValueError):
        FovSettings.from_config({"shape": "hexagon"}, opaque=_noop_opaque, apply=_noop_apply)
    with pytest.raises(ValueError):
        FovSettings.from_config({"opaque_apply": "yes"}, opaque=_noop_opaque, apply=_noop_apply)


def test_settings_require_callables():
    with pytest.raises(TypeError):
        FovSettings(opaque=None, apply=_noop_apply)
    with pytest.raises(TypeError):
        FovSettings(opaque=_noop_opaque, apply="apply")


def test_resolve_level():
    assert resolve_level("debug") == 10
    assert resolve_level(30) == 30
    with pytest.raises(ValueError):
        resolve_level("chatty")


def test_cli_circle_prints_map(tmp_path, capsys):
    path = _write(tmp_path, "room.txt", MAP_TEXT)
    assert main(["--map", str(path), "--mode", "circle", "-r", "3"]) == 0
    rows = capsys.readouterr().out.splitlines()
    assert len(rows) == 6
    assert rows[3][5] == "@"
    assert rows[3][6] == "."
    assert rows[2][4] == "#"  # pillar, walls are shown by default


def test_cli_beam_only_lights_east(tmp_path, capsys):
    path = _write(tmp_path, "room.txt", MAP_TEXT)
    main(["--map", str(path), "--mode", "beam", "--direction", "east", "--width", "90", "-r", "6"])
    rows = capsys.readouterr().out.splitlines()
    assert rows[3][5] == "@"
    assert rows[3][8] == "."
    assert rows[3].find(".") > 5
    assert rows[3][:5].strip() == ""


def test_cli_uses_config_file(tmp_path, capsys):
    path = _write(tmp_path, "room.txt", MAP_TEXT)
    config = _write(tmp_path, "fov.yaml", "mode: beam2\nheading_degrees: 180\nspread_degrees: 90\nradius: 6\n")
    main(["--map", str(path), "--config", str(config), "--no-opaque-apply"])
    rows = capsys.readouterr().out.splitlines()
    assert rows[3][2] == "."
    assert rows[3][6:].strip() == ""
    assert "#" not in "".join(rows)


def test_cli_default_room(capsys):
    assert main(["-r", "4", "--shape", "octagon"]) == 0
    rows = capsys.readouterr().out.splitlines()
    assert any("@" in row for row in rows)


def test_cli_missing_map_exits(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--map", str(tmp_path / "nope.txt")])
    assert "not found" in str(excinfo.value.code)


def test_cli_source_outside_map_exits(tmp_path):
    path = _write(tmp_path, "room.txt", MAP_TEXT)
    with pytest.raises(SystemExit):
        main(["--map", str(path), "--source", "40", "40"])


def test_cli_map_without_source_exits(tmp_path):
    path = _write(tmp_path, "room.txt", MAP_TEXT.replace("@", "."))
    with pytest.raises(SystemExit) as excinfo:
        main(["--map", str(path)])
    assert "source" in str(excinfo.value.code)


def test_cli_rejects_unknown_shape():
    with pytest.raises(SystemExit) as excinfo:
        main(["--shape", "hexagon"])
    assert excinfo.value.code == 2


@pytest.mark.parametrize("text", ["radius: null\n", "radius: [1, 2]\n", "spread_degrees: wide\n", "radius: true\n"])
def test_load_fov_config_rejects_non_numeric_values(tmp_path, text):
    path = _write(tmp_path, "fov.yaml", text)
    with pytest.raises(ValueError):
        load_fov_config(path)


def test_load_fov_config_coerces_numbers(tmp_path):
    path = _write(tmp_path, "fov.yaml", "radius: 5.0\nwidth_degrees: 45\n")
    config = load_fov_config(path)
    assert config["radius"] == 5 and isinstance(config["radius"], int)
    assert isinstance(config["width_degrees"], float)


def test_cli_null_radius_exits_with_message(tmp_path):
    path = _write(tmp_path, "room.txt", MAP_TEXT)
    config = _write(tmp_path, "fov.yaml", "radius: null\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["--map", str(path), "--config", str(config)])
    assert "radius" in str(excinfo.value.code)


def test_setup_logging_can_be_reconfigured():
    setup_logging("debug", colors=False)
    assert logging.getLogger().level == logging.DEBUG
    setup_logging("error", colors=False)
    assert logging.getLogger().level == logging.ERROR
