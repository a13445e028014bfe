# shadowcast/config.py
from pathlib import Path
from typing import Any
from typing import Dict as PyDict

import structlog
import yaml

log = structlog.get_logger(__name__)

# Defaults for the command line demo; a YAML file may override any of them.
DEFAULT_CONFIG: PyDict[str, Any] = {
    "shape": "circle",
    "opaque_apply": True,
    "radius": 8,
    "mode": "circle",
    "direction": "north",
    "width_degrees": 90.0,
    "heading_degrees": 90.0,
    "spread_degrees": 90.0,
}

NUMERIC_KEYS = ("radius", "width_degrees", "heading_degrees", "spread_degrees")


def load_yaml_config(config_path: Path, config_name: str) -> PyDict[str, Any]:
    """Loads a YAML configuration file holding a mapping."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        raise FileNotFoundError(f"{config_name} configuration file not found: {config_path}")
    try:
        with config_path.open("r") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error(
            f"Error parsing YAML for {config_name}",
            path=str(config_path), error=str(e), exc_info=True,
        )
        raise
    if config_data is None:
        log.warning(f"{config_name} config file is empty.", path=str(config_path))
        return {}
    if not isinstance(config_data, dict):
        log.error(f"{config_name} config is not a mapping", path=str(config_path))
        raise ValueError(f"{config_name} configuration must be a mapping: {config_path}")
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data


def load_fov_config(config_path: Path | None) -> PyDict[str, Any]:
    """Merge an optional YAML file over :data:`DEFAULT_CONFIG`."""
    config = dict(DEFAULT_CONFIG)
    if config_path is not None:
        overrides = load_yaml_config(config_path, "FOV")
        unknown = sorted(set(overrides) - set(DEFAULT_CONFIG))
        if unknown:
            log.warning("Ignoring unknown config keys", keys=unknown)
        config.update({k: v for k, v in overrides.items() if k in DEFAULT_CONFIG})
    return _check_numbers(config)


def _check_numbers(config: PyDict[str, Any]) -> PyDict[str, Any]:
    """Coerce the numeric settings, raising ``ValueError`` for anything else."""
    for key in NUMERIC_KEYS:
        value = config[key]
        kind = int if key == "radius" else float
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            log.error("Config value is not a number", key=key, value=value)
            raise ValueError(f"Config value {key!r} must be a number, got {value!r}")
        config[key] = kind(value)
    return config
