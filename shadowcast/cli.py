# shadowcast/cli.py
"""Command line demo: load or build a map, run a scan, print what is visible."""

import argparse
import math
import sys
from pathlib import Path
from typing import Any, Optional, Sequence
from typing import Dict as PyDict

import structlog
import yaml

from .config import load_fov_config
from .constants import Direction, Shape
from .grid import FovMap
from .logging_utils import setup_logging
from .settings import FovSettings

log = structlog.get_logger(__name__)

DEFAULT_ROOM_WIDTH = 21
DEFAULT_ROOM_HEIGHT = 15


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shadowcast",
        description="Compute a shadowcasting field of view on a text map.",
    )
    parser.add_argument(
        "--map",
        type=Path,
        help="Text map ('#' opaque, '.' floor, '@' source). Default: a test room.",
    )
    parser.add_argument("--config", type=Path, help="YAML file with FOV defaults.")
    parser.add_argument("--mode", choices=["circle", "beam", "beam2"], help="Scan type.")
    parser.add_argument("-r", "--radius", type=int, help="Visibility radius.")
    parser.add_argument(
        "--shape", choices=[s.name.lower() for s in Shape], help="FOV silhouette."
    )
    parser.add_argument(
        "--direction",
        choices=[d.value for d in Direction],
        help="Compass direction for --mode beam.",
    )
    parser.add_argument("--width", type=float, help="Degrees. Beam width for --mode beam.")
    parser.add_argument(
        "--heading",
        type=float,
        help="Degrees counter-clockwise from east for --mode beam2.",
    )
    parser.add_argument("--spread", type=float, help="Degrees. Beam width for --mode beam2.")
    parser.add_argument(
        "--opaque-apply",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Report opaque tiles that are seen.",
    )
    parser.add_argument(
        "--source",
        type=int,
        nargs=2,
        metavar=("X", "Y"),
        help="Source tile; overrides '@' in the map.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")
    return parser


def _merge_args(config: PyDict[str, Any], args: argparse.Namespace) -> PyDict[str, Any]:
    """Command line flags win over the config file."""
    merged = dict(config)
    overrides = {
        "mode": args.mode,
        "radius": args.radius,
        "shape": args.shape,
        "direction": args.direction,
        "width_degrees": args.width,
        "heading_degrees": args.heading,
        "spread_degrees": args.spread,
        "opaque_apply": args.opaque_apply,
    }
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return merged


def run(args: argparse.Namespace) -> list[str]:
    """Execute one scan described by ``args`` and return the rendered rows."""
    config = _merge_args(load_fov_config(args.config), args)

    if args.map is not None:
        if not args.map.is_file():
            raise FileNotFoundError(f"Map file not found: {args.map}")
        with args.map.open("r") as f:
            fov_map = FovMap.from_text(f)
    else:
        fov_map = FovMap.test_room(DEFAULT_ROOM_WIDTH, DEFAULT_ROOM_HEIGHT)

    source = tuple(args.source) if args.source else fov_map.source
    if source is None:
        raise ValueError("No source given: use --source or put '@' in the map.")

    settings = FovSettings.from_config(config, opaque=FovMap.opaque, apply=FovMap.apply)
    mode = config["mode"]
    if mode == "beam":
        angle = math.radians(float(config["width_degrees"]))
    else:
        angle = math.radians(float(config["heading_degrees"]))
    log.info(
        "Running FOV",
        mode=mode,
        source=source,
        radius=config["radius"],
        shape=settings.shape.name,
    )
    fov_map.compute_fov(
        source[0],
        source[1],
        int(config["radius"]),
        settings=settings,
        mode=mode,
        direction=config["direction"],
        angle=angle,
        spread=math.radians(float(config["spread_degrees"])),
    )
    return fov_map.render()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    try:
        rows = run(args)
    except FileNotFoundError as e:
        log.critical("Required file not found", error=str(e), exc_info=True)
        sys.exit(f"shadowcast: file not found - {e}")
    except yaml.YAMLError as e:
        log.critical("Invalid YAML configuration", error=str(e), exc_info=True)
        sys.exit(f"shadowcast: invalid configuration - {e}")
    except ValueError as e:
        log.critical("Invalid input", error=str(e), exc_info=True)
        sys.exit(f"shadowcast: {e}")

    for row in rows:
        print(row.rstrip())
    return 0
