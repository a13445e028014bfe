"""Recursive shadowcasting field of view for tile grids (a port of libfov)."""

from .constants import FLT_EPSILON, Direction, Shape
from .fov import beam, beam2, circle
from .grid import FovMap
from .logging_utils import setup_logging
from .octant import Octant, scan_octant
from .settings import FovSettings

__all__ = [
    "FLT_EPSILON",
    "Direction",
    "Shape",
    "FovSettings",
    "FovMap",
    "Octant",
    "circle",
    "beam",
    "beam2",
    "scan_octant",
    "setup_logging",
]
