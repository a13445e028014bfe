# shadowcast/constants.py
from enum import Enum, IntEnum
from typing import Final

# Tolerance for every comparison against zero or a slope bound.
FLT_EPSILON: Final[float] = 1e-8


class Shape(IntEnum):
    """Silhouette of the field of view."""

    CIRCLE = 1
    OCTAGON = 2

    @classmethod
    def from_name(cls, name: "str | Shape") -> "Shape":
        if isinstance(name, Shape):
            return name
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown FOV shape: {name!r}") from None


class Direction(Enum):
    """Compass directions accepted by ``beam``. North is ``-y`` on the grid."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    NORTHEAST = "northeast"
    NORTHWEST = "northwest"
    SOUTHEAST = "southeast"
    SOUTHWEST = "southwest"

    @property
    def is_diagonal(self) -> bool:
        return self in _DIAGONALS

    @classmethod
    def from_name(cls, name: "str | Direction") -> "Direction":
        if isinstance(name, Direction):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown beam direction: {name!r}") from None


_DIAGONALS = frozenset(
    {Direction.NORTHEAST, Direction.NORTHWEST, Direction.SOUTHEAST, Direction.SOUTHWEST}
)

__all__ = ["FLT_EPSILON", "Shape", "Direction"]
