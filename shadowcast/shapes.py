# shadowcast/shapes.py
"""Boundary functions giving the furthest row visible in a column."""

import math

from .constants import Shape


def boundary_height(shape: Shape, dx: int, radius: int) -> int:
    """
    Return the maximum row offset visible at column distance ``dx``.

    For ``Shape.CIRCLE`` this is ``floor(sqrt(radius**2 - dx**2))`` and is only
    defined for ``dx <= radius``. ``Shape.OCTAGON`` cuts the corners off along
    ``(radius - dx) * 2``.
    """
    if shape == Shape.CIRCLE:
        if dx > radius:
            raise ValueError(f"Column {dx} lies outside radius {radius}")
        return int(math.sqrt(radius * radius - dx * dx))
    if shape == Shape.OCTAGON:
        return (radius - dx) * 2
    raise ValueError(f"Unsupported FOV shape: {shape!r}")
