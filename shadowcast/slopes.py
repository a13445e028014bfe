# shadowcast/slopes.py
"""Slope helpers shared by the octant scanner and the beam drivers."""

from .constants import FLT_EPSILON


def slope(dx: float, dy: float) -> float:
    """Return ``dy / dx``, or ``0.0`` when ``dx`` is within epsilon of zero."""
    if dx <= -FLT_EPSILON or dx >= FLT_EPSILON:
        return dy / dx
    return 0.0


def clamp01(x: float) -> float:
    """Clamp ``x`` into ``[0, 1]``, snapping values within epsilon of a bound onto it."""
    if x < FLT_EPSILON:
        return 0.0
    if 1.0 - x < FLT_EPSILON:
        return 1.0
    return x
