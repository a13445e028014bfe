# shadowcast/fov.py
"""
Field of view entry points: full circle, compass beam and free angle beam.

All three set up one or more octant scans and hand them to
:func:`shadowcast.octant.scan_octant`. Coordinates follow screen convention:
``+x`` is east and ``-y`` is north.
"""

from __future__ import annotations

import math
import time
from typing import Any, Final

import structlog

from .constants import FLT_EPSILON, Direction
from .octant import (
    ALL_OCTANTS,
    E_NE,
    E_SE,
    N_NE,
    N_NW,
    S_SE,
    S_SW,
    W_NW,
    W_SW,
    Octant,
    Point,
    scan_octant,
)
from .settings import FovSettings
from .slopes import clamp01

log = structlog.get_logger(__name__)

FULL_CIRCLE: Final[float] = 2.0 * math.pi
EIGHTH_TURN: Final[float] = math.pi / 4.0

OctantPair = tuple[Octant, Octant]

# Octant pairs for a beam along an axis, nearest the centre line first.
# Pairs 0 and 2 are scanned out from the axis, pairs 1 and 3 back from the
# diagonal.
BEAM_DIRECTION: Final[dict[Direction, tuple[OctantPair, ...]]] = {
    Direction.EAST: ((E_SE, E_NE), (S_SE, N_NE), (S_SW, N_NW), (W_SW, W_NW)),
    Direction.WEST: ((W_SW, W_NW), (S_SW, N_NW), (S_SE, N_NE), (E_SE, E_NE)),
    Direction.NORTH: ((N_NE, N_NW), (E_NE, W_NW), (E_SE, W_SW), (S_SE, S_SW)),
    Direction.SOUTH: ((S_SE, S_SW), (E_SE, W_SW), (E_NE, W_NW), (N_NE, N_NW)),
}

# Same for diagonal beams. Pairs 0 and 2 are scanned back from the diagonal,
# pairs 1 and 3 out from the axis.
BEAM_DIRECTION_DIAG: Final[dict[Direction, tuple[OctantPair, ...]]] = {
    Direction.NORTHEAST: ((E_NE, N_NE), (E_SE, N_NW), (S_SE, W_NW), (S_SW, W_SW)),
    Direction.NORTHWEST: ((W_NW, N_NW), (W_SW, N_NE), (S_SW, E_NE), (S_SE, E_SE)),
    Direction.SOUTHEAST: ((E_SE, S_SE), (E_NE, S_SW), (N_NE, W_SW), (N_NW, W_NW)),
    Direction.SOUTHWEST: ((W_SW, S_SW), (W_NW, S_SE), (N_NW, E_SE), (N_NE, E_NE)),
}

# Octant k spans [45k, 45(k+1)] degrees counter-clockwise from east. Even
# octants start on an axis, odd ones on a diagonal.
ARC_OCTANTS: Final[tuple[Octant, ...]] = (
    E_NE, N_NE, N_NW, W_NW, W_SW, S_SW, S_SE, E_SE,
)


def _scan_all(settings: FovSettings, grid: Any, source: Point, radius: int) -> int:
    applied = 0
    for octant in ALL_OCTANTS:
        applied += scan_octant(settings, grid, source, radius, octant, 1, 0.0, 1.0)
    return applied


def _log_finished(func_log: Any, start_time: float, applied: int) -> None:
    duration_ms = (time.perf_counter() - start_time) * 1000
    func_log.debug(
        "FOV computation finished",
        duration_ms=f"{duration_ms:.2f}",
        applied=applied,
    )


def circle(
    settings: FovSettings, grid: Any, source_x: int, source_y: int, radius: int
) -> None:
    """Report every tile visible from ``(source_x, source_y)`` within ``radius``."""
    func_log = log.bind(
        mode="circle", origin=(source_x, source_y), radius=radius,
        shape=settings.shape.name,
    )
    if radius < 0:
        func_log.debug("Negative radius, nothing to scan")
    start_time = time.perf_counter()
    applied = _scan_all(settings, grid, (source_x, source_y), radius)
    _log_finished(func_log, start_time, applied)


def beam(
    settings: FovSettings,
    grid: Any,
    source_x: int,
    source_y: int,
    radius: int,
    direction: Direction | str,
    angle: float,
) -> None:
    """
    Report tiles visible in a beam pointing along a compass ``direction``.

    ``angle`` is the width of the beam in radians, split evenly either side
    of ``direction``. A non-positive angle shows nothing, ``2*pi`` or more is
    the same as :func:`circle`. ``direction`` may be a :class:`Direction` or
    its name; unknown names raise ``ValueError``.
    """
    try:
        direction = Direction.from_name(direction)
    except ValueError:
        log.error("Unknown beam direction", direction=direction)
        raise

    func_log = log.bind(
        mode="beam", origin=(source_x, source_y), radius=radius,
        shape=settings.shape.name, direction=direction.value, angle=angle,
    )
    if angle <= 0.0:
        func_log.debug("Beam angle is not positive, nothing to scan")
        return
    if angle >= FULL_CIRCLE:
        func_log.debug("Beam covers the full circle")
        circle(settings, grid, source_x, source_y, radius)
        return

    start_time = time.perf_counter()
    source = (source_x, source_y)
    # Half the beam width in units of 45 degrees.
    a = angle * 2.0 / math.pi
    if direction.is_diagonal:
        pairs = BEAM_DIRECTION_DIAG[direction]
    else:
        pairs = BEAM_DIRECTION[direction]

    applied = 0
    for i, pair in enumerate(pairs):
        if i > 0 and a - i <= FLT_EPSILON:
            break
        if (i % 2 == 0) != direction.is_diagonal:
            start_slope, end_slope = 0.0, clamp01(a - i)
        else:
            start_slope, end_slope = clamp01(i + 1 - a), 1.0
        for octant in pair:
            applied += scan_octant(
                settings, grid, source, radius, octant, 1, start_slope, end_slope
            )
    _log_finished(func_log, start_time, applied)


def _arc_position(theta: float) -> float:
    """Express ``theta`` as a position in ``[0, 8)`` measured in octants."""
    q = (theta / EIGHTH_TURN) % 8.0
    # A tiny negative input can round up to exactly 8.0.
    return 0.0 if q >= 8.0 else q


def beam2(
    settings: FovSettings,
    grid: Any,
    source_x: int,
    source_y: int,
    radius: int,
    angle: float,
    spread: float,
) -> None:
    """
    Report tiles visible in a beam centred on an arbitrary ``angle``.

    ``angle`` is in radians counter-clockwise from east (towards ``-y``) and
    ``spread`` is the total width of the beam in radians.
    """
    func_log = log.bind(
        mode="beam2", origin=(source_x, source_y), radius=radius,
        shape=settings.shape.name, angle=angle, spread=spread,
    )
    if spread <= 0.0:
        func_log.debug("Beam spread is not positive, nothing to scan")
        return
    if spread >= FULL_CIRCLE:
        func_log.debug("Beam covers the full circle")
        circle(settings, grid, source_x, source_y, radius)
        return

    start_time = time.perf_counter()
    source = (source_x, source_y)
    q1 = _arc_position(angle - spread / 2.0)
    q2 = _arc_position(angle + spread / 2.0)
    first, last = int(q1), int(q2)
    # Both ends in one octant but wrapped: the walk goes all the way round.
    wraps = first == last and q2 < q1

    applied = 0
    index = first
    is_first = True
    while True:
        is_last = index == last and not (is_first and wraps)
        left = q1 - first if is_first else 0.0
        right = q2 - last if is_last else 1.0
        if index % 2 == 0:
            start_slope, end_slope = left, right
        else:
            start_slope, end_slope = 1.0 - right, 1.0 - left
        applied += scan_octant(
            settings, grid, source, radius, ARC_OCTANTS[index], 1,
            start_slope, end_slope,
        )
        if is_last:
            break
        index = (index + 1) % 8
        is_first = False
    _log_finished(func_log, start_time, applied)
