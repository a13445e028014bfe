# shadowcast/octant.py
"""
Octant scanning for recursive shadowcasting.

The plane around the source is split into eight 45 degree octants. Each octant
is scanned column by column moving away from the source; within a column rows
run from the octant's leading edge (slope 0, the axis) towards its diagonal
(slope 1). A wedge ``[start_slope, end_slope]`` holds the part of the octant
that is still lit. Opaque tiles fork the wedge into a separate scan of the next
column, and the end of a shadow narrows the wedge for the rest of the column.

The textbook formulation recurses once per column and once per shadow. Here
the pending columns live on an explicit stack so large radii cannot exhaust
the interpreter's recursion limit. A fork is pushed above the column that
spawned it and runs to completion before that column resumes, and a column
that ends lit is replaced by its continuation, so ``apply`` is called in the
same order as the recursive version.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Final, NamedTuple, Optional, TypeAlias

from .constants import Shape
from .settings import FovSettings
from .shapes import boundary_height
from .slopes import slope

Point: TypeAlias = tuple[int, int]


class Octant(NamedTuple):
    """One of the eight reflections of the base octant.

    ``sign_x`` is the direction columns advance in, ``sign_y`` the direction
    rows advance in. With ``swap`` set, columns advance along the grid's y axis
    and rows along its x axis.
    """

    sign_x: int
    sign_y: int
    swap: bool

    @property
    def apply_edge(self) -> bool:
        """Whether row 0 (the axis) belongs to this octant."""
        return self.sign_y > 0

    @property
    def apply_diagonal(self) -> bool:
        """Whether the diagonal ``dy == dx`` belongs to this octant."""
        return not self.swap

    def to_grid(self, source: Point, dx: int, dy: int) -> Point:
        """Map octant-local ``(dx, dy)`` to grid coordinates around ``source``."""
        sx, sy = source
        if self.swap:
            return sx + self.sign_y * dy, sy + self.sign_x * dx
        return sx + self.sign_x * dx, sy + self.sign_y * dy


# Named by the axis each octant starts on and the diagonal it sweeps to.
# North is -y.
E_SE: Final[Octant] = Octant(+1, +1, False)
E_NE: Final[Octant] = Octant(+1, -1, False)
W_SW: Final[Octant] = Octant(-1, +1, False)
W_NW: Final[Octant] = Octant(-1, -1, False)
S_SE: Final[Octant] = Octant(+1, +1, True)
S_SW: Final[Octant] = Octant(+1, -1, True)
N_NE: Final[Octant] = Octant(-1, +1, True)
N_NW: Final[Octant] = Octant(-1, -1, True)

ALL_OCTANTS: Final[tuple[Octant, ...]] = (
    E_SE, S_SE, E_NE, S_SW, W_SW, N_NE, W_NW, N_NW,
)


class ShadowState(IntEnum):
    UNKNOWN = -1
    CLEAR = 0
    BLOCKED = 1


@dataclass
class _Column:
    """A column waiting to be scanned, or partially scanned."""

    dx: int
    dy: int  # next row to visit
    dy_end: int
    start_slope: float
    end_slope: float
    state: ShadowState = ShadowState.UNKNOWN


def _open_column(
    shape: Shape,
    radius: int,
    octant: Octant,
    dx: int,
    start_slope: float,
    end_slope: float,
) -> Optional[_Column]:
    """Work out the row range of column ``dx``, or ``None`` if nothing is left."""
    if dx == 0:
        dx = 1
    if abs(dx) > radius:
        return None

    dy0 = int(0.5 + dx * start_slope)
    dy1 = int(0.5 + dx * end_slope)

    if not octant.apply_diagonal and dy1 == dx:
        # The neighbouring octant owns the diagonal.
        dy1 -= 1

    h = boundary_height(shape, dx, radius)
    if abs(dy1) > h:
        if h == 0:
            return None
        dy1 = h

    return _Column(dx=dx, dy=dy0, dy_end=dy1, start_slope=start_slope, end_slope=end_slope)


def scan_octant(
    settings: FovSettings,
    grid: Any,
    source: Point,
    radius: int,
    octant: Octant,
    dx: int = 1,
    start_slope: float = 0.0,
    end_slope: float = 1.0,
) -> int:
    """
    Scan one octant from column ``dx`` outwards within ``[start_slope, end_slope]``.

    Calls ``settings.apply`` for every tile found visible and returns how many
    calls were made.
    """
    shape = settings.shape
    opaque = settings.opaque
    apply = settings.apply
    opaque_apply = settings.opaque_apply
    apply_edge = octant.apply_edge
    sx, sy = source
    applied = 0

    first = _open_column(shape, radius, octant, dx, start_slope, end_slope)
    stack: list[_Column] = [first] if first is not None else []

    while stack:
        column = stack[-1]

        if column.dy > column.dy_end:
            stack.pop()
            if column.state == ShadowState.CLEAR:
                # Still lit at the far edge: carry on into the next column.
                nxt = _open_column(
                    shape, radius, octant, column.dx + 1,
                    column.start_slope, column.end_slope,
                )
                if nxt is not None:
                    stack.append(nxt)
            continue

        dy = column.dy
        column.dy += 1
        x, y = octant.to_grid(source, column.dx, dy)

        if opaque(grid, x, y):
            if opaque_apply and (apply_edge or dy > 0):
                apply(grid, x, y, sx, sy)
                applied += 1
            previous = column.state
            column.state = ShadowState.BLOCKED
            if previous == ShadowState.CLEAR:
                # Shadow starts here; the lit part before it goes on separately.
                fork = _open_column(
                    shape, radius, octant, column.dx + 1,
                    column.start_slope, slope(column.dx + 0.5, dy - 0.5),
                )
                if fork is not None:
                    stack.append(fork)
        else:
            if apply_edge or dy > 0:
                apply(grid, x, y, sx, sy)
                applied += 1
            if column.state == ShadowState.BLOCKED:
                column.start_slope = slope(column.dx - 0.5, dy - 0.5)
            column.state = ShadowState.CLEAR

    return applied
