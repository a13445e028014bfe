# shadowcast/grid.py
"""NumPy-backed tile map that plugs into the FOV callbacks."""

from __future__ import annotations

import math
from typing import Final, Iterable, Literal, Optional, Set, Tuple

import numpy as np
import structlog

from .constants import Direction, Shape
from .fov import beam, beam2, circle
from .settings import FovSettings

log = structlog.get_logger()

CHAR_OPAQUE: Final[str] = "#"
CHAR_FLOOR: Final[str] = "."
CHAR_SOURCE: Final[str] = "@"
CHAR_REMEMBERED: Final[str] = ","
CHAR_UNSEEN: Final[str] = " "

FovMode = Literal["circle", "beam", "beam2"]


class FovMap:
    def __init__(self, width: int, height: int):
        """
        Creates an open map of the given size. Arrays are indexed ``[y, x]``.
        """
        if width <= 0 or height <= 0:
            log.error("Invalid map dimensions", width=width, height=height)
            raise ValueError("Map width and height must be positive integers.")
        self._width = width
        self._height = height

        self.transparent: np.ndarray = np.ones((height, width), dtype=bool, order="C")
        self.visible: np.ndarray = np.zeros((height, width), dtype=bool, order="C")
        self.explored: np.ndarray = np.zeros((height, width), dtype=bool, order="C")
        # Source of the last scan, if any
        self.source: Optional[Tuple[int, int]] = None
        log.debug("FovMap arrays initialized", shape=(height, width))

    @classmethod
    def from_text(cls, lines: Iterable[str]) -> "FovMap":
        """
        Builds a map from rows of text: ``#`` is opaque, anything else is floor.
        An ``@`` marks the source and is stored in :attr:`source`.
        """
        rows = [line.rstrip("\r\n") for line in lines]
        while rows and not rows[-1].strip():
            rows.pop()
        if not rows:
            raise ValueError("Map text contains no rows.")
        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                log.error("Ragged map row", row=y, expected=width, actual=len(row))
                raise ValueError(f"Map row {y} has width {len(row)}, expected {width}.")

        fov_map = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, char in enumerate(row):
                if char == CHAR_OPAQUE:
                    fov_map.transparent[y, x] = False
                elif char == CHAR_SOURCE:
                    fov_map.source = (x, y)
        log.info(
            "Map loaded from text",
            width=width,
            height=len(rows),
            opaque_count=int(np.sum(~fov_map.transparent)),
            source=fov_map.source,
        )
        return fov_map

    @classmethod
    def test_room(cls, width: int, height: int) -> "FovMap":
        """Walled rectangular room with a few pillars, source in the middle."""
        fov_map = cls(width, height)
        fov_map.transparent[0, :] = False
        fov_map.transparent[-1, :] = False
        fov_map.transparent[:, 0] = False
        fov_map.transparent[:, -1] = False

        cx, cy = width // 2, height // 2
        for px, py in ((cx - 3, cy - 2), (cx + 3, cy - 2), (cx - 3, cy + 2), (cx + 3, cy + 2)):
            if 0 < px < width - 1 and 0 < py < height - 1:
                fov_map.transparent[py, px] = False
        fov_map.source = (cx, cy)
        log.info("Created test room", width=width, height=height, source=fov_map.source)
        return fov_map

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        """Checks if the given coordinates are within the map boundaries."""
        return 0 <= x < self._width and 0 <= y < self._height

    def is_transparent(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            # Out of bounds blocks sight
            return False
        return bool(self.transparent[y, x])

    def set_opaque(self, x: int, y: int, opaque: bool = True) -> None:
        if not self.in_bounds(x, y):
            raise ValueError(f"Tile ({x}, {y}) is outside the map.")
        self.transparent[y, x] = not opaque

    # --- Callbacks handed to FovSettings ---
    @staticmethod
    def opaque(grid: "FovMap", x: int, y: int) -> bool:
        return not grid.is_transparent(x, y)

    @staticmethod
    def apply(grid: "FovMap", x: int, y: int, source_x: int, source_y: int) -> None:
        if grid.in_bounds(x, y):
            grid.visible[y, x] = True
            grid.explored[y, x] = True

    def make_settings(
        self, shape: Shape = Shape.CIRCLE, opaque_apply: bool = True
    ) -> FovSettings:
        """Settings wired to this map's callbacks. Walls are lit by default."""
        return FovSettings(
            opaque=FovMap.opaque,
            apply=FovMap.apply,
            shape=shape,
            opaque_apply=opaque_apply,
        )

    def compute_fov(
        self,
        x: int,
        y: int,
        radius: int,
        *,
        settings: Optional[FovSettings] = None,
        mode: FovMode = "circle",
        direction: Direction | str = Direction.NORTH,
        angle: float = math.pi / 2,
        spread: float = math.pi / 2,
    ) -> None:
        """
        Recalculates :attr:`visible` from ``(x, y)``.

        ``mode`` picks the scan: ``"circle"``, ``"beam"`` (uses ``direction``
        and ``angle`` as its width) or ``"beam2"`` (uses ``angle`` as its
        heading and ``spread`` as its width). Angles are radians.
        """
        log_context = {"origin": (x, y), "radius": radius, "mode": mode}
        if not self.in_bounds(x, y):
            log.error("FOV origin out of bounds", **log_context)
            raise ValueError("Origin coordinates out of bounds")
        if settings is None:
            settings = self.make_settings()

        self.visible.fill(False)
        self.visible[y, x] = True
        self.explored[y, x] = True
        self.source = (x, y)

        if mode == "circle":
            circle(settings, self, x, y, radius)
        elif mode == "beam":
            beam(settings, self, x, y, radius, direction, angle)
        elif mode == "beam2":
            beam2(settings, self, x, y, radius, angle, spread)
        else:
            log.error("Unknown FOV mode", **log_context)
            raise ValueError(f"Unknown FOV mode: {mode!r}")
        log.debug("FOV updated", visible_count=int(np.sum(self.visible)), **log_context)

    def update_fov_with_tracking(
        self, x: int, y: int, radius: int, **kwargs
    ) -> Set[Tuple[int, int]]:
        """
        Updates FOV and returns a set of (x, y) coordinates where
        visibility changed (either became visible or hidden).
        """
        previous_visible = self.visible.copy()
        self.compute_fov(x, y, radius, **kwargs)
        changed_positions = set()
        diff_indices = np.argwhere(previous_visible != self.visible)
        for y_idx, x_idx in diff_indices:
            changed_positions.add((int(x_idx), int(y_idx)))  # Store as (x, y)

        if changed_positions:
            log.debug("Visibility changed", changed_count=len(changed_positions))
        return changed_positions

    def render(self) -> list[str]:
        """Text rows: visible tiles as ``#``/``.``, remembered floor as ``,``."""
        rows = []
        for y in range(self._height):
            chars = []
            for x in range(self._width):
                if self.source == (x, y):
                    chars.append(CHAR_SOURCE)
                elif self.visible[y, x]:
                    chars.append(CHAR_FLOOR if self.transparent[y, x] else CHAR_OPAQUE)
                elif self.explored[y, x] and self.transparent[y, x]:
                    chars.append(CHAR_REMEMBERED)
                else:
                    chars.append(CHAR_UNSEEN)
            rows.append("".join(chars))
        return rows
