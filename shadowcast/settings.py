# shadowcast/settings.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

import structlog

from .constants import Shape

log = structlog.get_logger(__name__)

# opaque(grid, x, y) -> bool
OpaqueFunc = Callable[[Any, int, int], bool]
# apply(grid, x, y, source_x, source_y)
ApplyFunc = Callable[[Any, int, int, int, int], None]


@dataclass(frozen=True)
class FovSettings:
    """How a field of view scan classifies and reports tiles.

    Parameters
    ----------
    opaque:
        Callable receiving ``(grid, x, y)`` and returning ``True`` if the tile
        blocks sight. It must be deterministic for the duration of a scan.
    apply:
        Callable receiving ``(grid, x, y, source_x, source_y)`` for every tile
        found visible. The source tile itself is never reported.
    shape:
        Silhouette of the field of view.
    opaque_apply:
        When ``True`` opaque tiles that are reached are passed to ``apply`` as
        well; otherwise only transparent tiles are.
    """

    opaque: OpaqueFunc
    apply: ApplyFunc
    shape: Shape = Shape.CIRCLE
    opaque_apply: bool = False

    def __post_init__(self) -> None:
        if not callable(self.opaque):
            log.error("FovSettings.opaque is not callable", value=repr(self.opaque))
            raise TypeError("opaque must be callable as opaque(grid, x, y)")
        if not callable(self.apply):
            log.error("FovSettings.apply is not callable", value=repr(self.apply))
            raise TypeError("apply must be callable as apply(grid, x, y, sx, sy)")
        # Accept "circle" / "octagon" as well as enum members.
        object.__setattr__(self, "shape", Shape.from_name(self.shape))
        object.__setattr__(self, "opaque_apply", bool(self.opaque_apply))

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        *,
        opaque: OpaqueFunc,
        apply: ApplyFunc,
    ) -> FovSettings:
        """Build settings from a configuration mapping (e.g. loaded YAML)."""
        shape = config.get("shape", Shape.CIRCLE.name)
        opaque_apply = config.get("opaque_apply", False)
        if not isinstance(opaque_apply, bool):
            log.error("Invalid opaque_apply in config", value=opaque_apply)
            raise ValueError(f"opaque_apply must be true or false, got {opaque_apply!r}")
        return cls(opaque=opaque, apply=apply, shape=shape, opaque_apply=opaque_apply)
