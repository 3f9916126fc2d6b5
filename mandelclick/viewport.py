from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict

from mandelclick.errors import InvalidViewport
from mandelclick.plane import PlaneVector

@dataclass(frozen=True)
class Viewport:
    """Visible region of the plane: top-left ``origin`` and ``extent`` (width, height)."""

    origin: PlaneVector
    extent: PlaneVector

    def validate(self) -> Viewport:
        ox, oy = self.origin.x, self.origin.y
        ex, ey = self.extent.x, self.extent.y
        if not all(math.isfinite(v) for v in (ox, oy, ex, ey)):
            raise InvalidViewport(f"Viewport has non-finite coordinates: {self}")
        if ex <= 0 or ey <= 0:
            raise InvalidViewport(f"Viewport extent must be positive on both axes, got ({ex}, {ey})")
        return self

    @property
    def center(self) -> PlaneVector:
        return self.origin.add(self.extent.divide(2.0))

    def to_dict(self) -> Dict[str, Any]:
        return {"origin": self.origin.as_list(), "extent": self.extent.as_list()}

BASE_VIEWPORT = Viewport(PlaneVector(-2.5, -1.2), PlaneVector(3.2, 2.4))
