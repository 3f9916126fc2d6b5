"""Zoom stack navigation.

The navigator only moves between viewports; rendering the current viewport
is the caller's job, done after a transition has been applied.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from mandelclick.plane import PlaneVector
from mandelclick.util.logging_setup import get_logger
from mandelclick.viewport import BASE_VIEWPORT, Viewport

ZOOM_FACTOR = 4.0
PRECISION_PIXELS = 4096

@dataclass(frozen=True)
class ZoomIn:
    click: PlaneVector

@dataclass(frozen=True)
class ZoomOut:
    pass

Action = Union[ZoomIn, ZoomOut]

def _clamp_unit(v: float) -> float:
    return max(-1.0, min(1.0, v))

class ZoomNavigator:
    def __init__(self, base: Optional[Viewport] = None):
        base = (base or BASE_VIEWPORT).validate()
        self._stack: List[Viewport] = [base]
        self._logger = get_logger("navigator")

    @property
    def current(self) -> Viewport:
        return self._stack[-1]

    @property
    def base(self) -> Viewport:
        return self._stack[0]

    @property
    def depth(self) -> int:
        return len(self._stack)

    def history(self) -> List[Viewport]:
        return list(self._stack)

    def target_for(self, click: PlaneVector) -> Viewport:
        """Viewport a zoom-in at ``click`` would push, without pushing it."""
        cur = self.current
        cx = _clamp_unit(click.x)
        cy = _clamp_unit(click.y)
        clicked = cur.origin.add(PlaneVector(
            (cx + 1.0) / 2.0 * cur.extent.x,
            (cy + 1.0) / 2.0 * cur.extent.y,
        ))
        new_extent = cur.extent.divide(ZOOM_FACTOR)
        new_origin = clicked.sub(new_extent.divide(2.0))
        return Viewport(new_origin, new_extent)

    @staticmethod
    def precision_exhausted(vp: Viewport) -> bool:
        """True once float64 can no longer tell ``PRECISION_PIXELS`` columns or rows apart."""
        step_x = vp.extent.x / PRECISION_PIXELS
        step_y = vp.extent.y / PRECISION_PIXELS
        return vp.origin.x + step_x == vp.origin.x or vp.origin.y + step_y == vp.origin.y

    def zoom_in(self, click: PlaneVector) -> Viewport:
        self._try_zoom_in(click)
        return self.current

    def zoom_out(self) -> Viewport:
        self._try_zoom_out()
        return self.current

    def _try_zoom_in(self, click: PlaneVector) -> bool:
        target = self.target_for(click)
        self._stack.append(target)
        if self.precision_exhausted(target):
            self._logger.warning("Depth %s is past float64 precision, the image will be blocky", self.depth)
        self._logger.debug("Zoom in click=(%s, %s) depth=%s origin=(%s, %s) extent=(%s, %s)",
                           click.x, click.y, self.depth,
                           target.origin.x, target.origin.y, target.extent.x, target.extent.y)
        return True

    def _try_zoom_out(self) -> bool:
        if len(self._stack) <= 1:
            self._logger.debug("Zoom out ignored at base viewport")
            return False
        self._stack.pop()
        self._logger.debug("Zoom out depth=%s", self.depth)
        return True

    def apply(self, action) -> bool:
        """Apply one input action; returns True when the stack changed."""
        if isinstance(action, ZoomIn):
            return self._try_zoom_in(action.click)
        if isinstance(action, ZoomOut):
            return self._try_zoom_out()
        return False
