from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from mandelclick.config import base_viewport, render_settings
from mandelclick.navigator import Action, ZoomIn, ZoomNavigator, ZoomOut
from mandelclick.output.png_writer import save_png
from mandelclick.plane import PlaneVector
from mandelclick.renderers.cpu import render
from mandelclick.util.logging_setup import get_logger
from mandelclick.viewport import Viewport

def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)

def _frame_path(frames_dir: str, frame_index: int) -> str:
    return os.path.join(frames_dir, f"frame_{frame_index:06d}.png")

def parse_clicks(text: Optional[str]) -> List[Action]:
    """Parse ``"x,y;x,y;out"`` into zoom actions.

    ``x,y`` are normalised click coordinates in [-1, 1]; ``out`` pops one level.
    """
    actions: List[Action] = []
    if not text:
        return actions
    for raw in text.split(";"):
        token = raw.strip()
        if not token:
            continue
        if token.lower() == "out":
            actions.append(ZoomOut())
            continue
        parts = token.split(",")
        if len(parts) != 2:
            raise ValueError(f"Bad click {token!r}: expected 'x,y' or 'out'")
        try:
            x, y = float(parts[0]), float(parts[1])
        except ValueError as e:
            raise ValueError(f"Bad click {token!r}: {e}") from e
        actions.append(ZoomIn(PlaneVector(x, y)))
    return actions

def build_navigator(cfg: Dict[str, Any]) -> ZoomNavigator:
    return ZoomNavigator(base_viewport(cfg))

def navigate(cfg: Dict[str, Any], actions: Sequence[Action]) -> ZoomNavigator:
    nav = build_navigator(cfg)
    for action in actions:
        nav.apply(action)
    return nav

def render_current(
    cfg: Dict[str, Any],
    nav: ZoomNavigator,
    *,
    log_queue=None,
    log_level: int = logging.INFO,
) -> Tuple[Viewport, int, np.ndarray]:
    viewport, depth = nav.current, nav.depth
    buf = render(viewport, int(cfg["render_width"]), depth, render_settings(cfg),
                 log_queue=log_queue, log_level=log_level)
    return viewport, depth, buf

def render_zoom_path(
    *,
    cfg: Dict[str, Any],
    actions: Sequence[Action],
    frames_dir: Optional[str] = None,
    log_queue=None,
    log_level: int = logging.INFO,
    progress: bool = True,
) -> Dict[str, Any]:
    logger = get_logger()
    frames_dir = frames_dir or str(cfg["frames_dir"])
    _ensure_dir(frames_dir)

    nav = build_navigator(cfg)
    logger.info("Zoom path start actions=%s width=%s frames_dir=%s", len(actions), cfg["render_width"], frames_dir)

    frames: List[Dict[str, Any]] = []

    def _emit() -> None:
        viewport, depth, buf = render_current(cfg, nav, log_queue=log_queue, log_level=log_level)
        path = save_png(buf, _frame_path(frames_dir, len(frames)))
        frames.append({"path": path, "depth": depth, "viewport": viewport.to_dict()})

    _emit()
    skipped = 0
    for action in tqdm(actions, desc="zoom path", unit="step", disable=not progress):
        if nav.apply(action):
            _emit()
        else:
            skipped += 1
            logger.info("Action %r caused no transition, no frame rendered", action)

    logger.info("Zoom path complete frames=%s skipped=%s", len(frames), skipped)
    return {"frames_dir": frames_dir, "frames": frames, "skipped": skipped}
