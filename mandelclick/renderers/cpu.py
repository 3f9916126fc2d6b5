from __future__ import annotations

import logging
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from mandelclick.errors import InvalidPixelWidth, InvalidViewport
from mandelclick.escape import escape_magnitude_grid
from mandelclick.plane import PlaneVector
from mandelclick.util.logging_setup import get_render_logger, logging_initialiser
from mandelclick.viewport import Viewport

ACCURACY_PER_DEPTH = 30
BIAS_PER_DEPTH = 500.0

@dataclass(frozen=True)
class RenderSettings:
    accuracy_per_depth: int = ACCURACY_PER_DEPTH
    bias_per_depth: float = BIAS_PER_DEPTH
    workers: int = 1
    band_height: int = 32

    def iteration_budget(self, depth: int) -> int:
        return depth * self.accuracy_per_depth

    def color_bound(self, depth: int) -> float:
        return self.bias_per_depth * depth

_G = {}

def _init_worker(origin, step, width, iterations, bound, depth, height, log_queue, log_level):
    _G["origin"] = origin
    _G["step"] = step
    _G["width"] = width
    _G["iterations"] = iterations
    _G["bound"] = bound
    if log_queue is not None:
        logging_initialiser(log_queue, log_level)
    _G["logger"] = get_render_logger(depth=depth, width=width, height=height)

def _positive_int(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        return False
    return value > 0

def pixel_height_for(viewport: Viewport, pixel_width: int) -> int:
    return int(round(pixel_width * viewport.extent.y / viewport.extent.x))

def pixel_intensity(raw: float, bound: float) -> int:
    """Green level for one escape magnitude; nan and inf saturate at ``bound``."""
    clamped = raw if raw <= bound else bound
    return min(255, max(0, int(round(clamped / bound * 255))))

def intensities(raw: np.ndarray, bound: float) -> np.ndarray:
    clamped = np.where(raw <= bound, raw, bound)
    return np.clip(np.rint(clamped / bound * 255.0), 0, 255).astype(np.uint8)

def render_band(
    y0: int,
    y1: int,
    *,
    origin: PlaneVector,
    step: PlaneVector,
    width: int,
    iterations: int,
    bound: float,
) -> np.ndarray:
    ix = np.arange(width, dtype=np.float64)
    iy = np.arange(y0, y1, dtype=np.float64)
    cx = np.broadcast_to(origin.x + ix * step.x, (y1 - y0, width))
    cy = np.broadcast_to((origin.y + iy * step.y)[:, None], (y1 - y0, width))
    raw = escape_magnitude_grid(iterations, cx, cy)

    band = np.zeros((y1 - y0, width, 3), dtype=np.uint8)
    band[..., 1] = intensities(raw, bound)
    return band

def _render_band_worker(y0_y1: Tuple[int, int]):
    y0, y1 = y0_y1
    band = render_band(
        y0, y1,
        origin=_G["origin"], step=_G["step"], width=_G["width"],
        iterations=_G["iterations"], bound=_G["bound"],
    )
    _G["logger"].debug("Rendered rows %s..%s", y0, y1)
    return y0, band

def _split_bands(height: int, band_height: int) -> List[Tuple[int, int]]:
    bands: List[Tuple[int, int]] = []
    y = 0
    while y < height:
        y1 = min(height, y + band_height)
        bands.append((y, y1))
        y = y1
    return bands

def render(
    viewport: Viewport,
    pixel_width: int,
    depth: int,
    settings: Optional[RenderSettings] = None,
    *,
    log_queue=None,
    log_level: int = logging.INFO,
) -> np.ndarray:
    """Rasterize ``viewport`` into a (height, width, 3) uint8 RGB buffer.

    The height follows the viewport's aspect ratio. Each pixel holds
    (0, g, 0) where g grows with the orbit magnitude after
    ``depth * accuracy_per_depth`` iterations, normalised by
    ``depth * bias_per_depth``.
    """
    settings = settings or RenderSettings()

    if not _positive_int(pixel_width):
        raise InvalidPixelWidth(f"pixel_width must be a positive integer, got {pixel_width!r}")
    if not _positive_int(depth):
        raise ValueError(f"depth must be a positive integer, got {depth!r}")
    viewport.validate()

    width = int(pixel_width)
    depth = int(depth)
    height = pixel_height_for(viewport, width)
    if height <= 0:
        raise InvalidViewport(
            f"Viewport aspect {viewport.extent.x}x{viewport.extent.y} gives zero rows at width {width}"
        )

    step = PlaneVector(viewport.extent.x / width, viewport.extent.y / height)
    iterations = settings.iteration_budget(depth)
    bound = settings.color_bound(depth)

    logger = get_render_logger(depth=depth, width=width, height=height)
    logger.info("Render start iter=%s bound=%s workers=%s origin=(%s, %s) extent=(%s, %s)",
                iterations, bound, settings.workers,
                viewport.origin.x, viewport.origin.y, viewport.extent.x, viewport.extent.y)
    start = time.perf_counter()

    buf = np.zeros((height, width, 3), dtype=np.uint8)
    bands = _split_bands(height, max(1, settings.band_height))

    if settings.workers <= 1:
        for y0, y1 in bands:
            buf[y0:y1] = render_band(
                y0, y1, origin=viewport.origin, step=step, width=width,
                iterations=iterations, bound=bound,
            )
    else:
        with ProcessPoolExecutor(
            max_workers=settings.workers,
            initializer=_init_worker,
            initargs=(viewport.origin, step, width, iterations, bound, depth, height, log_queue, log_level),
        ) as pool:
            for y0, band in pool.map(_render_band_worker, bands):
                buf[y0:y0 + band.shape[0]] = band

    logger.info("Render done in %.2fs", time.perf_counter() - start)
    return buf
