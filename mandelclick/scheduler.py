"""Background rendering for the interactive loop.

Only the newest request matters: requesting a new render cancels the
previous one if it has not started, and a render that finishes after being
superseded is dropped instead of being shown.
"""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from mandelclick.renderers.cpu import RenderSettings, render
from mandelclick.util.logging_setup import get_logger
from mandelclick.viewport import Viewport

RenderFn = Callable[[Viewport, int, int, RenderSettings], np.ndarray]

@dataclass(frozen=True)
class Frame:
    generation: int
    viewport: Viewport
    depth: int
    buffer: np.ndarray

class RenderScheduler:
    def __init__(
        self,
        pixel_width: int,
        settings: Optional[RenderSettings] = None,
        *,
        render_fn: Optional[RenderFn] = None,
    ):
        self.pixel_width = pixel_width
        self.settings = settings or RenderSettings()
        self._render_fn = render_fn or render
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mandelclick-render")
        self._lock = threading.Lock()
        self._generation = 0
        self._pending: Optional[Future] = None
        self._logger = get_logger("scheduler")

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._pending is not None and not self._pending.done()

    def request(self, viewport: Viewport, depth: int) -> int:
        with self._lock:
            self._generation += 1
            gen = self._generation
            if self._pending is not None and not self._pending.done():
                cancelled = self._pending.cancel()
                if not cancelled:
                    # Already running: nobody will read its result.
                    self._pending.add_done_callback(self._log_superseded_failure)
                self._logger.debug("Superseded render (cancelled=%s) by generation %s", cancelled, gen)
            self._pending = self._pool.submit(self._run, gen, viewport, depth)
        return gen

    def _log_superseded_failure(self, fut: Future) -> None:
        if fut.cancelled():
            return
        exc = fut.exception()
        if exc is not None:
            self._logger.error("Superseded render failed: %s", exc, exc_info=exc)

    def _run(self, gen: int, viewport: Viewport, depth: int) -> Frame:
        buf = self._render_fn(viewport, self.pixel_width, depth, self.settings)
        return Frame(generation=gen, viewport=viewport, depth=depth, buffer=buf)

    def poll(self) -> Optional[Frame]:
        """Return the finished frame of the newest request, once, or None."""
        with self._lock:
            fut = self._pending
            if fut is None or not fut.done():
                return None
            self._pending = None
        if fut.cancelled():
            return None
        frame = fut.result()
        if frame.generation != self._generation:
            self._logger.debug("Dropped stale frame generation %s", frame.generation)
            return None
        return frame

    def wait(self, timeout: Optional[float] = None) -> Optional[Frame]:
        with self._lock:
            fut = self._pending
        if fut is None:
            return None
        fut.result(timeout=timeout)
        return self.poll()

    def shutdown(self) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
        self._pool.shutdown(wait=True)

    def __enter__(self) -> RenderScheduler:
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
