"""Interactive zoom window.

Left click zooms in around the cursor, right click steps back out, ``S``
saves the frame on screen, ``Escape``/``Q`` quits.
"""
from __future__ import annotations

import os
import time
from typing import Any, Dict, Optional, Tuple

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pygame

from mandelclick.config import render_settings
from mandelclick.navigator import ZoomIn, ZoomOut
from mandelclick.output.png_writer import save_png
from mandelclick.pipeline import build_navigator
from mandelclick.plane import PlaneVector
from mandelclick.scheduler import RenderScheduler
from mandelclick.util.logging_setup import get_logger

LEFT_BUTTON = 1
RIGHT_BUTTON = 3
TARGET_FPS = 60

def normalised_click(pos: Tuple[int, int], size: Tuple[int, int]) -> PlaneVector:
    """Window pixel position -> [-1, 1] on both axes, (-1, -1) at the top-left corner.

    Window y grows downward, as does the buffer row index, so no flip is applied.
    """
    w, h = size
    return PlaneVector(pos[0] / w * 2.0 - 1.0, pos[1] / h * 2.0 - 1.0)

class ZoomViewer:
    def __init__(self, cfg: Dict[str, Any], *, screenshot_dir: str = "."):
        self.cfg = cfg
        self.size = (int(cfg["window_width"]), int(cfg["window_height"]))
        self.navigator = build_navigator(cfg)
        self.scheduler = RenderScheduler(int(cfg["render_width"]), render_settings(cfg))
        self.screenshot_dir = screenshot_dir
        self.logger = get_logger("viewer")

        self.running = False
        self.buffer: Optional[np.ndarray] = None
        self.surface = None

        self.screen = None
        self.clock = None

    def run(self) -> None:
        self._init_pygame()
        self.running = True
        self._request_render()
        try:
            while self.running:
                self._handle_events()
                self._collect_frame()
                self._draw()
                self.clock.tick(TARGET_FPS)
        finally:
            self.scheduler.shutdown()
            pygame.quit()

    def _init_pygame(self) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode(self.size)
        pygame.display.set_caption("Mandelbrot")
        self.clock = pygame.time.Clock()

    def _request_render(self) -> None:
        gen = self.scheduler.request(self.navigator.current, self.navigator.depth)
        self.logger.info("Render requested generation=%s depth=%s", gen, self.navigator.depth)
        self._update_caption()

    def _update_caption(self) -> None:
        state = " (rendering...)" if self.scheduler.busy else ""
        pygame.display.set_caption(f"Mandelbrot - depth {self.navigator.depth}{state}")

    # Events

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONUP:
                self._on_mouse_up(event)
            elif event.type == pygame.KEYDOWN:
                self._on_keydown(event)

    def _on_mouse_up(self, event) -> None:
        if event.button == LEFT_BUTTON:
            action = ZoomIn(normalised_click(event.pos, self.size))
        elif event.button == RIGHT_BUTTON:
            action = ZoomOut()
        else:
            return
        if self.navigator.apply(action):
            self._request_render()

    def _on_keydown(self, event) -> None:
        if event.key in (pygame.K_ESCAPE, pygame.K_q):
            self.running = False
        elif event.key == pygame.K_s:
            self._save_screenshot()

    def _save_screenshot(self) -> None:
        if self.buffer is None:
            self.logger.warning("Nothing rendered yet, screenshot skipped")
            return
        name = f"mandelbrot_depth{self.navigator.depth}_{int(time.time())}.png"
        save_png(self.buffer, os.path.join(self.screenshot_dir, name))

    # Drawing

    def _collect_frame(self) -> None:
        frame = self.scheduler.poll()
        if frame is None:
            return
        self.buffer = frame.buffer
        surface = pygame.surfarray.make_surface(frame.buffer.swapaxes(0, 1))
        self.surface = pygame.transform.scale(surface, self.size)
        self._update_caption()

    def _draw(self) -> None:
        if self.surface is None:
            self.screen.fill((0, 0, 0))
        else:
            self.screen.blit(self.surface, (0, 0))
        pygame.display.flip()
