from __future__ import annotations

import numpy as np

from mandelclick.plane import PlaneVector

def escape_magnitude(iterations: int, c: PlaneVector) -> float:
    """Run exactly ``iterations`` steps of z <- z*z + c from z = c and return |z|.

    There is no early exit on divergence: every point costs the same, and
    overflowing orbits simply end up as inf or nan.
    """
    if iterations < 0:
        raise ValueError("iterations must be >= 0")
    z = c
    for _ in range(iterations):
        z = z.complex_product(z).add(c)
    return z.magnitude()

def escape_magnitude_grid(iterations: int, cx: np.ndarray, cy: np.ndarray) -> np.ndarray:
    # Same operations in the same order as escape_magnitude, element-wise.
    if iterations < 0:
        raise ValueError("iterations must be >= 0")
    cx = np.asarray(cx, dtype=np.float64)
    cy = np.asarray(cy, dtype=np.float64)
    if cx.shape != cy.shape:
        raise ValueError(f"cx and cy shapes differ: {cx.shape} != {cy.shape}")
    zx = cx.copy()
    zy = cy.copy()
    with np.errstate(over="ignore", invalid="ignore"):
        for _ in range(iterations):
            nx = zx * zx - zy * zy
            ny = zx * zy + zy * zx
            zx = nx + cx
            zy = ny + cy
        return np.sqrt(zx * zx + zy * zy)
