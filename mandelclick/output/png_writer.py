from __future__ import annotations

import io
import os

import numpy as np
from PIL import Image

from mandelclick.util.logging_setup import get_logger

def buffer_to_image(buf: np.ndarray) -> Image.Image:
    if buf.ndim != 3 or buf.shape[2] != 3 or buf.dtype != np.uint8:
        raise ValueError(f"Expected a (height, width, 3) uint8 buffer, got {buf.shape} {buf.dtype}")
    return Image.fromarray(buf, mode="RGB")

def encode_png(buf: np.ndarray) -> bytes:
    out = io.BytesIO()
    buffer_to_image(buf).save(out, format="PNG")
    return out.getvalue()

def save_png(buf: np.ndarray, path: str) -> str:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    buffer_to_image(buf).save(path, format="PNG", optimize=True)
    get_logger().info("Image written: %s (%sx%s)", path, buf.shape[1], buf.shape[0])
    return path
