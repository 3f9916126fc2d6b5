import json
from typing import Any, Dict, Optional

from mandelclick.plane import PlaneVector
from mandelclick.renderers.cpu import RenderSettings
from mandelclick.viewport import Viewport

DEFAULTS: Dict[str, Any] = {
    "render_width": 1200,
    "window_width": 1200,
    "window_height": 900,
    "base_origin": [-2.5, -1.2],
    "base_extent": [3.2, 2.4],
    "accuracy_per_depth": 30,
    "bias_per_depth": 500.0,
    "workers": 1,
    "band_height": 32,
    "output_image": "mandelbrot.png",
    "frames_dir": "frames",
}

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    cfg = dict(DEFAULTS)
    if config_path:
        with open(config_path, "r", encoding="utf-8") as f:
            user = json.load(f)
        if not isinstance(user, dict):
            raise ValueError("Config JSON must be an object.")
        cfg.update(user)
    return cfg

def _pair(cfg: Dict[str, Any], key: str) -> list:
    value = cfg[key]
    if not (isinstance(value, (list, tuple)) and len(value) == 2):
        raise ValueError(f"{key} must be [x, y].")
    return [float(value[0]), float(value[1])]

def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(DEFAULTS)
    out.update(cfg)

    for key in ("render_width", "window_width", "window_height", "accuracy_per_depth", "workers", "band_height"):
        out[key] = int(out[key])
        if out[key] <= 0:
            raise ValueError(f"{key} must be positive.")

    out["bias_per_depth"] = float(out["bias_per_depth"])
    if out["bias_per_depth"] <= 0:
        raise ValueError("bias_per_depth must be positive.")

    out["base_origin"] = _pair(out, "base_origin")
    out["base_extent"] = _pair(out, "base_extent")
    if out["base_extent"][0] <= 0 or out["base_extent"][1] <= 0:
        raise ValueError("base_extent must be positive on both axes.")

    out["output_image"] = str(out["output_image"])
    out["frames_dir"] = str(out["frames_dir"])
    return out

def base_viewport(cfg: Dict[str, Any]) -> Viewport:
    return Viewport(
        PlaneVector.from_pair(cfg["base_origin"]),
        PlaneVector.from_pair(cfg["base_extent"]),
    ).validate()

def render_settings(cfg: Dict[str, Any]) -> RenderSettings:
    return RenderSettings(
        accuracy_per_depth=int(cfg["accuracy_per_depth"]),
        bias_per_depth=float(cfg["bias_per_depth"]),
        workers=int(cfg["workers"]),
        band_height=int(cfg["band_height"]),
    )
