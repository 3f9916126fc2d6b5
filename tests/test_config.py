import json

import pytest

from mandelclick.config import DEFAULTS, base_viewport, load_config, normalise_config, render_settings
from mandelclick.viewport import BASE_VIEWPORT

def test_defaults_frame_the_full_set():
    cfg = normalise_config(load_config(None))
    assert cfg["render_width"] == 1200
    assert (cfg["window_width"], cfg["window_height"]) == (1200, 900)
    assert base_viewport(cfg) == BASE_VIEWPORT
    settings = render_settings(cfg)
    assert settings.accuracy_per_depth == 30
    assert settings.bias_per_depth == 500.0

def test_file_overrides_and_unknown_keys_kept(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"render_width": "320", "workers": 2, "note": "x"}), encoding="utf-8")
    cfg = normalise_config(load_config(str(path)))
    assert cfg["render_width"] == 320
    assert cfg["workers"] == 2
    assert cfg["note"] == "x"
    assert cfg["frames_dir"] == DEFAULTS["frames_dir"]

def test_non_object_rejected(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))

@pytest.mark.parametrize("override", [
    {"render_width": 0},
    {"workers": -1},
    {"bias_per_depth": 0},
    {"base_extent": [3.2, 0]},
    {"base_extent": [3.2]},
    {"base_origin": "nowhere"},
])
def test_bad_values_rejected(override):
    with pytest.raises(ValueError):
        normalise_config({**DEFAULTS, **override})
