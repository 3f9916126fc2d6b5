import json

import pytest

from mandelclick.cli import build_arg_parser, main

def test_render_writes_image_and_manifest(tmp_path):
    out = tmp_path / "out.png"
    manifest = tmp_path / "run.json"
    rc = main([
        "--log-file", "", "--width", "16",
        "render", "--clicks", "0,0", "--output", str(out), "--manifest", str(manifest),
    ])
    assert rc == 0
    assert out.exists()
    data = json.loads(manifest.read_text(encoding="utf-8"))
    assert data["render"]["depth"] == 2
    assert data["render"]["width"] == 16
    assert data["render"]["height"] == 12
    assert data["config"]["render_width"] == 16
    assert data["settings"]["accuracy_per_depth"] == 30
    assert data["settings"]["bias_per_depth"] == 500.0
    assert len(data["history"]) == 2
    assert data["history"][0] == {"origin": [-2.5, -1.2], "extent": [3.2, 2.4]}
    assert data["history"][1] == data["render"]["viewport"]

def test_path_command(tmp_path):
    frames = tmp_path / "frames"
    rc = main(["--log-file", "", "--width", "8", "path", "0,0;-0.5,0.5", "--frames-dir", str(frames), "--no-progress"])
    assert rc == 0
    assert len(list(frames.glob("frame_*.png"))) == 3

def test_bad_clicks_propagate(tmp_path):
    with pytest.raises(ValueError):
        main(["--log-file", "", "--width", "8", "render", "--clicks", "nope", "--output", str(tmp_path / "x.png")])

def test_command_required():
    with pytest.raises(SystemExit):
        build_arg_parser().parse_args([])
