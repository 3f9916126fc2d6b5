import io

import numpy as np
import pytest
from PIL import Image

from mandelclick.output.png_writer import buffer_to_image, encode_png, save_png
from mandelclick.renderers.cpu import render
from mandelclick.viewport import BASE_VIEWPORT

def test_encode_png_round_trip():
    buf = render(BASE_VIEWPORT, 20, 1)
    data = encode_png(buf)
    assert data.startswith(b"\x89PNG")
    img = Image.open(io.BytesIO(data))
    assert img.size == (20, 15)
    np.testing.assert_array_equal(np.asarray(img.convert("RGB")), buf)

def test_save_png_creates_directories(tmp_path):
    path = tmp_path / "nested" / "out.png"
    save_png(render(BASE_VIEWPORT, 8, 1), str(path))
    assert path.exists()

@pytest.mark.parametrize("bad", [np.zeros((4, 4), dtype=np.uint8), np.zeros((4, 4, 3), dtype=np.float64)])
def test_rejects_non_rgb_buffers(bad):
    with pytest.raises(ValueError):
        buffer_to_image(bad)
