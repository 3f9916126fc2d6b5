import logging
import threading

import numpy as np
import pytest

from mandelclick.plane import PlaneVector
from mandelclick.renderers.cpu import render
from mandelclick.scheduler import RenderScheduler
from mandelclick.viewport import BASE_VIEWPORT, Viewport

class BlockingRender:
    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = []

    def __call__(self, viewport, width, depth, settings):
        self.calls.append(depth)
        self.started.set()
        assert self.release.wait(timeout=10)
        return np.full((2, width, 3), depth, dtype=np.uint8)

def _vp(i):
    return Viewport(PlaneVector(float(i), 0.0), PlaneVector(1.0, 1.0))

def test_newest_request_wins_and_pending_one_is_cancelled():
    fake = BlockingRender()
    with RenderScheduler(4, render_fn=fake) as sched:
        sched.request(_vp(1), 1)
        assert fake.started.wait(timeout=10)
        sched.request(_vp(2), 2)
        gen = sched.request(_vp(3), 3)
        assert sched.poll() is None
        fake.release.set()
        frame = sched.wait(timeout=10)
    assert frame is not None
    assert frame.generation == gen == 3
    assert frame.depth == 3
    assert frame.viewport == _vp(3)
    assert int(frame.buffer[0, 0, 0]) == 3
    assert fake.calls == [1, 3]

def test_superseded_running_render_is_never_shown():
    fake = BlockingRender()
    with RenderScheduler(4, render_fn=fake) as sched:
        sched.request(_vp(1), 1)
        assert fake.started.wait(timeout=10)
        sched.request(_vp(2), 2)
        fake.release.set()
        frame = sched.wait(timeout=10)
        assert frame.depth == 2
        assert sched.poll() is None

def test_poll_returns_frame_once():
    with RenderScheduler(16) as sched:
        sched.request(BASE_VIEWPORT, 1)
        frame = sched.wait(timeout=60)
        assert frame is not None
        assert sched.poll() is None
        assert not sched.busy
    np.testing.assert_array_equal(frame.buffer, render(BASE_VIEWPORT, 16, 1))

def test_wait_without_request():
    with RenderScheduler(8) as sched:
        assert sched.wait(timeout=1) is None

def test_render_errors_surface_on_poll():
    def broken(viewport, width, depth, settings):
        raise RuntimeError("boom")

    with RenderScheduler(8, render_fn=broken) as sched:
        sched.request(BASE_VIEWPORT, 1)
        with pytest.raises(RuntimeError):
            sched.wait(timeout=10)

class _Collect(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.ERROR)
        self.records = []

    def emit(self, record):
        self.records.append(record)

def test_failure_of_superseded_running_render_is_logged():
    started = threading.Event()
    release = threading.Event()

    def flaky(viewport, width, depth, settings):
        if depth == 1:
            started.set()
            assert release.wait(timeout=10)
            raise RuntimeError("lost render")
        return np.zeros((1, width, 3), dtype=np.uint8)

    logger = logging.getLogger("mandelclick.scheduler")
    handler = _Collect()
    logger.addHandler(handler)
    try:
        with RenderScheduler(4, render_fn=flaky) as sched:
            sched.request(_vp(1), 1)
            assert started.wait(timeout=10)
            sched.request(_vp(2), 2)
            release.set()
            frame = sched.wait(timeout=10)
    finally:
        logger.removeHandler(handler)

    assert frame.depth == 2
    errors = handler.records
    assert len(errors) == 1
    assert "lost render" in errors[0].getMessage()
