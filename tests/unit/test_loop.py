"""Tests for the app loop helpers that do not need a window."""

import logging

from laserstrike import const
from laserstrike.api.types import Point, Shot
from laserstrike.app.context import Context
from laserstrike.app.loop import _open_camera, _read_frame, shot_log_lines
from laserstrike.video.camera import CameraUnavailableError

from tests.helpers import blank_frame


class FakeCamera:
    def __init__(self, frames=(), fail_open=False):
        self.index = 0
        self.frames = list(frames)
        self.fail_open = fail_open
        self.closed = False
        self.opens = 0

    def open(self):
        self.opens += 1
        if self.fail_open:
            raise CameraUnavailableError("could not open camera 0")
        self.closed = False
        return self

    def read(self):
        if self.frames:
            return True, self.frames.pop(0)
        return False, None

    def close(self):
        self.closed = True


def _ctx(camera):
    return Context(screen=None, clock=None, cfg=None, session=None, camera=camera,
                   beeper=None, pointer=None, screen_size=(0, 0))


class TestReadFrame:
    """Camera dropouts turn into the camera error state."""

    def test_frame_passes_through(self):
        ctx = _ctx(FakeCamera([blank_frame()]))
        assert _read_frame(ctx) is not None
        assert ctx.camera_error is None

    def test_short_dropout_is_tolerated(self):
        ctx = _ctx(FakeCamera())
        for _ in range(const.CAM_MAX_MISSES - 1):
            assert _read_frame(ctx) is None
        assert ctx.camera_error is None
        ctx.camera.frames.append(blank_frame())
        assert _read_frame(ctx) is not None
        assert ctx.read_misses == 0

    def test_lost_camera_is_closed_and_reported(self, caplog):
        ctx = _ctx(FakeCamera())
        with caplog.at_level(logging.ERROR, logger="laserstrike.app.loop"):
            for _ in range(const.CAM_MAX_MISSES):
                _read_frame(ctx)
        assert ctx.camera.closed
        assert "stopped delivering frames" in ctx.camera_error
        assert "stopped delivering frames" in caplog.text

    def test_reopen_clears_error(self):
        ctx = _ctx(FakeCamera())
        for _ in range(const.CAM_MAX_MISSES):
            _read_frame(ctx)
        _open_camera(ctx)
        assert ctx.camera_error is None
        assert ctx.read_misses == 0


class TestOpenCamera:
    """Tests for _open_camera."""

    def test_failure_sets_error_and_logs(self, caplog, capsys):
        ctx = _ctx(FakeCamera(fail_open=True))
        with caplog.at_level(logging.ERROR, logger="laserstrike.app.loop"):
            _open_camera(ctx)
        assert ctx.camera_error == "could not open camera 0"
        assert "camera unavailable" in caplog.text
        assert "could not open camera 0" in capsys.readouterr().err


class TestShotLog:
    """Tests for shot_log_lines."""

    def _shot(self, score, wall):
        return Shot(id="abc", point=Point(0, 0), score=score, accepted_at_ms=0.0, wall_time=wall)

    def test_newest_first(self):
        lines = shot_log_lines([self._shot(10, "10:00:01"), self._shot(7, "10:00:05")])
        assert lines == ["#2   7 pts  10:00:05", "#1  10 pts  10:00:01"]

    def test_empty(self):
        assert shot_log_lines([]) == []
