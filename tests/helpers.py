"""Frame builders and fakes shared by the unit tests."""

from typing import List, Optional

import numpy as np

from laserstrike.api.types import PolygonCandidate, points_from_xy

FRAME_W, FRAME_H = 640, 480

# camera-space corners of the sheet used throughout the session tests
SHEET = points_from_xy([(100, 100), (500, 100), (500, 400), (100, 400)])


class FakeVision:
    """Stands in for the OpenCV contour stage: returns whatever candidates it holds."""

    def __init__(self, candidates: Optional[List[PolygonCandidate]] = None):
        self.candidates_list = list(candidates or [])
        self.last_mask = None
        self.calls = 0

    def candidates(self, frame, keep_mask=False):
        self.calls += 1
        return list(self.candidates_list)


def blank_frame() -> np.ndarray:
    return np.zeros((FRAME_H, FRAME_W, 3), dtype=np.uint8)


def laser_frame(x: int, y: int, bgr=(0, 0, 255)) -> np.ndarray:
    frame = blank_frame()
    frame[y, x] = bgr
    return frame
