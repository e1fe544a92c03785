from __future__ import annotations
from typing import Optional

import numpy as np

from laserstrike import const
from laserstrike.api.config import ProcessorSettings
from laserstrike.api.types import LaserHit


class LaserDetector:
    """
    Finds the single brightest red-dominant pixel in a frame.

    The scan walks the frame in row-major order, sampling every `stride`-th
    pixel, and keeps the sample with the highest red value that passes the
    qualifying rule. No blob grouping or centroiding: one pixel wins.

    `channels` names the buffer layout, e.g. "bgr" for OpenCV frames or
    "rgba" for canvas-style buffers.
    """

    def __init__(self, settings: ProcessorSettings, stride: int = const.SCAN_STRIDE, channels: str = "bgr"):
        if stride < 1:
            raise ValueError(f"stride must be >= 1, got {stride}")
        channels = channels.lower()
        if sorted(set(channels) & set("rgb")) != ["b", "g", "r"]:
            raise ValueError(f"channels must name r, g and b, got {channels!r}")
        self.settings = settings
        self.stride = int(stride)
        self.channels = channels
        self._ri = channels.index("r")
        self._gi = channels.index("g")
        self._bi = channels.index("b")

    def set_settings(self, settings: ProcessorSettings) -> None:
        self.settings = settings

    def qualifying_mask(self, r: np.ndarray, g: np.ndarray, b: np.ndarray) -> np.ndarray:
        s = self.settings
        bright = r > s.brightness_threshold
        if s.laser_rule == "sum":
            return bright & (r > g + b)
        ratio = float(s.color_dominance_ratio)
        return bright & (r > g * ratio) & (r > b * ratio)

    def detect(self, pixels: np.ndarray) -> Optional[LaserHit]:
        if pixels is None or pixels.ndim != 3 or pixels.shape[2] != len(self.channels):
            raise ValueError(
                f"expected HxWx{len(self.channels)} buffer for {self.channels!r}, "
                f"got shape {getattr(pixels, 'shape', None)}")
        h, w = pixels.shape[:2]
        if h == 0 or w == 0:
            return None

        samples = pixels.reshape(-1, pixels.shape[2])[::self.stride]
        # widen before adding so g + b cannot wrap around in uint8
        r = samples[:, self._ri].astype(np.int32)
        g = samples[:, self._gi].astype(np.int32)
        b = samples[:, self._bi].astype(np.int32)

        ok = self.qualifying_mask(r, g, b)
        if not ok.any():
            return None

        # argmax returns the first maximum, so ties go to the earliest pixel in scan order
        k = int(np.argmax(np.where(ok, r, -1)))
        idx = k * self.stride
        return LaserHit(x=idx % w, y=idx // w, red=int(r[k]))
