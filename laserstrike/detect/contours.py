from __future__ import annotations
from typing import List, Optional, Tuple

import cv2
import numpy as np

from laserstrike import const
from laserstrike.api.types import Point, PolygonCandidate

KERNEL = np.ones((3, 3), dtype=np.uint8)

_GRAY_CODES = {
    "bgr": cv2.COLOR_BGR2GRAY,
    "rgb": cv2.COLOR_RGB2GRAY,
    "bgra": cv2.COLOR_BGRA2GRAY,
    "rgba": cv2.COLOR_RGBA2GRAY,
}


class ContourExtractor:
    """
    OpenCV front end for target search: turns a frame into simplified polygons.

    gray -> blur 5x5 -> Canny -> dilate 3x3 (joins broken paper edges)
    -> external contours -> approxPolyDP(eps = ratio * perimeter)
    """

    def __init__(
        self,
        channels: str = "bgr",
        canny: Tuple[int, int] = (const.CANNY_LOW, const.CANNY_HIGH),
        epsilon_ratio: float = const.APPROX_EPSILON_RATIO,
    ):
        if channels.lower() not in _GRAY_CODES:
            raise ValueError(f"unsupported channel layout {channels!r}")
        self.gray_code = _GRAY_CODES[channels.lower()]
        self.canny = canny
        self.epsilon_ratio = epsilon_ratio
        self.last_mask: Optional[np.ndarray] = None  # for the debug view

    def edge_mask(self, frame: np.ndarray) -> np.ndarray:
        gray = cv2.cvtColor(frame, self.gray_code)
        blur = cv2.GaussianBlur(gray, (5, 5), 0)
        edges = cv2.Canny(blur, self.canny[0], self.canny[1])
        return cv2.dilate(edges, KERNEL, iterations=1)

    def candidates(self, frame: np.ndarray, keep_mask: bool = False) -> List[PolygonCandidate]:
        mask = self.edge_mask(frame)
        self.last_mask = mask if keep_mask else None

        cnts, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        out: List[PolygonCandidate] = []
        for c in cnts:
            area = float(cv2.contourArea(c))
            if area <= 0:
                continue
            peri = cv2.arcLength(c, True)
            approx = cv2.approxPolyDP(c, self.epsilon_ratio * peri, True)
            verts = tuple(Point(float(x), float(y)) for (x, y) in approx.reshape(-1, 2).tolist())
            out.append(PolygonCandidate(vertices=verts, area=area))
        return out
