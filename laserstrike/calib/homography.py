from __future__ import annotations
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

import cv2
import numpy as np

from laserstrike import const
from laserstrike.api.config import TargetSpec
from laserstrike.api.types import OrderedQuad, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Homography:
    """3x3 camera->target matrix. The array is copied and marked read-only."""
    matrix: np.ndarray

    def __post_init__(self):
        m = np.array(self.matrix, dtype=np.float64, copy=True)
        if m.shape != (3, 3):
            raise ValueError(f"homography must be 3x3, got {m.shape}")
        m.setflags(write=False)
        object.__setattr__(self, "matrix", m)

    def inverse(self) -> Optional["Homography"]:
        try:
            inv = np.linalg.inv(self.matrix)
        except np.linalg.LinAlgError:
            return None
        if not np.all(np.isfinite(inv)):
            return None
        return Homography(inv)


def _is_degenerate(quad: OrderedQuad, eps: float = const.COLLINEAR_EPSILON) -> bool:
    # any 3 of the 4 corners on one line (or coincident) -> no unique solution
    pts = quad.as_array()
    if not np.all(np.isfinite(pts)):
        return True
    for a, b, c in itertools.combinations(pts, 3):
        area2 = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
        if abs(area2) * 0.5 <= eps:
            return True
    return False


def compute_homography(src: OrderedQuad, dst: Union[TargetSpec, OrderedQuad]) -> Optional[Homography]:
    """
    Exact 4-point projective solve mapping src corners onto dst corners
    (TL->TL, TR->TR, ...). Returns None for degenerate input.
    """
    if not isinstance(src, OrderedQuad):
        raise TypeError("compute_homography needs an OrderedQuad; run order_corners() first")
    dst_quad = dst.corners() if isinstance(dst, TargetSpec) else dst

    if _is_degenerate(src) or _is_degenerate(dst_quad):
        logger.debug("degenerate quad, no homography: %s -> %s", src, dst_quad)
        return None

    try:
        m = cv2.getPerspectiveTransform(src.as_array().astype(np.float32),
                                        dst_quad.as_array().astype(np.float32))
    except cv2.error as e:
        logger.debug("getPerspectiveTransform failed for %s: %s", src, e)
        return None

    # a failed LU solve comes back as a zero matrix with m[2, 2] = 1
    if not np.all(np.isfinite(m)) or abs(np.linalg.det(m)) < const.W_EPSILON:
        return None
    return Homography(m)


def apply_homography(h: Homography, p: Point) -> Optional[Point]:
    """Map p through h; None when w is ~0 or the result is not finite."""
    x, y, w = h.matrix @ np.array([p.x, p.y, 1.0], dtype=np.float64)
    if not math.isfinite(w) or abs(w) < const.W_EPSILON:
        return None
    tx, ty = x / w, y / w
    if not (math.isfinite(tx) and math.isfinite(ty)):
        return None
    return Point(float(tx), float(ty))
