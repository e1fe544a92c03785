from __future__ import annotations
import math

from laserstrike.api.types import Point


def score_point(p: Point, center: Point, max_radius: float) -> int:
    """Ten equal-width rings: 10 at the center, 0 at or beyond max_radius."""
    if max_radius <= 0:
        raise ValueError(f"max_radius must be positive, got {max_radius}")
    d = math.hypot(p.x - center.x, p.y - center.y)
    raw = 10 - math.floor(10 * d / max_radius)
    return max(0, min(10, raw))
