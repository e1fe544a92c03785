from __future__ import annotations
from typing import Iterable, Optional

from laserstrike import const
from laserstrike.api.types import PolygonCandidate, Quad, QuadSelection


def area_floor(min_area: float, frame_area: Optional[float]) -> float:
    """min_area >= 1 is absolute (px^2); below 1 it is a fraction of the frame."""
    if min_area < 1:
        if frame_area is None:
            raise ValueError("fractional min_area needs frame_area")
        return float(min_area) * float(frame_area)
    return float(min_area)


def select_quadrilateral(
    candidates: Iterable[PolygonCandidate],
    min_area: float = const.MIN_QUAD_AREA,
    frame_area: Optional[float] = None,
) -> QuadSelection:
    """
    Pick the largest 4-vertex polygon above the area floor (found), and
    separately the largest polygon with any other vertex count (potential).

    No memory of earlier frames: the result may flip every frame.
    """
    floor = area_floor(min_area, frame_area)

    best_quad: Optional[PolygonCandidate] = None
    best_other: Optional[PolygonCandidate] = None
    for cand in candidates:
        if cand.area <= floor:
            continue
        # strict > keeps the first candidate on equal area
        if cand.vertex_count == 4:
            if best_quad is None or cand.area > best_quad.area:
                best_quad = cand
        elif best_other is None or cand.area > best_other.area:
            best_other = cand

    found = Quad(tuple(best_quad.vertices)) if best_quad is not None else None
    potential = tuple(best_other.vertices) if best_other is not None else None
    return QuadSelection(found=found, potential=potential)
