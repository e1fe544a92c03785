from __future__ import annotations
from typing import Sequence, Union

from laserstrike.api.types import OrderedQuad, Point, Quad


def order_corners(corners: Union[Quad, Sequence[Point]]) -> OrderedQuad:
    """
    Sort 4 corners into TL, TR, BR, BL using the sum/difference trick:
      TL = min(x+y), BR = max(x+y), TR = min(y-x), BL = max(y-x)

    Ties go to the first point in input order. Only reliable while the sheet
    is within roughly 45 degrees of upright; past that, corners get swapped.
    """
    pts = list(corners.points) if isinstance(corners, Quad) else list(corners)
    if len(pts) != 4:
        raise ValueError(f"expected 4 corners, got {len(pts)}")

    # min()/max() return the first extreme element, which gives the tie rule
    tl = min(pts, key=lambda p: p.x + p.y)
    br = max(pts, key=lambda p: p.x + p.y)
    tr = min(pts, key=lambda p: p.y - p.x)
    bl = max(pts, key=lambda p: p.y - p.x)
    return OrderedQuad(tl=tl, tr=tr, br=br, bl=bl)
