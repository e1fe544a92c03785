from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Quad:
    """Four corners straight from the detector, in no particular order."""
    points: Tuple[Point, Point, Point, Point]

    def __post_init__(self):
        if len(self.points) != 4:
            raise ValueError(f"Quad needs exactly 4 points, got {len(self.points)}")


@dataclass(frozen=True)
class OrderedQuad:
    """Corners in TL, TR, BR, BL order. The only form the homography accepts."""
    tl: Point
    tr: Point
    br: Point
    bl: Point

    @property
    def points(self) -> Tuple[Point, Point, Point, Point]:
        return (self.tl, self.tr, self.br, self.bl)

    def as_array(self) -> np.ndarray:
        return np.array([p.as_tuple() for p in self.points], dtype=np.float64)


@dataclass(frozen=True)
class PolygonCandidate:
    vertices: Tuple[Point, ...]
    area: float

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)


@dataclass(frozen=True)
class QuadSelection:
    # found: largest 4-vertex candidate; potential: largest non-4-vertex one (UI hint only)
    found: Optional[Quad] = None
    potential: Optional[Tuple[Point, ...]] = None

    @property
    def is_found(self) -> bool:
        return self.found is not None

    @property
    def is_potential(self) -> bool:
        return self.potential is not None


@dataclass(frozen=True)
class LaserHit:
    x: int
    y: int
    red: int

    @property
    def point(self) -> Point:
        return Point(float(self.x), float(self.y))


@dataclass(frozen=True)
class Shot:
    id: str
    point: Point           # logical-plane coordinates
    score: int
    accepted_at_ms: float
    wall_time: str = ""    # HH:MM:SS for the shot log


@dataclass(frozen=True)
class Round:
    number: int
    shots: Tuple[Shot, ...]
    total_score: int
    completed_at_ms: float

    @property
    def average_score(self) -> float:
        return self.total_score / len(self.shots) if self.shots else 0.0


class SessionState(Enum):
    SETUP = "SETUP"
    SHOOT = "SHOOT"
    ROUND_OVER = "ROUND_OVER"


class CalibrationMode(Enum):
    AUTO = "AUTO"
    MANUAL = "MANUAL"


def points_from_xy(xy: Sequence[Tuple[float, float]]) -> List[Point]:
    return [Point(float(x), float(y)) for (x, y) in xy]
