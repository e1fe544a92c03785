from .types import (
    CalibrationMode,
    LaserHit,
    OrderedQuad,
    Point,
    PolygonCandidate,
    Quad,
    QuadSelection,
    Round,
    SessionState,
    Shot,
)
from .config import EngineConfig, ProcessorSettings, TargetSpec

__all__ = [
    "CalibrationMode",
    "EngineConfig",
    "LaserHit",
    "OrderedQuad",
    "Point",
    "PolygonCandidate",
    "ProcessorSettings",
    "Quad",
    "QuadSelection",
    "Round",
    "SessionState",
    "Shot",
    "TargetSpec",
]
