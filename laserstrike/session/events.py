from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any


class EventKind(Enum):
    QUADRILATERAL_FOUND = "quadrilateralFound"
    QUADRILATERAL_LOST = "quadrilateralLost"
    TARGET_LOCKED = "targetLocked"
    SHOT_ACCEPTED = "shotAccepted"
    ROUND_COMPLETED = "roundCompleted"
    CALIBRATION_RESET = "calibrationReset"


@dataclass(frozen=True)
class SessionEvent:
    kind: EventKind
    at_ms: float
    payload: Any = None  # Quad, Shot or Round depending on kind
