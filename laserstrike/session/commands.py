from __future__ import annotations
from dataclasses import dataclass

from laserstrike.api.config import ProcessorSettings
from laserstrike.api.types import CalibrationMode, Point


# User commands. They are queued and applied at the start of the next frame
# step, never in the middle of one.

@dataclass(frozen=True)
class LockTarget:
    pass


@dataclass(frozen=True)
class ResetToSetup:
    pass


@dataclass(frozen=True)
class StartNewRound:
    pass


@dataclass(frozen=True)
class ClearRound:
    pass


@dataclass(frozen=True)
class SetCalibrationMode:
    mode: CalibrationMode


@dataclass(frozen=True)
class PlaceCorner:
    point: Point  # camera pixels


@dataclass(frozen=True)
class UndoCorner:
    pass


@dataclass(frozen=True)
class UpdateSettings:
    settings: ProcessorSettings
