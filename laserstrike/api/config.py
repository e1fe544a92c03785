from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from laserstrike import const
from laserstrike.api.types import OrderedQuad, Point

LASER_RULES = ("dominance", "sum")


@dataclass(frozen=True)
class ProcessorSettings:
    """
    Laser detection and shot timing knobs. Read-only to the session; the app
    swaps in a whole new object (UpdateSettings) when the user changes them.

    laser_rule:
      "dominance"  red > threshold and red > green*ratio and red > blue*ratio
      "sum"        red > threshold and red > green + blue (looser, older rule)
    """
    brightness_threshold: int = const.BRIGHTNESS_THRESHOLD
    color_dominance_ratio: float = const.COLOR_DOMINANCE_RATIO
    cooldown_seconds: int = const.COOLDOWN_SECONDS
    debounce_ms: int = const.DEBOUNCE_MS
    laser_rule: str = "dominance"

    def __post_init__(self):
        if not 0 <= int(self.brightness_threshold) <= 255:
            raise ValueError(f"brightness_threshold must be 0..255, got {self.brightness_threshold}")
        if self.color_dominance_ratio < 1:
            raise ValueError(f"color_dominance_ratio must be >= 1, got {self.color_dominance_ratio}")
        if self.cooldown_seconds < 0:
            raise ValueError(f"cooldown_seconds must be >= 0, got {self.cooldown_seconds}")
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be >= 0, got {self.debounce_ms}")
        if self.laser_rule not in LASER_RULES:
            raise ValueError(f"laser_rule must be one of {LASER_RULES}, got {self.laser_rule!r}")


@dataclass(frozen=True)
class TargetSpec:
    """Logical target plane: origin top-left, width x height units, rings around center."""
    width: float = const.TARGET_W
    height: float = const.TARGET_H
    center: Tuple[float, float] = const.TARGET_CENTER
    max_radius: float = const.TARGET_MAX_RADIUS
    margin: float = const.TARGET_MARGIN

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"target size must be positive, got {self.width}x{self.height}")
        if self.max_radius <= 0:
            raise ValueError(f"max_radius must be positive, got {self.max_radius}")
        if self.margin < 0:
            raise ValueError(f"margin must be >= 0, got {self.margin}")

    @property
    def center_point(self) -> Point:
        return Point(float(self.center[0]), float(self.center[1]))

    def corners(self) -> OrderedQuad:
        w, h = float(self.width), float(self.height)
        return OrderedQuad(Point(0.0, 0.0), Point(w, 0.0), Point(w, h), Point(0.0, h))

    def contains(self, p: Point) -> bool:
        # inclusive, extended by margin on every side
        m = self.margin
        return (-m <= p.x <= self.width + m) and (-m <= p.y <= self.height + m)


@dataclass
class EngineConfig:
    screen_size: Tuple[int, int]
    cam_index: int
    mirror: bool = False
    manual: bool = False
    stride: int = const.SCAN_STRIDE
    smooth_frames: int = 0
    mute: bool = False
    settings_path: Optional[str] = None
