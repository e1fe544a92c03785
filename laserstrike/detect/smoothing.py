from __future__ import annotations
from typing import Optional

from laserstrike.api.types import Quad, QuadSelection


class QuadStabilityPolicy:
    """
    Opt-in hysteresis on top of the stateless quadrilateral selector.

    A quad is reported only after `confirm_frames` consecutive frames found
    one, and keeps being reported (the last one seen) until `release_frames`
    consecutive frames miss. Without this policy the session reports the raw
    per-frame selection.
    """

    def __init__(self, confirm_frames: int = 3, release_frames: int = 3):
        if confirm_frames < 1 or release_frames < 1:
            raise ValueError("confirm_frames and release_frames must be >= 1")
        self.confirm_frames = confirm_frames
        self.release_frames = release_frames
        self.reset()

    def reset(self) -> None:
        self._hits = 0
        self._misses = 0
        self._held: Optional[Quad] = None

    def update(self, raw: QuadSelection) -> QuadSelection:
        if raw.found is not None:
            self._hits += 1
            self._misses = 0
            if self._held is not None or self._hits >= self.confirm_frames:
                self._held = raw.found
        else:
            self._hits = 0
            if self._held is not None:
                self._misses += 1
                if self._misses >= self.release_frames:
                    self._held = None
                    self._misses = 0

        if self._held is not None:
            return QuadSelection(found=self._held, potential=None)
        return QuadSelection(found=None, potential=raw.potential)
