from __future__ import annotations
import pygame
from typing import Optional, Tuple

from laserstrike.api.types import Point
from laserstrike.session.commands import PlaceCorner, UndoCorner


class CornerPointer:
    """
    Manual calibration input:
    - Left click inside the camera preview places the next corner.
    - Right click removes the last one.
    - Window coords are scaled back to camera pixels, undoing --mirror.
    """

    def __init__(self, preview_rect: pygame.Rect, mirror: bool = False):
        self.preview_rect = preview_rect
        self.mirror = mirror
        self.frame_size: Tuple[int, int] = (1, 1)  # camera (w, h), updated each frame

    def set_frame_size(self, w: int, h: int) -> None:
        self.frame_size = (max(1, int(w)), max(1, int(h)))

    def to_camera(self, x: int, y: int) -> Optional[Point]:
        r = self.preview_rect
        if not r.collidepoint(x, y):
            return None
        fw, fh = self.frame_size
        lx = (x - r.x) * fw / float(r.w)
        ly = (y - r.y) * fh / float(r.h)
        if self.mirror:
            lx = (fw - 1) - lx
        return Point(float(lx), float(ly))

    def handle_pygame_event(self, event: pygame.event.Event):
        """Return a session command for this event, or None."""
        if event.type != pygame.MOUSEBUTTONDOWN:
            return None
        if event.button == 1:
            p = self.to_camera(*event.pos)
            return PlaceCorner(p) if p is not None else None
        if event.button == 3:
            return UndoCorner()
        return None
