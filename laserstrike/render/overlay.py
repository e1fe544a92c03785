from __future__ import annotations
from typing import Optional, Sequence

import cv2
import numpy as np
import pygame

from laserstrike import const
from laserstrike.api.config import TargetSpec
from laserstrike.api.types import Point, SessionState
from laserstrike.calib.homography import Homography, apply_homography
from laserstrike.session.state import ShootingSession

LABELS = ("TL", "TR", "BR", "BL")
GREEN = const.FOUND_COLOR[::-1]        # cv2 draws in BGR
YELLOW = const.POTENTIAL_COLOR[::-1]


def cv2_to_pygame_surface(img_bgr: np.ndarray) -> pygame.Surface:
    """Convert a BGR OpenCV image to a PyGame Surface (RGB)."""
    img_rgb = cv2.cvtColor(img_bgr, cv2.COLOR_BGR2RGB)
    # make_surface wants (W, H, 3)
    return pygame.surfarray.make_surface(img_rgb.swapaxes(0, 1))


def _poly(img, pts: Sequence[Point], color, thickness=2):
    arr = np.array([[int(p.x), int(p.y)] for p in pts], dtype=np.int32).reshape(-1, 1, 2)
    cv2.polylines(img, [arr], True, color, thickness, cv2.LINE_AA)


def _labelled_corners(img, pts: Sequence[Point], color):
    for i, p in enumerate(pts):
        x, y = int(p.x), int(p.y)
        cv2.circle(img, (x, y), 6, color, -1)
        cv2.putText(img, LABELS[i] if i < 4 else str(i + 1), (x + 8, y - 8),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2, cv2.LINE_AA)


def _target_rings(img, h: Homography, target: TargetSpec, color=YELLOW):
    """Outer ring and bullseye of the logical target, projected back onto the camera image."""
    inv = h.inverse()
    if inv is None:
        return
    cx, cy = target.center
    outline = []
    for a in np.linspace(0.0, 2 * np.pi, 48, endpoint=False):
        p = apply_homography(inv, Point(cx + target.max_radius * np.cos(a), cy + target.max_radius * np.sin(a)))
        if p is None:
            return
        outline.append(p)
    _poly(img, outline, color, 2)
    center = apply_homography(inv, target.center_point)
    if center is not None:
        cv2.drawMarker(img, (int(round(center.x)), int(round(center.y))), color,
                       cv2.MARKER_CROSS, 16, 2, cv2.LINE_AA)


def draw_camera_overlay(frame_bgr: np.ndarray, session: ShootingSession,
                        debug_mask: Optional[np.ndarray] = None) -> np.ndarray:
    """Return a copy of the frame with the session's calibration state drawn on it."""
    if debug_mask is not None:
        preview = cv2.cvtColor(debug_mask, cv2.COLOR_GRAY2BGR)
    else:
        preview = frame_bgr.copy()

    if session.state == SessionState.SETUP:
        sel = session.selection
        if sel.found is not None:
            _poly(preview, sel.found.points, GREEN, 5)
            for p in sel.found.points:
                cv2.circle(preview, (int(p.x), int(p.y)), 5, GREEN, -1)
        elif sel.is_potential:
            _poly(preview, sel.potential, YELLOW, 3)
        if session.manual_corners:
            _labelled_corners(preview, session.manual_corners, GREEN)
            if len(session.manual_corners) == 4:
                _poly(preview, session.manual_corners, GREEN, 2)
    elif session.locked_quad is not None:
        _poly(preview, session.locked_quad.points, (0, 200, 0), 2)
        _labelled_corners(preview, session.locked_quad.points, (0, 200, 0))
        if session.homography is not None:
            _target_rings(preview, session.homography, session.target)

    return preview
