from __future__ import annotations
from typing import Optional, Sequence

import pygame

from laserstrike import const
from laserstrike.api.config import TargetSpec
from laserstrike.api.types import Shot
from laserstrike.render.shapes import draw_polygon, draw_text


def draw_target_board(surface: pygame.Surface, rect: pygame.Rect, target: TargetSpec,
                      shots: Sequence[Shot], last_shot: Optional[Shot] = None) -> None:
    """Virtual target scaled into rect: 10 rings, numbered hits, last hit highlighted."""
    scale = min(rect.w / float(target.width), rect.h / float(target.height))
    ox = rect.x + (rect.w - target.width * scale) / 2
    oy = rect.y + (rect.h - target.height * scale) / 2

    def to_screen(x: float, y: float):
        return int(ox + x * scale), int(oy + y * scale)

    pygame.draw.rect(surface, (15, 23, 42),
                     (int(ox), int(oy), int(target.width * scale), int(target.height * scale)))

    # hits are accepted up to the margin outside the sheet
    m = target.margin
    draw_polygon(surface, [to_screen(-m, -m), to_screen(target.width + m, -m),
                           to_screen(target.width + m, target.height + m), to_screen(-m, target.height + m)],
                 (71, 85, 105), 1, dashed=True)

    cx, cy = to_screen(*target.center)
    for i in range(10):
        score = i + 1                     # outermost ring first
        radius = target.max_radius * (10 - i) / 10
        dark = score >= 7
        pygame.draw.circle(surface, (15, 23, 42) if dark else (241, 245, 249), (cx, cy), int(radius * scale))
        pygame.draw.circle(surface, (100, 116, 139), (cx, cy), int(radius * scale), 1)

    pygame.draw.line(surface, (251, 191, 36), (cx - 8, cy), (cx + 8, cy), 2)
    pygame.draw.line(surface, (251, 191, 36), (cx, cy - 8), (cx, cy + 8), 2)

    for n, s in enumerate(shots, start=1):
        color = const.BULLSEYE_HIT_COLOR if s.score == 10 else const.HIT_COLOR
        px, py = to_screen(s.point.x, s.point.y)
        pygame.draw.circle(surface, color, (px, py), 8)
        pygame.draw.circle(surface, (255, 255, 255), (px, py), 8, 2)
        draw_text(surface, str(n), (px - 4, py - 6), (255, 255, 255), size=16)

    if last_shot is not None:
        color = const.BULLSEYE_HIT_COLOR if last_shot.score == 10 else const.HIT_COLOR
        pygame.draw.circle(surface, color, to_screen(last_shot.point.x, last_shot.point.y), 14, 3)
