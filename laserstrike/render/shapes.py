import pygame
from typing import Sequence, Tuple

_FONTS = {}


def draw_text(surface: pygame.Surface, text: str, pos: Tuple[int, int], color=(230, 230, 230), size=24):
    font = _FONTS.get(size)
    if font is None:
        font = _FONTS[size] = pygame.font.SysFont(None, size)
    surface.blit(font.render(text, True, color), pos)


def draw_polygon(surface: pygame.Surface, pts: Sequence[Tuple[float, float]], color, width=2, dashed=False):
    if len(pts) < 2:
        return
    ipts = [(int(x), int(y)) for (x, y) in pts]
    if not dashed:
        pygame.draw.lines(surface, color, True, ipts, width)
        return
    for i in range(len(ipts)):
        (x1, y1), (x2, y2) = ipts[i], ipts[(i + 1) % len(ipts)]
        length = max(1, int(((x2 - x1) ** 2 + (y2 - y1) ** 2) ** 0.5))
        for s in range(0, length, 20):  # 10 on, 10 off
            e = min(length, s + 10)
            a = (x1 + (x2 - x1) * s / length, y1 + (y2 - y1) * s / length)
            b = (x1 + (x2 - x1) * e / length, y1 + (y2 - y1) * e / length)
            pygame.draw.line(surface, color, a, b, width)
