from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

import pygame

from laserstrike.api.config import EngineConfig
from laserstrike.audio.beeper import Beeper
from laserstrike.input.pointer import CornerPointer
from laserstrike.session.state import ShootingSession
from laserstrike.video.camera import Camera


@dataclass
class Context:
    screen: pygame.Surface
    clock: pygame.time.Clock
    cfg: EngineConfig
    session: ShootingSession
    camera: Camera
    beeper: Beeper
    pointer: CornerPointer
    screen_size: Tuple[int, int]
    camera_error: Optional[str] = None
    read_misses: int = 0
