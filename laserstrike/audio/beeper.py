from __future__ import annotations
import logging
from typing import Dict, Optional, Tuple

import numpy as np
import pygame

from laserstrike.session.events import EventKind, SessionEvent

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100

# (frequency Hz, duration s) per event
TONES: Dict[EventKind, Tuple[float, float]] = {
    EventKind.TARGET_LOCKED: (600, 0.2),
    EventKind.SHOT_ACCEPTED: (1200, 0.1),
    EventKind.ROUND_COMPLETED: (900, 0.35),
    EventKind.CALIBRATION_RESET: (400, 0.15),
}


def sine_tone(freq: float, duration: float, volume: float = 0.1) -> np.ndarray:
    """Mono int16 sine with an exponential fade-out."""
    n = max(1, int(SAMPLE_RATE * duration))
    t = np.arange(n, dtype=np.float64) / SAMPLE_RATE
    env = np.exp(-5.0 * t / duration)
    wave = volume * env * np.sin(2 * np.pi * freq * t)
    return (wave * 32767).astype(np.int16)


class Beeper:
    """
    Audio feedback owned by the app. The mixer is opened on the first beep
    and shut down by close(); with muted=True nothing touches the device.
    """

    def __init__(self, muted: bool = False):
        self.muted = muted
        self._ready = False
        self._failed = False
        self._cache: Dict[Tuple[float, float], "pygame.mixer.Sound"] = {}

    def _ensure_mixer(self) -> bool:
        if self._ready or self._failed or self.muted:
            return self._ready
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            self._ready = True
        except pygame.error as e:
            logger.warning("audio disabled: %s", e)
            self._failed = True
        return self._ready

    def beep(self, freq: float = 800, duration: float = 0.1) -> None:
        if not self._ensure_mixer():
            return
        key = (freq, duration)
        sound = self._cache.get(key)
        if sound is None:
            samples = sine_tone(freq, duration)
            # match whatever channel count the mixer actually opened with
            _, _, channels = pygame.mixer.get_init()
            if channels > 1:
                samples = np.repeat(samples[:, None], channels, axis=1)
            sound = pygame.sndarray.make_sound(np.ascontiguousarray(samples))
            self._cache[key] = sound
        sound.play()

    def on_event(self, event: SessionEvent) -> None:
        tone: Optional[Tuple[float, float]] = TONES.get(event.kind)
        if tone is not None:
            self.beep(*tone)

    def close(self) -> None:
        self._cache.clear()
        if self._ready:
            pygame.mixer.quit()
            self._ready = False
