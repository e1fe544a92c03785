from __future__ import annotations
import logging
import sys
import cv2
from typing import Tuple, Optional

logger = logging.getLogger(__name__)


class CameraUnavailableError(RuntimeError):
    """The capture device could not be opened. The user has to retry."""


class Camera:
    """
    Exclusive owner of one capture stream. open() always releases the
    previous stream first; use as a context manager so close() runs on
    every exit path.
    """

    def __init__(self, index: int, target_size: Tuple[int, int], fps: int = 60):
        self.index = index
        self.target_size = target_size
        self.fps = fps
        self.cap: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self.cap is not None

    def open(self) -> "Camera":
        self.close()
        backend = cv2.CAP_DSHOW if sys.platform.startswith("win") else 0
        cap = cv2.VideoCapture(self.index, backend)
        w, h = self.target_size
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, w)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, h)
        cap.set(cv2.CAP_PROP_FPS, self.fps)
        if not cap.isOpened():
            cap.release()
            raise CameraUnavailableError(f"could not open camera {self.index}")
        self.cap = cap
        logger.info("camera %d opened", self.index)
        return self

    def switch(self, index: int) -> "Camera":
        """Move to another device; the current stream is released before the new one is opened."""
        self.close()
        self.index = index
        return self.open()

    def read(self):
        if self.cap is None:
            return False, None
        return self.cap.read()

    def close(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("camera %d released", self.index)

    def __enter__(self) -> "Camera":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
