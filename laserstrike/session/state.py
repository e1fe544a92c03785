from __future__ import annotations
import logging
import time
import uuid
from collections import deque
from typing import Any, Deque, List, Optional

import numpy as np

from laserstrike import const
from laserstrike.api.config import ProcessorSettings, TargetSpec
from laserstrike.api.types import (
    CalibrationMode,
    OrderedQuad,
    Point,
    QuadSelection,
    Round,
    SessionState,
    Shot,
)
from laserstrike.calib.corners import order_corners
from laserstrike.calib.homography import Homography, apply_homography, compute_homography
from laserstrike.calib.quad_select import select_quadrilateral
from laserstrike.detect.contours import ContourExtractor
from laserstrike.detect.laser import LaserDetector
from laserstrike.detect.smoothing import QuadStabilityPolicy
from laserstrike.session import commands as cmd
from laserstrike.session.events import EventKind, SessionEvent
from laserstrike.session.scoring import score_point
from laserstrike.session.timers import TimerHandle, TimerQueue

logger = logging.getLogger(__name__)


class ShootingSession:
    """
    Calibration + shooting state machine, stepped once per camera frame.

    SETUP       look for the target sheet (AUTO) or collect 4 clicked corners (MANUAL)
    SHOOT       detect laser hits, map them onto the target, score them
    ROUND_OVER  5 shots were sealed into a round; waiting for StartNewRound

    All state changes happen inside step(): queued commands first see the
    frame boundary there, and timers only fire from there.
    """

    def __init__(
        self,
        settings: Optional[ProcessorSettings] = None,
        target: Optional[TargetSpec] = None,
        vision: Optional[Any] = None,
        detector: Optional[LaserDetector] = None,
        min_quad_area: float = const.MIN_QUAD_AREA,
        stability: Optional[QuadStabilityPolicy] = None,
        mode: CalibrationMode = CalibrationMode.AUTO,
    ):
        self.settings = settings or ProcessorSettings()
        self.target = target or TargetSpec()
        self.vision = vision if vision is not None else ContourExtractor()
        self.detector = detector or LaserDetector(self.settings)
        self.detector.set_settings(self.settings)
        self.min_quad_area = min_quad_area
        self.stability = stability
        self.mode = mode
        self.debug_view = False

        self.state: SessionState = SessionState.SETUP
        self.homography: Optional[Homography] = None
        self.locked_quad: Optional[OrderedQuad] = None
        self.selection = QuadSelection()
        self.manual_corners: List[Point] = []

        self.shots: List[Shot] = []
        self.history: List[Round] = []  # most recent first
        self.cooldown_remaining: int = 0
        self.last_accepted_ms: Optional[float] = None

        self._now_ms: float = 0.0
        self._timers = TimerQueue()
        self._cooldown_timer: Optional[TimerHandle] = None
        self._commands: Deque[Any] = deque()
        self._events: List[SessionEvent] = []

    # ------------- public surface -------------
    def submit(self, command) -> None:
        """Queue a command; it takes effect at the start of the next step()."""
        self._commands.append(command)

    def step(self, frame: Optional[np.ndarray], now_ms: float) -> None:
        self._now_ms = float(now_ms)
        # commands first: a reset must cancel a seal that falls due this frame
        while self._commands:
            self._apply(self._commands.popleft())
        self._timers.run_due(self._now_ms)

        if frame is None:
            return
        if self.state == SessionState.SETUP:
            self._scan_for_target(frame)
        elif self.state == SessionState.SHOOT:
            self._detect_shot(frame)

    def drain_events(self) -> List[SessionEvent]:
        out, self._events = self._events, []
        return out

    @property
    def last_shot(self) -> Optional[Shot]:
        return self.shots[-1] if self.shots else None

    @property
    def total_score(self) -> int:
        return sum(s.score for s in self.shots)

    @property
    def average_score(self) -> Optional[float]:
        return self.total_score / len(self.shots) if self.shots else None

    @property
    def status(self) -> str:
        if self.state == SessionState.SETUP:
            if self.mode == CalibrationMode.MANUAL:
                return f"MANUAL {len(self.manual_corners)}/4"
            return "TARGET FOUND" if self.selection.is_found else "SCANNING"
        if self.state == SessionState.SHOOT:
            return "LIVE"
        return "ROUND OVER"

    # ------------- per-frame work -------------
    def _scan_for_target(self, frame: np.ndarray) -> None:
        if self.mode == CalibrationMode.MANUAL:
            return
        candidates = self.vision.candidates(frame, keep_mask=self.debug_view)
        frame_area = float(frame.shape[0] * frame.shape[1])
        raw = select_quadrilateral(candidates, self.min_quad_area, frame_area)
        self._set_selection(self.stability.update(raw) if self.stability else raw)

    def _detect_shot(self, frame: np.ndarray) -> None:
        if self.homography is None or len(self.shots) >= const.SHOTS_PER_ROUND:
            return
        if self.cooldown_remaining > 0:
            return
        if self.last_accepted_ms is not None and \
                self._now_ms - self.last_accepted_ms < self.settings.debounce_ms:
            return

        hit = self.detector.detect(frame)
        if hit is None:
            return
        mapped = apply_homography(self.homography, hit.point)
        if mapped is None or not self.target.contains(mapped):
            logger.debug("discarding hit at %s -> %s (off target)", hit.point, mapped)
            return
        self.record_shot(mapped)

    def record_shot(self, point: Point) -> Optional[Shot]:
        """Score a logical-plane point and append it to the in-progress round."""
        if self.state != SessionState.SHOOT or len(self.shots) >= const.SHOTS_PER_ROUND:
            return None
        now = self._now_ms
        shot = Shot(
            id=uuid.uuid4().hex[:9],
            point=point,
            score=score_point(point, self.target.center_point, self.target.max_radius),
            accepted_at_ms=now,
            wall_time=time.strftime("%H:%M:%S"),
        )
        self.shots.append(shot)
        self.last_accepted_ms = now
        self._start_cooldown(now)
        self._emit(EventKind.SHOT_ACCEPTED, shot)
        logger.info("shot %d: %s at (%.1f, %.1f)", len(self.shots), shot.score, point.x, point.y)

        if len(self.shots) >= const.SHOTS_PER_ROUND:
            self._timers.schedule(now + const.ROUND_COMPLETE_DELAY_MS, self._seal_round)
        return shot

    # ------------- timers -------------
    def _start_cooldown(self, now: float) -> None:
        if self._cooldown_timer is not None:
            self._cooldown_timer.cancel()
        self.cooldown_remaining = int(self.settings.cooldown_seconds)
        self._cooldown_timer = None
        if self.cooldown_remaining > 0:
            self._cooldown_timer = self._timers.schedule(now + 1000, self._tick_cooldown)

    def _tick_cooldown(self, due_ms: float) -> None:
        self.cooldown_remaining = max(0, self.cooldown_remaining - 1)
        self._cooldown_timer = None
        if self.cooldown_remaining > 0:
            self._cooldown_timer = self._timers.schedule(due_ms + 1000, self._tick_cooldown)

    def _seal_round(self, due_ms: float) -> None:
        if self.state != SessionState.SHOOT or len(self.shots) < const.SHOTS_PER_ROUND:
            return
        shots = tuple(self.shots)
        rnd = Round(
            number=len(self.history) + 1,
            shots=shots,
            total_score=sum(s.score for s in shots),
            completed_at_ms=self._now_ms,
        )
        self.history.insert(0, rnd)
        self._enter(SessionState.ROUND_OVER)
        self.cooldown_remaining = 0
        self._emit(EventKind.ROUND_COMPLETED, rnd)
        logger.info("round %d complete: %d points", rnd.number, rnd.total_score)

    # ------------- commands -------------
    def _apply(self, command) -> None:
        if isinstance(command, cmd.LockTarget):
            self.lock()
        elif isinstance(command, cmd.ResetToSetup):
            self.reset_to_setup()
        elif isinstance(command, cmd.StartNewRound):
            self.start_new_round()
        elif isinstance(command, cmd.ClearRound):
            self.clear_round()
        elif isinstance(command, cmd.SetCalibrationMode):
            self._set_mode(command.mode)
        elif isinstance(command, cmd.PlaceCorner):
            self._place_corner(command.point)
        elif isinstance(command, cmd.UndoCorner):
            if self.state == SessionState.SETUP and self.manual_corners:
                self.manual_corners.pop()
        elif isinstance(command, cmd.UpdateSettings):
            self.settings = command.settings
            self.detector.set_settings(command.settings)
        else:
            raise TypeError(f"unknown command {command!r}")

    # These run from step() via queued commands; call them directly only
    # between frames.

    def lock(self) -> bool:
        if self.state != SessionState.SETUP:
            logger.debug("lock ignored in %s", self.state.value)
            return False

        if self.mode == CalibrationMode.MANUAL:
            corners = list(self.manual_corners) if len(self.manual_corners) == 4 else None
        else:
            corners = list(self.selection.found.points) if self.selection.found else None
        if corners is None:
            logger.warning("lock failed: no target quadrilateral yet")
            return False

        ordered = order_corners(corners)
        h = compute_homography(ordered, self.target)
        if h is None:
            logger.warning("lock failed: degenerate quadrilateral %s", ordered)
            return False

        self.homography = h
        self.locked_quad = ordered
        self.shots = []
        self.cooldown_remaining = 0
        self.last_accepted_ms = None
        self.selection = QuadSelection()
        if self.stability:
            self.stability.reset()
        self._enter(SessionState.SHOOT)
        self._emit(EventKind.TARGET_LOCKED, ordered)
        logger.info("target locked: %s", ordered)
        return True

    def reset_to_setup(self) -> None:
        self.homography = None
        self.locked_quad = None
        self.shots = []
        self.cooldown_remaining = 0
        self.last_accepted_ms = None
        self.selection = QuadSelection()
        self.manual_corners = []
        if self.stability:
            self.stability.reset()
        self._enter(SessionState.SETUP)
        self._emit(EventKind.CALIBRATION_RESET)

    def start_new_round(self) -> bool:
        if self.state != SessionState.ROUND_OVER:
            logger.debug("start_new_round ignored in %s", self.state.value)
            return False
        self.shots = []
        self.cooldown_remaining = 0
        self._enter(SessionState.SHOOT)
        return True

    def clear_round(self) -> bool:
        """Drop the in-progress shots; no round number is used up."""
        if self.state != SessionState.SHOOT:
            return False
        self._timers.cancel_all()
        self._cooldown_timer = None
        self.shots = []
        self.cooldown_remaining = 0
        return True

    # ------------- helpers -------------
    def _enter(self, new_state: SessionState) -> None:
        # timers belong to the mode that scheduled them
        self._timers.cancel_all()
        self._cooldown_timer = None
        self.state = new_state

    def _set_mode(self, mode: CalibrationMode) -> None:
        if self.state != SessionState.SETUP or mode == self.mode:
            return
        self.mode = mode
        self.manual_corners = []
        if self.stability:
            self.stability.reset()
        self._set_selection(QuadSelection())

    def _place_corner(self, p: Point) -> None:
        if self.state != SessionState.SETUP or self.mode != CalibrationMode.MANUAL:
            return
        if len(self.manual_corners) < 4:
            self.manual_corners.append(p)

    def _set_selection(self, sel: QuadSelection) -> None:
        was_found = self.selection.is_found
        self.selection = sel
        if sel.is_found and not was_found:
            self._emit(EventKind.QUADRILATERAL_FOUND, sel.found)
        elif was_found and not sel.is_found:
            self._emit(EventKind.QUADRILATERAL_LOST)

    def _emit(self, kind: EventKind, payload: Any = None) -> None:
        self._events.append(SessionEvent(kind=kind, at_ms=self._now_ms, payload=payload))
