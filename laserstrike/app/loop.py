from __future__ import annotations
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import cv2
import pygame

from laserstrike import const
from laserstrike.api.config import EngineConfig
from laserstrike.api.types import CalibrationMode, SessionState, Shot
from laserstrike.app.context import Context
from laserstrike.app.loader import load_settings
from laserstrike.audio.beeper import Beeper
from laserstrike.detect.laser import LaserDetector
from laserstrike.detect.smoothing import QuadStabilityPolicy
from laserstrike.input.pointer import CornerPointer
from laserstrike.render.board import draw_target_board
from laserstrike.render.overlay import cv2_to_pygame_surface, draw_camera_overlay
from laserstrike.render.shapes import draw_text
from laserstrike.session import commands as cmd
from laserstrike.session.state import ShootingSession
from laserstrike.video.camera import Camera, CameraUnavailableError

logger = logging.getLogger(__name__)

THRESHOLD_STEP = 5
THRESHOLD_MIN, THRESHOLD_MAX = 150, 255


def _open_camera(ctx: Context, index: Optional[int] = None) -> None:
    try:
        if index is None:
            ctx.camera.open()
        else:
            ctx.camera.switch(index)
        ctx.camera_error = None
        ctx.read_misses = 0
    except CameraUnavailableError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        logger.error("camera unavailable: %s", e)
        ctx.camera_error = str(e)


def _read_frame(ctx: Context):
    """Next camera frame, or None. Too many misses in a row drop the camera into the error screen."""
    ok, frame = ctx.camera.read()
    if ok and frame is not None:
        ctx.read_misses = 0
        return frame
    ctx.read_misses += 1
    if ctx.read_misses >= const.CAM_MAX_MISSES:
        msg = f"camera {ctx.camera.index} stopped delivering frames"
        print(f"ERROR: {msg}", file=sys.stderr)
        logger.error(msg)
        ctx.camera.close()
        ctx.camera_error = msg
    return None


def _nudge_threshold(session: ShootingSession, delta: int) -> None:
    s = session.settings
    value = max(THRESHOLD_MIN, min(THRESHOLD_MAX, s.brightness_threshold + delta))
    if value != s.brightness_threshold:
        session.submit(cmd.UpdateSettings(dataclasses.replace(s, brightness_threshold=value)))


def _handle_key(ctx: Context, key: int) -> bool:
    """Returns False when the app should quit."""
    session = ctx.session
    if key == pygame.K_ESCAPE:
        return False
    if ctx.camera_error is not None:
        if key == pygame.K_r:
            _open_camera(ctx)
        return True

    if key == pygame.K_l:
        session.submit(cmd.LockTarget())
    elif key == pygame.K_r:
        session.submit(cmd.ResetToSetup())
    elif key == pygame.K_n:
        session.submit(cmd.StartNewRound())
    elif key == pygame.K_x:
        session.submit(cmd.ClearRound())
    elif key == pygame.K_m:
        mode = CalibrationMode.AUTO if session.mode == CalibrationMode.MANUAL else CalibrationMode.MANUAL
        session.submit(cmd.SetCalibrationMode(mode))
    elif key == pygame.K_d:
        session.debug_view = not session.debug_view
    elif key == pygame.K_f and session.state == SessionState.SETUP:
        # two-camera toggle, like front/back on a phone
        base = ctx.cfg.cam_index
        _open_camera(ctx, base + 1 if ctx.camera.index == base else base)
    elif key == pygame.K_UP:
        _nudge_threshold(session, THRESHOLD_STEP)
    elif key == pygame.K_DOWN:
        _nudge_threshold(session, -THRESHOLD_STEP)
    return True


def shot_log_lines(shots: Sequence[Shot]) -> List[str]:
    """Current round, newest shot first."""
    return [f"#{n}  {shot.score:>2} pts  {shot.wall_time}"
            for n, shot in reversed(list(enumerate(shots, start=1)))]


def _draw_hud(ctx: Context) -> None:
    s = ctx.session
    surf = ctx.screen
    m = const.PREVIEW_MARGIN
    draw_text(surf, f"{s.status}", (m, 16), const.HUD_COLOR, size=32)
    draw_text(surf, f"Laser sens {s.settings.brightness_threshold} (Up/Down)   "
                    f"L=lock R=reset N=new round X=clear M=manual D=debug F=flip Esc=quit",
              (m + 220, 22), (160, 160, 160), size=20)

    y = 60 + const.PREVIEW_H + m
    last = s.last_shot
    avg = s.average_score
    draw_text(surf, f"Last shot: {last.score if last else '-'}", (m, y), const.HUD_COLOR, size=36)
    draw_text(surf, f"Shots: {len(s.shots)}/{const.SHOTS_PER_ROUND}   "
                    f"Avg: {f'{avg:.1f}' if avg is not None else '-'}   "
                    f"Cooldown: {s.cooldown_remaining}s", (m, y + 40), const.HUD_COLOR, size=26)

    hx = m + 420
    draw_text(surf, "History", (hx, y), (148, 163, 184), size=22)
    for i, rnd in enumerate(s.history[:5]):
        draw_text(surf, f"Round {rnd.number}: {rnd.total_score} pts",
                  (hx, y + 24 + i * 22), const.HUD_COLOR, size=22)

    sx = hx + 220
    draw_text(surf, "Shots", (sx, y), (148, 163, 184), size=22)
    for i, line in enumerate(shot_log_lines(s.shots)):
        draw_text(surf, line, (sx, y + 24 + i * 22), const.HUD_COLOR, size=22)

    if s.state == SessionState.ROUND_OVER and s.history:
        draw_text(surf, f"ROUND {s.history[0].number} OVER - {s.history[0].total_score} pts. Press N",
                  (m + 20, 60 + const.PREVIEW_H // 2), (250, 204, 21), size=40)


def _draw_camera_error(ctx: Context) -> None:
    ctx.screen.fill((12, 14, 18))
    draw_text(ctx.screen, "Camera unavailable", (40, 40), (239, 68, 68), size=40)
    draw_text(ctx.screen, ctx.camera_error or "", (40, 90), const.HUD_COLOR, size=24)
    draw_text(ctx.screen, "Press R to retry, Esc to quit", (40, 130), const.HUD_COLOR, size=24)


def run_app(
    screen_size: tuple[int, int],
    cam_index: int,
    settings_path: Optional[str] = None,
    mirror: bool = False,
    manual: bool = False,
    stride: int = const.SCAN_STRIDE,
    smooth_frames: int = 0,
    mute: bool = False,
):
    cfg = EngineConfig(
        screen_size=screen_size,
        cam_index=cam_index,
        mirror=mirror,
        manual=manual,
        stride=stride,
        smooth_frames=smooth_frames,
        mute=mute,
        settings_path=settings_path,
    )
    settings, target = load_settings(Path(settings_path) if settings_path else None)

    pygame.init()
    pygame.display.set_caption("LaserStrike - dry fire trainer")
    screen = pygame.display.set_mode(screen_size)
    clock = pygame.time.Clock()

    session = ShootingSession(
        settings=settings,
        target=target,
        detector=LaserDetector(settings, stride=stride),
        stability=QuadStabilityPolicy(smooth_frames, smooth_frames) if smooth_frames > 0 else None,
        mode=CalibrationMode.MANUAL if manual else CalibrationMode.AUTO,
    )
    preview_rect = pygame.Rect(const.PREVIEW_MARGIN, 60, const.PREVIEW_W, const.PREVIEW_H)
    board_rect = pygame.Rect(const.PREVIEW_W + const.PREVIEW_MARGIN * 2, 60,
                             const.BOARD_W, screen_size[1] - 60 - const.PREVIEW_MARGIN)

    ctx = Context(
        screen=screen,
        clock=clock,
        cfg=cfg,
        session=session,
        camera=Camera(index=cam_index, target_size=(const.CAM_WIDTH, const.CAM_HEIGHT), fps=const.CAM_FPS),
        beeper=Beeper(muted=mute),
        pointer=CornerPointer(preview_rect, mirror=mirror),
        screen_size=screen_size,
    )
    _open_camera(ctx)

    running = True
    try:
        while running:
            clock.tick(60)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = _handle_key(ctx, event.key)
                elif session.mode == CalibrationMode.MANUAL:
                    command = ctx.pointer.handle_pygame_event(event)
                    if command is not None:
                        session.submit(command)

            if ctx.camera_error is not None:
                _draw_camera_error(ctx)
                pygame.display.flip()
                continue

            frame_bgr = _read_frame(ctx)
            if frame_bgr is not None:
                h, w = frame_bgr.shape[:2]
                ctx.pointer.set_frame_size(w, h)
            # timers and commands still run on a missed frame
            session.step(frame_bgr, pygame.time.get_ticks())
            for ev in session.drain_events():
                logger.debug("event %s", ev.kind.value)
                ctx.beeper.on_event(ev)
            if frame_bgr is None:
                continue

            # ---- draw ----
            screen.fill((12, 14, 18))
            debug_mask = None
            if session.debug_view and session.state == SessionState.SETUP:
                debug_mask = session.vision.last_mask
            preview = draw_camera_overlay(frame_bgr, session, debug_mask)
            if mirror:
                preview = cv2.flip(preview, 1)
            preview = cv2.resize(preview, (const.PREVIEW_W, const.PREVIEW_H), interpolation=cv2.INTER_AREA)
            screen.blit(cv2_to_pygame_surface(preview), preview_rect.topleft)
            pygame.draw.rect(screen, (200, 200, 200), preview_rect.inflate(2, 2), width=1)

            draw_target_board(screen, board_rect, session.target, session.shots, session.last_shot)
            _draw_hud(ctx)
            pygame.display.flip()

    finally:
        ctx.camera.close()
        ctx.beeper.close()
        pygame.quit()
