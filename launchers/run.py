import argparse
import logging
import sys
from pathlib import Path
import os
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = "hide"

# Ensure repo root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from laserstrike import const
from laserstrike.app.loop import run_app


def main():
    parser = argparse.ArgumentParser(description="LaserStrike dry fire trainer")
    parser.add_argument("--settings", default=None, help="YAML settings file (default: config/settings.yaml)")
    parser.add_argument("--screen", default=f"{const.SCREEN_W}x{const.SCREEN_H}", help="Screen size WxH, e.g. 1280x720")
    parser.add_argument("--cam-index", type=int, default=const.CAM_INDEX, help="OpenCV camera index")
    parser.add_argument("--mirror", action="store_true", help="Mirror the camera preview horizontally")
    parser.add_argument("--manual", action="store_true", help="Start in manual corner placement mode")
    parser.add_argument("--stride", type=int, default=const.SCAN_STRIDE, help="Laser scan pixel stride")
    parser.add_argument("--smooth", type=int, default=0,
                        help="Frames a target must be seen/missed before it flips (0 = off)")
    parser.add_argument("--mute", action="store_true", help="Disable beeps")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ...")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    w, h = map(int, args.screen.lower().split("x"))

    run_app(
        screen_size=(w, h),
        cam_index=args.cam_index,
        settings_path=args.settings,
        mirror=args.mirror,
        manual=args.manual,
        stride=args.stride,
        smooth_frames=args.smooth,
        mute=args.mute,
    )


if __name__ == "__main__":
    main()
