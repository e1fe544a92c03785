# -----------------------------
# Configuration (tweak as needed)
# -----------------------------

SCREEN_W, SCREEN_H = 1280, 720     # PyGame window size
CAM_INDEX = 0                      # Webcam index
CAM_WIDTH, CAM_HEIGHT = 1280, 720  # Request these from the camera (best effort)
CAM_FPS = 60
CAM_MAX_MISSES = 30               # consecutive failed reads before the camera counts as lost

# Logical target plane (printed sheet mapped to these units)
TARGET_W, TARGET_H = 500, 700
TARGET_CENTER = (250.0, 350.0)
TARGET_MAX_RADIUS = 250.0
TARGET_MARGIN = 20.0               # accept hits slightly outside the sheet

# Laser detection defaults
BRIGHTNESS_THRESHOLD = 240         # red channel must exceed this
COLOR_DOMINANCE_RATIO = 1.5        # red must beat green/blue by this factor
SCAN_STRIDE = 2                    # sample every other pixel

# Shot timing
COOLDOWN_SECONDS = 3
DEBOUNCE_MS = 500
ROUND_COMPLETE_DELAY_MS = 1500     # show the 5th hit before sealing the round
SHOTS_PER_ROUND = 5

# Quadrilateral search
MIN_QUAD_AREA = 2000               # px^2; values < 1 mean "fraction of frame"
APPROX_EPSILON_RATIO = 0.02        # polygon simplification, fraction of perimeter
CANNY_LOW, CANNY_HIGH = 50, 150

# Homography
W_EPSILON = 1e-9                   # |w| below this means the point maps to infinity
COLLINEAR_EPSILON = 1e-6           # triangle area (px^2) treated as degenerate

# Preview box (in-window live camera view)
PREVIEW_W = 800
PREVIEW_H = int(PREVIEW_W * 9 / 16)
PREVIEW_MARGIN = 12
BOARD_W = SCREEN_W - PREVIEW_W - PREVIEW_MARGIN * 3

HUD_COLOR = (230, 230, 230)
FOUND_COLOR = (16, 185, 129)       # emerald
POTENTIAL_COLOR = (234, 179, 8)    # yellow
HIT_COLOR = (239, 68, 68)
BULLSEYE_HIT_COLOR = (16, 185, 129)
