# ── Central defaults (tune here, not scattered across files) ──

# Canvas
CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600
MIN_CANVAS_SIZE = 200
MAX_CANVAS_SIZE = 1000

# Circles
N_CIRCLES = 10
MARGIN = 30
RADIUS_RANGE = (20, 50)
SPEED_RANGE = (1.0, 4.0)
PALETTE = ("red", "blue", "green", "purple", "orange",
           "pink", "teal", "brown", "navy", "gray")

# Speed multiplier
SPEED_MULTIPLIER = 1.0
SPEED_MULTIPLIER_RANGE = (0.1, 2.0)
SPEED_STEP = 0.1

# Rendering
FPS = 60
BG_COLOR = (255, 255, 255)
HUD_COLOR = (40, 40, 40)
LINE_WIDTH = 2
FONT_NAME = "arial"
FONT_SIZE = 16
RESIZE_STEP = 100

# Palette names → RGB (CSS values)
COLOR_RGB = {
    "red": (255, 0, 0),
    "blue": (0, 0, 255),
    "green": (0, 128, 0),
    "purple": (128, 0, 128),
    "orange": (255, 165, 0),
    "pink": (255, 192, 203),
    "teal": (0, 128, 128),
    "brown": (165, 42, 42),
    "navy": (0, 0, 128),
    "gray": (128, 128, 128),
}

SEED = 42
