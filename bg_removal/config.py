"""
Centralized configuration constants for the background removal pipeline.

Ground rules:
- Pure numpy on CPU, one image at a time
- All tunables live here; settings ranges mirror the original slider bounds
"""

# Border sampling: every Nth pixel along each edge, clustered by RGB distance.
SAMPLE_STRIDE = 5
CLUSTER_DISTANCE = 30.0
MAX_PALETTE_SIZE = 3

# Sobel magnitude threshold = edge_sensitivity * EDGE_THRESHOLD_SCALE
EDGE_THRESHOLD_SCALE = 10

# Background-coloured pixels that sit on an edge keep floor(255 * 0.3) alpha.
EDGE_ALPHA_FRACTION = 0.3

LUMINANCE_WEIGHTS = (0.299, 0.587, 0.114)

# Simple (luminance) mode
SOFT_THRESHOLD_FACTOR = 0.8
SMOOTHING_ALPHA_STEP = 20

# (min, max, default)
COLOR_TOLERANCE = (10, 100, 30)
EDGE_SENSITIVITY = (1, 10, 5)
FEATHER_RADIUS = (0, 5, 2)
BRIGHTNESS_THRESHOLD = (50, 200, 128)
SMOOTHING = (0, 5, 2)

MODES = ("smart", "simple")
EDGE_CHANNELS = ("red", "luminance")
DEFAULT_MODE = "smart"
DEFAULT_EDGE_CHANNEL = "red"

# settings defaults can be overridden through BG_REMOVAL_* environment variables
ENV_PREFIX = "BG_REMOVAL_"
