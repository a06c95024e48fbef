"""Fixed palette and timing constants for heatmap generation."""

from __future__ import annotations

DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 60
DEFAULT_NUM_SEGMENTS = 600

POSITION_WINDOW_SIZE = 15
BACKFILL_THRESHOLD_MS = 500
TICK_INTERVAL_MS = 600_000

MAX_SLOPE = 20.0
INTENSITY_STEP = 60.0
BACKGROUND_INTENSITY_CUTOFF = 0.001

COLOR_BACKGROUND = "#30404d"
COLOR_BLUE = "#1e90ff"  # DodgerBlue
COLOR_GREEN = "#228b22"  # ForestGreen
COLOR_YELLOW = "#ffd700"  # Gold
COLOR_RED = "#dc143c"  # Crimson
COLOR_PURPLE = "#800080"
COLOR_BLACK = "#0f001e"
COLOR_TICK = "#000000"
