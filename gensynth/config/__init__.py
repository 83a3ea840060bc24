"""
Central Configuration
All constants, mappings, and settings in one place
"""

import math

# === PARAMETERS ===
DEFAULT_STEP = 1
DEFAULT_GROUP = "algo"
INK_GROUP = "ink"

# === SCHEDULER ===
BASE_ITERATIONS_PER_SECOND = 5
MAX_RUNS_PER_FRAME = 120
FRAME_INTERVAL_MS = 16  # ~60Hz host callback

# Playback multipliers offered by the speed button
SPEED_OPTIONS = [1, 2, 4, 8, 16, 32]

# === NOISE MODULATION ===
# Index 0 is "off"; the rest are noise domain units per frame
PARAM_NOISE_SPEEDS = [0, 0.001, 0.005, 0.01, 0.1, 0.5]
PARAM_NOISE_LEVEL_COUNT = len(PARAM_NOISE_SPEEDS) - 1
DEFAULT_PARAM_NOISE_SPEED_INDEX = 0
PARAM_NOISE_DOMAIN_STEP = 127.91831
MODULATION_EPSILON = 1e-6

# === PERSISTENCE ===
PARAM_SETTINGS_STORAGE_VERSION = 1
PARAM_SETTINGS_SAVE_DEBOUNCE_MS = 150
SHARE_SCHEMA_VERSION = 1

# === INTERACTION ===
RANGE_EDGE_PADDING_PX = 0
RANGE_BOUND_HANDLE_THICKNESS_PX = 10
RANGE_CURRENT_HANDLE_DIAMETER_PX = 8
HANDLE_COLLAPSE_PX = 2   # handles closer than this count as stacked
HANDLE_TIE_BREAK_PX = 1
PAGE_STEP_MULTIPLIER = 10

DEFAULT_PLUGIN_ID = "circles"


def decimals_from_step(step):
    """Number of decimals implied by a step (capped at 6)."""
    text = repr(float(step)) if not isinstance(step, int) else str(step)
    if "e" in text or "E" in text:
        return 6
    if "." not in text:
        return 0
    fraction = text.split(".")[1].rstrip("0")
    return min(6, len(fraction))


def format_value(value, step):
    """
    Format a parameter value for display using the precision of its step.
    Trailing zeros are stripped.
    """
    if value is None or not math.isfinite(value):
        return "--"
    decimals = decimals_from_step(step)
    if decimals == 0:
        return str(int(math.floor(value + 0.5)))

    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
