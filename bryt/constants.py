# bryt/constants.py
"""
Global tunables used across the project.

- Colour space size and brightness levels
- Luma weights for the brightness bucket
- Lab conversion constants (sRGB companding, XYZ matrix, D65 white)
- Deduplication defaults
- Build defaults (cache location, output file, environment overrides)
"""
from __future__ import annotations

from typing import Tuple

# =========================
# Colour space
# =========================
COLOR_COUNT = 1 << 24  # every 24-bit RGB value
MAX_PACKED = COLOR_COUNT - 1
BRIGHTNESS_LEVELS = 256

# brightness = (R*299 + G*587 + B*114) // 1000
LUMA_WEIGHTS: Tuple[int, int, int] = (299, 587, 114)
LUMA_SCALE = 1000

# =========================
# sRGB -> Lab
# =========================
SRGB_LINEAR_CUTOFF = 0.04045
SRGB_LINEAR_SLOPE = 12.92
SRGB_GAMMA = 2.4

# Linear RGB -> XYZ rows (X, Y, Z)
RGB_TO_XYZ: Tuple[Tuple[float, float, float], ...] = (
    (0.4124, 0.3576, 0.1805),
    (0.2126, 0.7152, 0.0722),
    (0.0193, 0.1192, 0.9505),
)

# Reference white (D65)
WHITE_POINT: Tuple[float, float, float] = (0.95047, 1.00000, 1.08883)

LAB_EPSILON = 0.008856
LAB_LINEAR_SLOPE = 7.787
LAB_LINEAR_OFFSET = 16.0 / 116.0

# =========================
# CIE94-style weighting
# =========================
CHROMA_WEIGHT = 0.045
HUE_WEIGHT = 0.015

# =========================
# Deduplication
# =========================
# How far apart two kept colours must be. Rough perception guide:
#   <= 1.0   not perceptible by the human eye
#   1 - 2    perceptible through close observation
#   2 - 10   perceptible at a glance
#   11 - 49  colours are more similar than opposite
#   100      colours are exact opposites
# Published table sizes per threshold (legacy strategy):
#   5 -> 7,204 colours, 6 -> 5,103, 7 -> 3,555, 8 -> 2,771
DEFAULT_THRESHOLD = 5.0

STRATEGY_GREEDY = "greedy"
STRATEGY_LEGACY = "legacy"
STRATEGIES: Tuple[str, ...] = (STRATEGY_GREEDY, STRATEGY_LEGACY)
DEFAULT_STRATEGY = STRATEGY_GREEDY

# =========================
# Build defaults
# =========================
DEFAULT_CACHE_DIRNAME = ".cache"
DEFAULT_OUTPUT_NAME = "lookup.json"

ENV_CACHE_DIR = "BRYT_CACHE_DIR"
ENV_THRESHOLD = "BRYT_THRESHOLD"
ENV_WORKERS = "BRYT_WORKERS"

__all__ = [
    "COLOR_COUNT",
    "MAX_PACKED",
    "BRIGHTNESS_LEVELS",
    "LUMA_WEIGHTS",
    "LUMA_SCALE",
    "SRGB_LINEAR_CUTOFF",
    "SRGB_LINEAR_SLOPE",
    "SRGB_GAMMA",
    "RGB_TO_XYZ",
    "WHITE_POINT",
    "LAB_EPSILON",
    "LAB_LINEAR_SLOPE",
    "LAB_LINEAR_OFFSET",
    "CHROMA_WEIGHT",
    "HUE_WEIGHT",
    "DEFAULT_THRESHOLD",
    "STRATEGY_GREEDY",
    "STRATEGY_LEGACY",
    "STRATEGIES",
    "DEFAULT_STRATEGY",
    "DEFAULT_CACHE_DIRNAME",
    "DEFAULT_OUTPUT_NAME",
    "ENV_CACHE_DIR",
    "ENV_THRESHOLD",
    "ENV_WORKERS",
]
