# bryt/__init__.py
"""
bryt package.

Purpose:
  A palette of visually distinct colours for every brightness level 0..255,
  precomputed once from the full 24-bit RGB space. See bryt/cli.py for the CLI.

Public API:
  get_colors          : retained colours for a brightness level.
  get_color           : one colour by index.
  get_brightness_info : count plus accessors scoped to one level.
  to_rgb              : packed colour -> [r, g, b].
  colour_convert      : rgb_to_lab, delta_e94_pair / delta_e94_vec.
  candidates          : brightness formula and the colour-space sweep.
  bucket_cache        : per-level candidate cache.
  dedupe              : greedy / legacy near-duplicate elimination.
  dispatch            : bounded worker pool over brightness levels.
  table               : lookup table emitter and loader.
  pipeline            : run_build(config) end to end.

Quick start:
  import bryt
  bryt.get_colors(128)
  bryt.to_rgb(bryt.get_color(128, 10))
"""

__version__ = "1.0.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import candidates
from . import bucket_cache
from . import dedupe
from . import dispatch
from . import table
from . import pipeline

from .config import BuildConfig  # noqa: E402,F401
from .lookup import (  # noqa: E402,F401
    BrightnessInfo,
    get_brightness_info,
    get_color,
    get_colors,
    load_default_table,
    to_rgb,
)
from .pipeline import run_build  # noqa: E402,F401
from .table import LookupTable, load_table  # noqa: E402,F401

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "candidates",
    "bucket_cache",
    "dedupe",
    "dispatch",
    "table",
    "pipeline",
    "BuildConfig",
    "BrightnessInfo",
    "get_brightness_info",
    "get_color",
    "get_colors",
    "load_default_table",
    "to_rgb",
    "run_build",
    "LookupTable",
    "load_table",
]
