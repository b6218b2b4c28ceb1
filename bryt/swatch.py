# bryt/swatch.py
from __future__ import annotations

"""
Palette preview image: one row of colour blocks per brightness level.
"""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from .core_types import U8Image, unpack_rgb_array
from .table import LookupTable


def swatch_array(table: LookupTable, cell: int = 4) -> U8Image:
    """
    Render table as uint8 [len(table)*cell, max_count*cell, 3].
    Row b holds level b's colours left to right; short rows are padded black.
    """
    if cell < 1:
        raise ValueError(f"cell must be >= 1, got {cell}")
    widest = max(1, max(table.counts(), default=0))
    grid = np.zeros((len(table), widest, 3), dtype=np.uint8)
    for b, colors in enumerate(table.entries):
        if not colors:
            continue
        r, g, bl = unpack_rgb_array(np.array(colors, dtype=np.int64))
        grid[b, : len(colors)] = np.stack([r, g, bl], axis=-1).astype(np.uint8)
    return np.repeat(np.repeat(grid, cell, axis=0), cell, axis=1)


def render_swatch(table: LookupTable, cell: int = 4) -> Image.Image:
    """Swatch as a Pillow RGB image."""
    return Image.fromarray(swatch_array(table, cell))


def save_swatch(table: LookupTable, path: Union[str, Path], cell: int = 4) -> Path:
    """Write the swatch as PNG. A non-.png suffix is replaced."""
    out = Path(path)
    if out.suffix.lower() != ".png":
        out = out.with_suffix(".png")
    render_swatch(table, cell).save(out)
    return out


__all__ = ["swatch_array", "render_swatch", "save_swatch"]
