# bryt/lookup.py
from __future__ import annotations

"""
Runtime query API over a built lookup table.

Every function validates its arguments before touching the table and takes an
optional table=; without it the packaged table (bryt/data/lookup.json) is used.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

from .constants import BRIGHTNESS_LEVELS
from .core_types import PackedColor, is_integer
from .table import LookupTable, load_table

DEFAULT_TABLE_PATH = Path(__file__).resolve().parent / "data" / "lookup.json"


@lru_cache(maxsize=None)
def load_default_table() -> LookupTable:
    """The packaged table, loaded once."""
    return load_table(DEFAULT_TABLE_PATH)


def _resolve(table: Optional[LookupTable]) -> LookupTable:
    return load_default_table() if table is None else table


def assert_brightness(brightness: object) -> None:
    """TypeError for non-integers, ValueError outside 0..255."""
    if not is_integer(brightness):
        raise TypeError("Expected brightness to be an integer")
    if not 0 <= brightness < BRIGHTNESS_LEVELS:  # type: ignore[operator]
        raise ValueError("Expected brightness to be between 0 and 255")


def _assert_index(index: object) -> None:
    if not is_integer(index):
        raise TypeError("Expected index to be an integer")
    if index < 0:  # type: ignore[operator]
        raise ValueError("Expected index to be a positive integer")


def get_colors(
    brightness: int, *, table: Optional[LookupTable] = None
) -> Tuple[PackedColor, ...]:
    """All retained colours for a brightness level."""
    assert_brightness(brightness)
    return _resolve(table)[int(brightness)]


def get_color(
    brightness: int, index: int, *, table: Optional[LookupTable] = None
) -> PackedColor:
    """Colour at index for a brightness level. IndexError past the end."""
    assert_brightness(brightness)
    _assert_index(index)
    colors = _resolve(table)[int(brightness)]
    if index >= len(colors):  # type: ignore[operator]
        raise IndexError(f"Expected index to be less than {len(colors)}")
    return colors[int(index)]


@dataclass(frozen=True)
class BrightnessInfo:
    """A brightness level's colour count, with accessors scoped to that level."""

    brightness: int
    count: int
    table: Optional[LookupTable] = field(default=None, repr=False, compare=False)

    def get_color(self, index: int) -> PackedColor:
        return get_color(self.brightness, index, table=self.table)

    def get_colors(self) -> Tuple[PackedColor, ...]:
        return get_colors(self.brightness, table=self.table)


def get_brightness_info(
    brightness: int, *, table: Optional[LookupTable] = None
) -> BrightnessInfo:
    assert_brightness(brightness)
    return BrightnessInfo(
        brightness=int(brightness),
        count=len(_resolve(table)[int(brightness)]),
        table=table,
    )


def to_rgb(packed: int) -> List[int]:
    """
    Split a packed colour into [r, g, b].

    Only negativity is rejected; bits above 24 are masked away silently.
    """
    if not is_integer(packed):
        raise TypeError("Expected color to be an integer")
    if packed < 0:  # type: ignore[operator]
        raise ValueError("Expected color to be a positive integer")
    value = int(packed)  # type: ignore[call-overload]
    return [(value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF]


__all__ = [
    "DEFAULT_TABLE_PATH",
    "load_default_table",
    "assert_brightness",
    "get_colors",
    "get_color",
    "BrightnessInfo",
    "get_brightness_info",
    "to_rgb",
]
