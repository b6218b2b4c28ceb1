# bryt/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import Iterator, NamedTuple, Tuple

import numpy as np
from numpy.typing import NDArray

# Basic aliases

PackedColor = int  # (R << 16) | (G << 8) | B
RGBTuple = Tuple[int, int, int]
LabTuple = Tuple[float, float, float]

U8Image = NDArray[np.uint8]  # (H, W, 3)
Lab = NDArray[np.float64]  # (..., 3) perceptual L, A, B
PackedArray = NDArray[np.uint32]  # (N,) packed colours
LevelArray = NDArray[np.uint8]  # (N,) brightness levels

# Value objects


class Candidate(NamedTuple):
    """One colour inside a brightness bucket: its Lab point and packed value."""

    lab: LabTuple
    packed: PackedColor


@dataclass(frozen=True)
class Bucket:
    """
    All candidates for one brightness level, stored column-wise.

    lab and packed are row-aligned and sorted by ascending packed value.
    """

    brightness: int
    lab: Lab  # shape (N, 3) float64
    packed: PackedArray  # shape (N,) uint32

    def __len__(self) -> int:
        return int(self.packed.shape[0])

    def candidates(self) -> Iterator[Candidate]:
        """Yield (lab, packed) pairs in stored order."""
        for row, value in zip(self.lab.tolist(), self.packed.tolist()):
            yield Candidate((row[0], row[1], row[2]), int(value))


@dataclass(frozen=True)
class BucketResult:
    """Outcome of deduplicating one brightness level."""

    brightness: int
    colors: Tuple[PackedColor, ...]
    count: int  # candidates before deduplication
    seconds: float = 0.0

    @property
    def removed(self) -> int:
        return self.count - len(self.colors)


# Small helpers


def pack_rgb(r: int, g: int, b: int) -> PackedColor:
    """Pack 8-bit channels into a 24-bit integer."""
    return (int(r) << 16) | (int(g) << 8) | int(b)


def unpack_rgb(packed: PackedColor) -> RGBTuple:
    """Split a packed colour into (r, g, b). High bits above 24 are ignored."""
    value = int(packed)
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def unpack_rgb_array(packed: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Vectorised unpack. Returns (r, g, b) int32 arrays."""
    p = np.asarray(packed).astype(np.int64, copy=False)
    r = ((p >> 16) & 0xFF).astype(np.int32)
    g = ((p >> 8) & 0xFF).astype(np.int32)
    b = (p & 0xFF).astype(np.int32)
    return r, g, b


def packed_to_hex(packed: PackedColor) -> str:
    """Packed colour to lowercase '#rrggbb'."""
    r, g, b = unpack_rgb(packed)
    return f"#{r:02x}{g:02x}{b:02x}"


def is_integer(value: object) -> bool:
    """True for Python and NumPy integers. Booleans are not integers here."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, np.integer))


__all__ = [
    # aliases / types
    "PackedColor",
    "RGBTuple",
    "LabTuple",
    "U8Image",
    "Lab",
    "PackedArray",
    "LevelArray",
    # value objects
    "Candidate",
    "Bucket",
    "BucketResult",
    # helpers
    "pack_rgb",
    "unpack_rgb",
    "unpack_rgb_array",
    "packed_to_hex",
    "is_integer",
]
