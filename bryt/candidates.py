# bryt/candidates.py
from __future__ import annotations

"""
Candidate enumeration: the one full sweep over the 24-bit colour space.

Every packed colour gets a brightness level from the luma formula and a Lab
point from colour_convert. Colours are grouped into 256 buckets, each sorted
by ascending packed value.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional

import numpy as np

from .colour_convert import packed_to_lab
from .constants import BRIGHTNESS_LEVELS, COLOR_COUNT, LUMA_SCALE, LUMA_WEIGHTS
from .core_types import Bucket, LevelArray, PackedArray, unpack_rgb, unpack_rgb_array


def brightness_of(r: int, g: int, b: int) -> int:
    """Brightness level 0..255 for one colour."""
    wr, wg, wb = LUMA_WEIGHTS
    return (int(r) * wr + int(g) * wg + int(b) * wb) // LUMA_SCALE


def brightness_of_packed(packed: int) -> int:
    """Brightness level for a packed colour."""
    return brightness_of(*unpack_rgb(packed))


def brightness_levels(packed: np.ndarray) -> LevelArray:
    """Vectorised brightness for packed colours [N]. Returns uint8 [N]."""
    wr, wg, wb = LUMA_WEIGHTS
    r, g, b = unpack_rgb_array(packed)
    return ((r * wr + g * wg + b * wb) // LUMA_SCALE).astype(np.uint8)


def all_packed_colors() -> PackedArray:
    """Every 24-bit colour, ascending."""
    return np.arange(COLOR_COUNT, dtype=np.uint32)


def brightness_map() -> LevelArray:
    """Brightness level for every packed colour, indexed by packed value."""
    return brightness_levels(all_packed_colors())


class CandidateIndex:
    """
    Packed colours partitioned by brightness level.

    Built once per sweep. bucket(level) converts that level's colours to Lab
    on demand, so only one bucket's Lab rows are alive per caller.
    """

    def __init__(self, universe: Optional[np.ndarray] = None) -> None:
        if universe is None:
            packed = all_packed_colors()
        else:
            packed = np.unique(np.asarray(universe, dtype=np.uint32))
        levels = brightness_levels(packed)
        # stable sort keeps ascending packed order inside each level
        order = np.argsort(levels, kind="stable")
        self._packed: PackedArray = packed[order]
        self._bounds = np.searchsorted(
            levels[order], np.arange(BRIGHTNESS_LEVELS + 1), side="left"
        )

    def __len__(self) -> int:
        return int(self._packed.shape[0])

    def packed_for(self, brightness: int) -> PackedArray:
        start = int(self._bounds[brightness])
        end = int(self._bounds[brightness + 1])
        return self._packed[start:end]

    def count(self, brightness: int) -> int:
        return int(self._bounds[brightness + 1] - self._bounds[brightness])

    def bucket(self, brightness: int) -> Bucket:
        packed = self.packed_for(brightness).copy()
        return Bucket(brightness=brightness, lab=packed_to_lab(packed), packed=packed)


def enumerate_buckets(
    levels: Optional[Iterable[int]] = None,
    *,
    universe: Optional[np.ndarray] = None,
    sink: Callable[[Bucket], None],
    workers: int = 1,
) -> List[int]:
    """
    Build buckets for the requested levels and hand each one to sink.

    Args:
      levels: brightness levels to build; all 256 when omitted
      universe: optional subset of packed colours to enumerate instead of all
      sink: receives each Bucket (e.g. BucketCache.save); may run on worker threads
      workers: Lab conversion threads
    Returns:
      levels built, ascending
    """
    wanted = sorted(set(range(BRIGHTNESS_LEVELS) if levels is None else levels))
    for level in wanted:
        if not 0 <= level < BRIGHTNESS_LEVELS:
            raise ValueError(f"brightness level out of range: {level}")
    if not wanted:
        return []

    index = CandidateIndex(universe)

    def _build(level: int) -> int:
        sink(index.bucket(level))
        return level

    if workers <= 1:
        return [_build(level) for level in wanted]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_build, level) for level in wanted]
        return [f.result() for f in futures]


__all__ = [
    "brightness_of",
    "brightness_of_packed",
    "brightness_levels",
    "all_packed_colors",
    "brightness_map",
    "CandidateIndex",
    "enumerate_buckets",
]
