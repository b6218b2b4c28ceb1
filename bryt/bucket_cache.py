# bryt/bucket_cache.py
from __future__ import annotations

"""
Per-brightness candidate cache.

One <level>.npz per brightness level holding:
  lab    : float64 [N,3]
  packed : uint32 [N], ascending

No invalidation: delete the directory (or call clear()) to force a fresh sweep.
Files are written under a temporary name and renamed into place, so an
interrupted build leaves either a complete entry or none.
"""

import os
from pathlib import Path
from typing import List, Union

import numpy as np

from .constants import BRIGHTNESS_LEVELS
from .core_types import Bucket


class BucketCache:
    """Read-through store of Bucket candidate lists keyed by brightness."""

    suffix = ".npz"

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"BucketCache({str(self.root)!r})"

    def path_for(self, brightness: int) -> Path:
        if not 0 <= int(brightness) < BRIGHTNESS_LEVELS:
            raise ValueError(f"brightness level out of range: {brightness}")
        return self.root / f"{int(brightness)}{self.suffix}"

    def has(self, brightness: int) -> bool:
        return self.path_for(brightness).is_file()

    def missing_levels(self) -> List[int]:
        """Levels with no cache entry, ascending."""
        return [b for b in range(BRIGHTNESS_LEVELS) if not self.has(b)]

    def save(self, bucket: Bucket) -> Path:
        """Write one bucket. Safe to call from several threads for different levels."""
        self.root.mkdir(parents=True, exist_ok=True)
        final = self.path_for(bucket.brightness)
        tmp = final.with_name(f".{final.name}.{os.getpid()}.tmp")
        order = np.argsort(bucket.packed, kind="stable")
        try:
            with open(tmp, "wb") as fh:
                np.savez(
                    fh,
                    lab=np.ascontiguousarray(bucket.lab[order], dtype=np.float64),
                    packed=np.ascontiguousarray(bucket.packed[order], dtype=np.uint32),
                )
            os.replace(tmp, final)
        finally:
            if tmp.exists():
                tmp.unlink()
        return final

    def load(self, brightness: int) -> Bucket:
        """Load one bucket. Raises FileNotFoundError when the level is not cached."""
        path = self.path_for(brightness)
        with np.load(path, allow_pickle=False) as data:
            lab = np.array(data["lab"], dtype=np.float64)
            packed = np.array(data["packed"], dtype=np.uint32)
        if lab.shape != (packed.shape[0], 3):
            raise ValueError(f"corrupt cache entry {path}: lab shape {lab.shape}")
        return Bucket(brightness=int(brightness), lab=lab, packed=packed)

    def clear(self) -> int:
        """Remove every cache entry. Returns the number of files removed."""
        removed = 0
        if not self.root.is_dir():
            return removed
        for b in range(BRIGHTNESS_LEVELS):
            path = self.path_for(b)
            if path.is_file():
                path.unlink()
                removed += 1
        return removed


__all__ = ["BucketCache"]
