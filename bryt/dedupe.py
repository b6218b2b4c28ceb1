# bryt/dedupe.py
from __future__ import annotations

"""
Near-duplicate elimination inside one brightness bucket.

Both strategies walk the bucket in stored order and, for each head, drop every
later candidate closer than the threshold (distance measured head-first):

  greedy : heads accumulate. The result is pairwise >= threshold and every
           dropped colour is within threshold of an earlier survivor.
  legacy : each step keeps only the current head plus its filtered tail, so
           earlier heads fall away. Reproduces the published lookup table;
           survivors are NOT guaranteed to be pairwise distinct.

Worst case is O(n^2) distance evaluations, but each head is a single
vectorised pass over what is left, and the working set shrinks fast.
"""

from typing import Callable, Dict, List, Tuple

import numpy as np

from .colour_convert import delta_e94_vec
from .constants import (
    DEFAULT_STRATEGY,
    DEFAULT_THRESHOLD,
    STRATEGIES,
    STRATEGY_GREEDY,
    STRATEGY_LEGACY,
)
from .core_types import Bucket, BucketResult, Lab, PackedColor


def dedupe_greedy(lab: Lab, packed: np.ndarray, threshold: float) -> List[PackedColor]:
    """
    Order-preserving greedy selection.

    A candidate survives iff its distance from every earlier survivor
    (survivor as the first argument) is >= threshold.
    """
    rest_lab = np.asarray(lab, dtype=np.float64).reshape(-1, 3)
    rest_packed = np.asarray(packed)
    kept: List[PackedColor] = []

    while rest_packed.shape[0]:
        kept.append(int(rest_packed[0]))
        far = delta_e94_vec(rest_lab[0], rest_lab[1:]) >= threshold
        rest_lab = rest_lab[1:][far]
        rest_packed = rest_packed[1:][far]

    return kept


def dedupe_legacy(lab: Lab, packed: np.ndarray, threshold: float) -> List[PackedColor]:
    """
    Head-rotating filter used to generate the published table.

    Step i replaces the working list with [list[i]] + the part of list[i+1:]
    at least threshold away from list[i].
    """
    work_lab = np.asarray(lab, dtype=np.float64).reshape(-1, 3)
    work_packed = np.asarray(packed)

    i = 0
    while i < work_packed.shape[0]:
        far = delta_e94_vec(work_lab[i], work_lab[i + 1 :]) >= threshold
        work_lab = np.concatenate((work_lab[i : i + 1], work_lab[i + 1 :][far]))
        work_packed = np.concatenate((work_packed[i : i + 1], work_packed[i + 1 :][far]))
        i += 1

    return [int(v) for v in work_packed.tolist()]


DedupeFn = Callable[[Lab, np.ndarray, float], List[PackedColor]]

DEDUPE_STRATEGIES: Dict[str, DedupeFn] = {
    STRATEGY_GREEDY: dedupe_greedy,
    STRATEGY_LEGACY: dedupe_legacy,
}


def resolve_strategy(name: str) -> DedupeFn:
    """Look up a strategy by name; ValueError for unknown names."""
    try:
        return DEDUPE_STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"unknown dedupe strategy {name!r} (expected one of {', '.join(STRATEGIES)})"
        ) from None


def dedupe_bucket(
    bucket: Bucket,
    threshold: float = DEFAULT_THRESHOLD,
    strategy: str = DEFAULT_STRATEGY,
) -> BucketResult:
    """Deduplicate one bucket and return its surviving packed colours."""
    if not threshold > 0:
        raise ValueError(f"threshold must be positive, got {threshold}")
    fn = resolve_strategy(strategy)
    colors: Tuple[PackedColor, ...] = tuple(fn(bucket.lab, bucket.packed, float(threshold)))
    return BucketResult(brightness=bucket.brightness, colors=colors, count=len(bucket))


__all__ = [
    "dedupe_greedy",
    "dedupe_legacy",
    "DEDUPE_STRATEGIES",
    "resolve_strategy",
    "dedupe_bucket",
]
