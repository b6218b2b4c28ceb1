# bryt/dispatch.py
from __future__ import annotations

"""
Work dispatcher: a bounded pool mapping brightness levels to BucketResults.

Protocol:
  - one level in flight per worker slot
  - the coordinator keeps a cursor over the pending levels
  - when a slot's level finishes, the coordinator records it and hands that
    slot the next level
  - the first failure cancels the rest and surfaces as BucketProcessingError

Results flow back to the caller through iter_level_results(), so the
caller is the only writer of whatever it collects them into.
"""

import os
import time
from concurrent.futures import FIRST_COMPLETED, Executor, Future, ProcessPoolExecutor, wait
from functools import partial
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, Tuple, Union

from .bucket_cache import BucketCache
from .constants import DEFAULT_STRATEGY, DEFAULT_THRESHOLD
from .core_types import BucketResult
from .dedupe import dedupe_bucket

LevelTask = Callable[[int], BucketResult]
PoolFactory = Callable[[int], Executor]


class BucketProcessingError(RuntimeError):
    """A worker failed on one brightness level; the build cannot complete."""

    def __init__(self, brightness: int, message: str) -> None:
        super().__init__(f"brightness {brightness}: {message}")
        self.brightness = brightness


def default_workers() -> int:
    """Half the available CPUs, minimum 1."""
    return max(1, (os.cpu_count() or 2) // 2)


def process_level(
    cache_dir: Union[str, Path],
    brightness: int,
    *,
    threshold: float = DEFAULT_THRESHOLD,
    strategy: str = DEFAULT_STRATEGY,
) -> BucketResult:
    """Worker body: load one cached bucket and deduplicate it."""
    t0 = time.perf_counter()
    bucket = BucketCache(cache_dir).load(brightness)
    result = dedupe_bucket(bucket, threshold, strategy)
    return BucketResult(
        brightness=result.brightness,
        colors=result.colors,
        count=result.count,
        seconds=time.perf_counter() - t0,
    )


def level_task(
    cache_dir: Union[str, Path],
    *,
    threshold: float = DEFAULT_THRESHOLD,
    strategy: str = DEFAULT_STRATEGY,
) -> LevelTask:
    """Picklable per-level task bound to a cache directory and settings."""
    return partial(process_level, str(cache_dir), threshold=threshold, strategy=strategy)


def process_pool(workers: int) -> Executor:
    return ProcessPoolExecutor(max_workers=workers)


def _cancel_all(in_flight: Iterable[Future]) -> None:
    for fut in in_flight:
        fut.cancel()


def iter_level_results(
    levels: Iterable[int],
    task: LevelTask,
    *,
    workers: int,
    pool_factory: PoolFactory = process_pool,
) -> Iterator[Tuple[int, BucketResult]]:
    """
    Run task over levels with at most `workers` in flight.

    Yields (slot, result) in completion order. slot is the 0-based worker
    slot that handled the level.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    pending_levels = list(levels)
    if len(set(pending_levels)) != len(pending_levels):
        raise ValueError("duplicate brightness levels")
    if not pending_levels:
        return

    cursor = 0
    slots = min(workers, len(pending_levels))
    in_flight: Dict[Future, Tuple[int, int]] = {}

    with pool_factory(slots) as pool:

        def _assign(slot: int) -> None:
            nonlocal cursor
            level = pending_levels[cursor]
            cursor += 1
            in_flight[pool.submit(task, level)] = (slot, level)

        for slot in range(slots):
            _assign(slot)

        while in_flight:
            done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
            for fut in sorted(done, key=lambda f: in_flight[f][0]):
                slot, level = in_flight.pop(fut)
                try:
                    result = fut.result()
                except Exception as exc:
                    _cancel_all(in_flight)
                    raise BucketProcessingError(level, f"{type(exc).__name__}: {exc}") from exc
                if result.brightness != level:
                    _cancel_all(in_flight)
                    raise BucketProcessingError(
                        level, f"worker returned brightness {result.brightness}"
                    )
                yield slot, result
                if cursor < len(pending_levels):
                    _assign(slot)


def dispatch_levels(
    levels: Iterable[int],
    task: LevelTask,
    *,
    workers: int,
    pool_factory: PoolFactory = process_pool,
) -> Dict[int, BucketResult]:
    """Collect every level's result keyed by brightness."""
    results: Dict[int, BucketResult] = {}
    for _slot, result in iter_level_results(
        levels, task, workers=workers, pool_factory=pool_factory
    ):
        results[result.brightness] = result
    return results


__all__ = [
    "BucketProcessingError",
    "default_workers",
    "process_level",
    "level_task",
    "process_pool",
    "iter_level_results",
    "dispatch_levels",
]
