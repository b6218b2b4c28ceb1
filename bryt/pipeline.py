# bryt/pipeline.py
from __future__ import annotations

"""
Build pipeline: cache -> dispatch -> emit.

  1. ensure_cache: sweep the colour space once for any level missing from the
     bucket cache and write all of them before deduplication starts.
  2. iter_level_results: deduplicate levels on the worker pool.
  3. TableWriter: stream each level into the artifact as results arrive.
"""

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np

from .bucket_cache import BucketCache
from .candidates import enumerate_buckets
from .config import BuildConfig
from .constants import BRIGHTNESS_LEVELS
from .dispatch import PoolFactory, process_pool, iter_level_results, level_task
from .table import LookupTable, TableWriter
from .utils import (
    debug_log,
    format_bytes,
    format_level_line,
    format_seconds_compact,
    format_total_duration_compact,
    log,
    print_config_line,
)


@dataclass(frozen=True)
class BuildSummary:
    """What a build produced."""

    table: LookupTable
    output: Path
    enumerated_levels: List[int]
    seconds: float
    file_size: int

    @property
    def total_colors(self) -> int:
        return self.table.total_colors


def ensure_cache(
    cache: BucketCache,
    *,
    workers: int = 1,
    universe: Optional[np.ndarray] = None,
    debug: bool = False,
) -> List[int]:
    """
    Enumerate and cache every level not already cached.

    Returns the levels that were (re)built; empty when the cache was complete.
    """
    missing = cache.missing_levels()
    if not missing:
        if debug:
            debug_log(f"cache hit for all {BRIGHTNESS_LEVELS} levels in {cache.root}")
        return []

    log("Calculating table...")
    t0 = time.perf_counter()
    built = enumerate_buckets(missing, universe=universe, sink=cache.save, workers=workers)
    log(f"Writing cache... {len(built)} levels in {format_seconds_compact(time.perf_counter() - t0)}")
    return built


def run_build(
    config: BuildConfig,
    *,
    universe: Optional[np.ndarray] = None,
    pool_factory: PoolFactory = process_pool,
) -> BuildSummary:
    """
    Run a full build for config and write the lookup table to config.output.

    universe restricts enumeration to a subset of packed colours (used by
    tests); the default is all 16,777,216.
    """
    config.validate()
    t_start = time.perf_counter()
    print_config_line(
        "build",
        [("CPU cores", os.cpu_count() or 1)] + config.summary_pairs(),
        debug=False,
    )

    cache = BucketCache(config.cache_dir)
    if config.clear_cache:
        removed = cache.clear()
        log(f"Cleared {removed} cache entries from {cache.root}")

    enumerated = ensure_cache(
        cache, workers=config.workers, universe=universe, debug=config.debug
    )

    task = level_task(cache.root, threshold=config.threshold, strategy=config.strategy)
    log(f"Starting {config.workers} workers...")
    with TableWriter(
        config.output, threshold=config.threshold, strategy=config.strategy
    ) as writer:
        for slot, result in iter_level_results(
            range(BRIGHTNESS_LEVELS),
            task,
            workers=config.workers,
            pool_factory=pool_factory,
        ):
            writer.add(result.brightness, result.colors)
            log(format_level_line(slot, result))
            if config.debug:
                debug_log(
                    f"level {result.brightness} took {format_seconds_compact(result.seconds)}"
                    f"  flushed={writer.written}"
                )
        table = writer.finish()

    seconds = time.perf_counter() - t_start
    file_size = config.output.stat().st_size
    log(f"Finished in {format_total_duration_compact(seconds)}")
    log(f"Total colors: {table.total_colors:,}")
    log(f"Lookup file size: {format_bytes(file_size)}")

    return BuildSummary(
        table=table,
        output=config.output,
        enumerated_levels=enumerated,
        seconds=seconds,
        file_size=file_size,
    )


__all__ = ["BuildSummary", "ensure_cache", "run_build"]
