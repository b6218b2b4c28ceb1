#!/usr/bin/env python3
"""
bryt command line.

Usage:
  python -m bryt build [--threshold T] [--strategy greedy|legacy] [--cache-dir DIR]
                       [--output PATH] [--workers N] [--clear-cache] [--debug]
  python -m bryt show BRIGHTNESS [--table PATH]
  python -m bryt stats [--table PATH]
  python -m bryt swatch OUTPUT.png [--table PATH] [--cell N]

build:
  Sweeps the 24-bit colour space once (cached under --cache-dir), removes
  perceptual near-duplicates per brightness level on a worker pool, and writes
  the lookup table. Delete the cache directory or pass --clear-cache to redo
  the sweep.

show / stats / swatch:
  Read a table (the packaged one unless --table is given) and print or render it.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import BuildConfig
from .constants import STRATEGIES
from .core_types import packed_to_hex, unpack_rgb
from .dispatch import BucketProcessingError
from .lookup import get_brightness_info, load_default_table
from .pipeline import run_build
from .swatch import save_swatch
from .table import IncompleteBuildError, LookupTable, TableFormatError, load_table
from .utils import (
    enable_line_buffered_stdout,
    error,
    key_value_pairs_to_string,
    log,
    print_banner,
)


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected an integer >= 1, got {text}")
    return value


def _brightness(text: str) -> int:
    value = int(text)
    if not 0 <= value <= 255:
        raise argparse.ArgumentTypeError("brightness must be between 0 and 255")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bryt",
        description="Brightness-bucketed, perceptually deduplicated colour lookup table.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_build = sub.add_parser("build", help="Build the lookup table")
    p_build.add_argument("--threshold", type=float, default=None, help="Minimum distance between kept colours (default 5)")
    p_build.add_argument("--strategy", choices=STRATEGIES, default=None, help="Deduplication strategy")
    p_build.add_argument("--cache-dir", type=Path, default=None, help="Bucket cache directory (default .cache)")
    p_build.add_argument("--output", type=Path, default=None, help="Lookup table path (default lookup.json)")
    p_build.add_argument("--workers", type=_positive_int, default=None, help="Parallel workers (default half the CPUs)")
    p_build.add_argument("--clear-cache", action="store_true", help="Delete cached buckets first")
    p_build.add_argument("--debug", action="store_true", help="Verbose per-level details")

    p_show = sub.add_parser("show", help="List the colours of one brightness level")
    p_show.add_argument("brightness", type=_brightness)
    p_show.add_argument("--table", type=Path, default=None, help="Lookup table path")

    p_stats = sub.add_parser("stats", help="Per-level colour counts")
    p_stats.add_argument("--table", type=Path, default=None, help="Lookup table path")

    p_swatch = sub.add_parser("swatch", help="Render the table as a PNG")
    p_swatch.add_argument("output", type=Path)
    p_swatch.add_argument("--table", type=Path, default=None, help="Lookup table path")
    p_swatch.add_argument("--cell", type=_positive_int, default=4, help="Block size in pixels")
    return parser


def _table_from(path: Optional[Path]) -> LookupTable:
    return load_default_table() if path is None else load_table(path)


def _cmd_build(args: argparse.Namespace) -> int:
    try:
        config = BuildConfig.from_sources(
            threshold=args.threshold,
            strategy=args.strategy,
            cache_dir=args.cache_dir,
            output=args.output,
            workers=args.workers,
            clear_cache=args.clear_cache,
            debug=args.debug,
        )
    except ValueError as exc:
        error(str(exc))
        return 2
    try:
        run_build(config)
    except (BucketProcessingError, IncompleteBuildError) as exc:
        error(f"build failed: {exc}")
        return 1
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    table = _table_from(args.table)
    info = get_brightness_info(args.brightness, table=table)
    print_banner(f"brightness {info.brightness}")
    log(f"Colors: {info.count}")
    for packed in info.get_colors():
        r, g, b = unpack_rgb(packed)
        log(f"  {packed_to_hex(packed)}  ({r}, {g}, {b})  {packed}")
    return 0


def _cmd_stats(args: argparse.Namespace) -> int:
    table = _table_from(args.table)
    counts = table.counts()
    for b, n in enumerate(counts):
        log(f"{b:>3}: {n}")
    log(
        key_value_pairs_to_string(
            [
                ("Levels", len(counts)),
                ("Total colors", table.total_colors),
                ("Max per level", max(counts, default=0)),
                ("Threshold", table.threshold if table.threshold is not None else "-"),
                ("Strategy", table.strategy or "-"),
            ]
        )
    )
    return 0


def _cmd_swatch(args: argparse.Namespace) -> int:
    table = _table_from(args.table)
    out = save_swatch(table, args.output, cell=args.cell)
    log(f"Wrote {out}")
    return 0


_COMMANDS = {
    "build": _cmd_build,
    "show": _cmd_show,
    "stats": _cmd_stats,
    "swatch": _cmd_swatch,
}


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit status."""
    enable_line_buffered_stdout()
    args = build_parser().parse_args(argv)
    try:
        return _COMMANDS[args.command](args)
    except (OSError, TableFormatError) as exc:
        error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
