# bryt/utils.py
from __future__ import annotations

"""
Shared utilities for bryt.

Duration and size formatting, build progress lines, and tidy logging.
"""

import sys
from typing import Any, Iterable, List, Tuple

from .core_types import BucketResult


#  Time / size formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


def format_bytes(size: int) -> str:
    """Byte count with thousands separators, e.g. '65,055 bytes'."""
    return f"{int(size):,} bytes"


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def format_level_line(slot: int, result: BucketResult) -> str:
    """
    One finished brightness level, column aligned:
      Worker: 3  Brightness: 128 Total Count: 111648  Removed: 111482  Colors: 166
    """
    return (
        f"Worker: {str(slot).ljust(2)} "
        f"Brightness: {str(result.brightness).ljust(3)} "
        f"Total Count: {str(result.count).ljust(7)} "
        f"Removed: {str(result.removed).ljust(7)} "
        f"Colors: {str(len(result.colors)).ljust(7)}"
    ).rstrip()


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [build] CPU cores: 16  Workers: 8  Threshold: 5  Strategy: greedy
    Routes to debug() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def enable_line_buffered_stdout() -> None:
    """Enable line-buffered stdout when supported so progress shows up live."""
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "format_total_duration_compact",
    "format_bytes",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    "format_level_line",
    "print_config_line",
    "print_banner",
    "enable_line_buffered_stdout",
    "log",
    "debug_log",
    "error",
]
