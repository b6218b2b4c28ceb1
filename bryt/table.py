# bryt/table.py
from __future__ import annotations

"""
Lookup table emitter and loader.

Artifact layout (UTF-8 JSON, one brightness entry per line):

  {"levels":256,"strategy":"greedy","threshold":5.0,"lookup":[
  [0],
  [65536,...],
  ...
  [16777215]
  ]}

TableWriter streams entries to disk as soon as every lower level is known, so
results may arrive in any order. The file only appears under its final name
once all levels are written.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from .constants import BRIGHTNESS_LEVELS
from .core_types import BucketResult, PackedColor, is_integer


class IncompleteBuildError(RuntimeError):
    """One or more brightness levels have no result; no table is emitted."""

    def __init__(self, missing: Iterable[int]) -> None:
        self.missing = sorted(missing)
        shown = ", ".join(str(b) for b in self.missing[:16])
        more = f" (+{len(self.missing) - 16} more)" if len(self.missing) > 16 else ""
        super().__init__(f"missing results for brightness levels: {shown}{more}")


class TableFormatError(ValueError):
    """A lookup table artifact could not be parsed."""


@dataclass(frozen=True)
class LookupTable:
    """Immutable brightness-indexed colour lists."""

    entries: Tuple[Tuple[PackedColor, ...], ...]
    threshold: Optional[float] = None
    strategy: Optional[str] = None

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, brightness: int) -> Tuple[PackedColor, ...]:
        return self.entries[brightness]

    def counts(self) -> Tuple[int, ...]:
        return tuple(len(e) for e in self.entries)

    @property
    def total_colors(self) -> int:
        return sum(len(e) for e in self.entries)

    @classmethod
    def from_results(
        cls,
        results: Mapping[int, Union[BucketResult, Sequence[PackedColor]]],
        *,
        threshold: Optional[float] = None,
        strategy: Optional[str] = None,
        levels: int = BRIGHTNESS_LEVELS,
    ) -> "LookupTable":
        missing = [b for b in range(levels) if b not in results]
        if missing:
            raise IncompleteBuildError(missing)
        return cls(
            entries=tuple(_colors_of(results[b]) for b in range(levels)),
            threshold=threshold,
            strategy=strategy,
        )


def _colors_of(value: Union[BucketResult, Sequence[PackedColor]]) -> Tuple[PackedColor, ...]:
    colors = value.colors if isinstance(value, BucketResult) else value
    return tuple(int(c) for c in colors)


def _format_entry(colors: Sequence[PackedColor]) -> str:
    return "[" + ",".join(str(int(c)) for c in colors) + "]"


def _format_header(levels: int, strategy: Optional[str], threshold: Optional[float]) -> str:
    return (
        '{"levels":%d,"strategy":%s,"threshold":%s,"lookup":[\n'
        % (
            levels,
            json.dumps(strategy),
            json.dumps(None if threshold is None else float(threshold)),
        )
    )


class TableWriter:
    """
    Streaming lookup table writer.

    Usage:
      with TableWriter(path, threshold=5.0, strategy="greedy") as writer:
          for result in results:
              writer.add(result.brightness, result.colors)
          table = writer.finish()

    Leaving the block without finish(), or with an exception, discards the
    partial file.
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        threshold: Optional[float] = None,
        strategy: Optional[str] = None,
        levels: int = BRIGHTNESS_LEVELS,
    ) -> None:
        self.path = Path(path)
        self.threshold = threshold
        self.strategy = strategy
        self.levels = levels
        self._tmp = self.path.with_name(f".{self.path.name}.{os.getpid()}.tmp")
        self._fh = None
        self._pending: Dict[int, Tuple[PackedColor, ...]] = {}
        self._entries: list[Tuple[PackedColor, ...]] = []
        self._table: Optional[LookupTable] = None

    def __enter__(self) -> "TableWriter":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = open(self._tmp, "w", encoding="utf-8", newline="\n")
        self._fh.write(_format_header(self.levels, self.strategy, self.threshold))
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._table is None:
            self._discard()

    @property
    def written(self) -> int:
        """Levels already flushed to disk."""
        return len(self._entries)

    def add(self, brightness: int, colors: Sequence[PackedColor]) -> None:
        """Record one level; flushes every contiguous level now available."""
        if self._fh is None:
            raise RuntimeError("TableWriter is not open")
        if not is_integer(brightness) or not 0 <= brightness < self.levels:
            raise ValueError(f"brightness level out of range: {brightness!r}")
        b = int(brightness)
        if b < len(self._entries) or b in self._pending:
            raise ValueError(f"duplicate result for brightness {b}")
        self._pending[b] = tuple(int(c) for c in colors)
        while len(self._entries) in self._pending:
            entry = self._pending.pop(len(self._entries))
            last = len(self._entries) == self.levels - 1
            self._fh.write(_format_entry(entry) + ("\n" if last else ",\n"))
            self._entries.append(entry)

    def finish(self) -> LookupTable:
        """Close the artifact. Raises IncompleteBuildError if any level is missing."""
        if self._fh is None:
            raise RuntimeError("TableWriter is not open")
        if len(self._entries) != self.levels:
            missing = set(range(len(self._entries), self.levels)) - set(self._pending)
            self._discard()
            raise IncompleteBuildError(missing)
        self._fh.write("]}\n")
        self._fh.close()
        self._fh = None
        os.replace(self._tmp, self.path)
        self._table = LookupTable(
            entries=tuple(self._entries),
            threshold=None if self.threshold is None else float(self.threshold),
            strategy=self.strategy,
        )
        return self._table

    def _discard(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
        if self._tmp.exists():
            self._tmp.unlink()


def emit_table(
    results: Mapping[int, Union[BucketResult, Sequence[PackedColor]]],
    path: Union[str, Path],
    *,
    threshold: Optional[float] = None,
    strategy: Optional[str] = None,
    levels: int = BRIGHTNESS_LEVELS,
) -> LookupTable:
    """Write a complete result set. Nothing is written if a level is missing."""
    missing = [b for b in range(levels) if b not in results]
    if missing:
        raise IncompleteBuildError(missing)
    with TableWriter(path, threshold=threshold, strategy=strategy, levels=levels) as writer:
        for b in range(levels):
            writer.add(b, _colors_of(results[b]))
        return writer.finish()


def load_table(path: Union[str, Path], *, levels: int = BRIGHTNESS_LEVELS) -> LookupTable:
    """Load an artifact written by TableWriter."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            doc = json.load(fh)
    except json.JSONDecodeError as exc:
        raise TableFormatError(f"{path}: not valid JSON ({exc})") from exc

    if not isinstance(doc, dict) or not isinstance(doc.get("lookup"), list):
        raise TableFormatError(f"{path}: expected an object with a 'lookup' list")
    lookup = doc["lookup"]
    if len(lookup) != levels:
        raise TableFormatError(f"{path}: expected {levels} levels, found {len(lookup)}")

    entries = []
    for b, entry in enumerate(lookup):
        if not isinstance(entry, list) or not all(is_integer(c) for c in entry):
            raise TableFormatError(f"{path}: level {b} is not a list of integers")
        entries.append(tuple(entry))

    threshold = doc.get("threshold")
    if threshold is not None and (isinstance(threshold, bool) or not isinstance(threshold, (int, float))):
        raise TableFormatError(f"{path}: threshold must be a number, got {threshold!r}")
    strategy = doc.get("strategy")
    if strategy is not None and not isinstance(strategy, str):
        raise TableFormatError(f"{path}: strategy must be a string, got {strategy!r}")
    return LookupTable(
        entries=tuple(entries),
        threshold=None if threshold is None else float(threshold),
        strategy=strategy,
    )


__all__ = [
    "IncompleteBuildError",
    "TableFormatError",
    "LookupTable",
    "TableWriter",
    "emit_table",
    "load_table",
]
