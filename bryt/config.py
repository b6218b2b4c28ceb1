# bryt/config.py
from __future__ import annotations

"""
Build configuration.

Values come from CLI flags first, then environment variables
(BRYT_CACHE_DIR, BRYT_THRESHOLD, BRYT_WORKERS), then defaults.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from .constants import (
    DEFAULT_CACHE_DIRNAME,
    DEFAULT_OUTPUT_NAME,
    DEFAULT_STRATEGY,
    DEFAULT_THRESHOLD,
    ENV_CACHE_DIR,
    ENV_THRESHOLD,
    ENV_WORKERS,
    STRATEGIES,
)
from .dispatch import default_workers


@dataclass(frozen=True)
class BuildConfig:
    """Settings for one lookup table build."""

    threshold: float = DEFAULT_THRESHOLD
    strategy: str = DEFAULT_STRATEGY
    cache_dir: Path = field(default_factory=lambda: Path(DEFAULT_CACHE_DIRNAME))
    output: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_NAME))
    workers: int = field(default_factory=default_workers)
    clear_cache: bool = False
    debug: bool = False

    def validate(self) -> "BuildConfig":
        """Raise ValueError on unusable settings; returns self for chaining."""
        if not self.threshold > 0:
            raise ValueError(f"threshold must be positive, got {self.threshold}")
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"unknown strategy {self.strategy!r} (expected one of {', '.join(STRATEGIES)})"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        return self

    def with_overrides(self, **changes: Any) -> "BuildConfig":
        return replace(self, **changes)

    def summary_pairs(self) -> List[Tuple[str, Any]]:
        return [
            ("Workers", self.workers),
            ("Threshold", self.threshold),
            ("Strategy", self.strategy),
            ("Cache", str(self.cache_dir)),
            ("Output", str(self.output)),
        ]

    @classmethod
    def from_sources(
        cls,
        *,
        threshold: Optional[float] = None,
        strategy: Optional[str] = None,
        cache_dir: Optional[Path] = None,
        output: Optional[Path] = None,
        workers: Optional[int] = None,
        clear_cache: bool = False,
        debug: bool = False,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "BuildConfig":
        """Merge explicit values over environment values over defaults."""
        env = os.environ if environ is None else environ
        if threshold is None and env.get(ENV_THRESHOLD):
            threshold = _parse_env(ENV_THRESHOLD, env[ENV_THRESHOLD], float)
        if workers is None and env.get(ENV_WORKERS):
            workers = _parse_env(ENV_WORKERS, env[ENV_WORKERS], int)
        if cache_dir is None and env.get(ENV_CACHE_DIR):
            cache_dir = Path(env[ENV_CACHE_DIR])

        base = cls()
        return cls(
            threshold=base.threshold if threshold is None else float(threshold),
            strategy=base.strategy if strategy is None else strategy,
            cache_dir=base.cache_dir if cache_dir is None else Path(cache_dir),
            output=base.output if output is None else Path(output),
            workers=base.workers if workers is None else int(workers),
            clear_cache=clear_cache,
            debug=debug,
        ).validate()


def _parse_env(name: str, raw: str, kind: type) -> Any:
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name}={raw!r} is not a valid {kind.__name__}") from None


__all__ = ["BuildConfig"]
