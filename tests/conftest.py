"""Shared fixtures for the bryt test suite."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from bryt.constants import BRIGHTNESS_LEVELS
from bryt.core_types import pack_rgb
from bryt.table import LookupTable


@pytest.fixture
def tiny_table() -> LookupTable:
    """Grey b at every level b, plus pure blue-ish extras on every third level."""
    entries = []
    for b in range(BRIGHTNESS_LEVELS):
        colors = [pack_rgb(b, b, b)]
        if b % 3 == 0:
            colors.append(pack_rgb(0, 0, 255))
        entries.append(tuple(colors))
    return LookupTable(entries=tuple(entries), threshold=5.0, strategy="greedy")


@pytest.fixture
def thread_pool():
    """Pool factory running tasks on threads instead of processes."""
    return lambda workers: ThreadPoolExecutor(max_workers=workers)


@pytest.fixture
def small_universe() -> np.ndarray:
    """About 4k colours spread over the whole RGB cube."""
    return np.arange(0, 1 << 24, 4099, dtype=np.uint32)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
