"""Tests for bryt.dispatch — the bounded worker pool over brightness levels."""

import threading
import time
from concurrent.futures import Future

import pytest

from bryt import dispatch
from bryt.bucket_cache import BucketCache
from bryt.candidates import CandidateIndex
from bryt.core_types import BucketResult
from bryt.dedupe import dedupe_bucket
from bryt.dispatch import (
    BucketProcessingError,
    default_workers,
    dispatch_levels,
    iter_level_results,
    level_task,
    process_level,
)


def _fake_task(level):
    return BucketResult(brightness=level, colors=(level,), count=level + 1)


class _ManualPool:
    """Executor stand-in: level 0 completes at submit time, every other level stays pending."""

    def __init__(self, first):
        self.first = first
        self.futures = {}

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None

    def submit(self, fn, level):
        fut = Future()
        if level == 0:
            self.first(fut)
        self.futures[level] = fut
        return fut


class _ConcurrencyProbe:
    def __init__(self):
        self.lock = threading.Lock()
        self.active = 0
        self.peak = 0

    def __call__(self, level):
        with self.lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(0.005)
        with self.lock:
            self.active -= 1
        return _fake_task(level)


class TestIterLevelResults:
    def test_every_level_exactly_once(self, thread_pool):
        seen = [r.brightness for _slot, r in iter_level_results(range(20), _fake_task, workers=3, pool_factory=thread_pool)]
        assert sorted(seen) == list(range(20))

    def test_slots_within_worker_count(self, thread_pool):
        slots = {slot for slot, _ in iter_level_results(range(30), _fake_task, workers=4, pool_factory=thread_pool)}
        assert slots <= {0, 1, 2, 3}

    def test_bounded_in_flight(self, thread_pool):
        probe = _ConcurrencyProbe()
        list(iter_level_results(range(40), probe, workers=3, pool_factory=thread_pool))
        assert 1 <= probe.peak <= 3

    def test_fewer_levels_than_workers(self, thread_pool):
        results = list(iter_level_results([9], _fake_task, workers=8, pool_factory=thread_pool))
        assert [(slot, r.brightness) for slot, r in results] == [(0, 9)]

    def test_empty(self, thread_pool):
        assert list(iter_level_results([], _fake_task, workers=2, pool_factory=thread_pool)) == []

    def test_failure_surfaces_with_cause(self, thread_pool):
        def task(level):
            if level == 5:
                raise ValueError("boom")
            return _fake_task(level)

        with pytest.raises(BucketProcessingError) as info:
            list(iter_level_results(range(10), task, workers=2, pool_factory=thread_pool))
        assert info.value.brightness == 5
        assert isinstance(info.value.__cause__, ValueError)
        assert "ValueError: boom" in str(info.value)

    def test_mismatched_result_is_an_error(self, thread_pool):
        def task(level):
            return BucketResult(brightness=level + 1, colors=(), count=0)

        with pytest.raises(BucketProcessingError, match="returned brightness"):
            list(iter_level_results([1], task, workers=1, pool_factory=thread_pool))

    @pytest.mark.parametrize(
        "finish",
        [
            lambda fut: fut.set_exception(ValueError("boom")),
            lambda fut: fut.set_result(BucketResult(brightness=99, colors=(), count=0)),
        ],
        ids=["worker-exception", "wrong-brightness"],
    )
    def test_failure_cancels_pending_levels(self, finish):
        pool = _ManualPool(finish)
        with pytest.raises(BucketProcessingError) as info:
            list(iter_level_results([0, 1, 2], _fake_task, workers=3, pool_factory=lambda n: pool))
        assert info.value.brightness == 0
        assert pool.futures[1].cancelled()
        assert pool.futures[2].cancelled()

    def test_rejects_bad_arguments(self, thread_pool):
        with pytest.raises(ValueError, match="workers"):
            list(iter_level_results([1], _fake_task, workers=0, pool_factory=thread_pool))
        with pytest.raises(ValueError, match="duplicate"):
            list(iter_level_results([1, 1], _fake_task, workers=1, pool_factory=thread_pool))


class TestDispatchLevels:
    def test_keyed_by_brightness(self, thread_pool):
        results = dispatch_levels(range(10), _fake_task, workers=2, pool_factory=thread_pool)
        assert sorted(results) == list(range(10))
        assert results[7].colors == (7,)

    def test_process_pool(self, tmp_path, small_universe):
        cache = BucketCache(tmp_path)
        index = CandidateIndex(small_universe)
        for level in (10, 20, 30, 40):
            cache.save(index.bucket(level))
        results = dispatch_levels([10, 20, 30, 40], level_task(tmp_path), workers=2)
        for level, result in results.items():
            assert result.colors == dedupe_bucket(index.bucket(level)).colors


class TestProcessLevel:
    def test_matches_direct_dedupe(self, tmp_path, small_universe):
        bucket = CandidateIndex(small_universe).bucket(77)
        BucketCache(tmp_path).save(bucket)
        result = process_level(tmp_path, 77, threshold=5.0, strategy="legacy")
        expected = dedupe_bucket(bucket, 5.0, "legacy")
        assert result.colors == expected.colors
        assert result.count == expected.count
        assert result.seconds >= 0.0

    def test_missing_cache_entry(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            process_level(tmp_path, 3)


class TestDefaultWorkers:
    @pytest.mark.parametrize("cpus, expected", [(8, 4), (3, 1), (1, 1), (None, 1)])
    def test_half_the_cpus(self, monkeypatch, cpus, expected):
        monkeypatch.setattr(dispatch.os, "cpu_count", lambda: cpus)
        assert default_workers() == expected
