"""Tests for bryt.config — defaults, validation and environment overrides."""

from pathlib import Path

import pytest

from bryt.config import BuildConfig


class TestBuildConfig:
    def test_defaults(self):
        config = BuildConfig()
        assert config.threshold == 5.0
        assert config.strategy == "greedy"
        assert config.cache_dir == Path(".cache")
        assert config.output == Path("lookup.json")
        assert config.workers >= 1
        assert config.validate() is config

    @pytest.mark.parametrize(
        "changes, match",
        [
            ({"threshold": 0.0}, "threshold"),
            ({"threshold": -2.0}, "threshold"),
            ({"strategy": "fast"}, "unknown strategy"),
            ({"workers": 0}, "workers"),
        ],
    )
    def test_validate(self, changes, match):
        with pytest.raises(ValueError, match=match):
            BuildConfig().with_overrides(**changes).validate()

    def test_summary_pairs(self):
        pairs = dict(BuildConfig(workers=3).summary_pairs())
        assert pairs["Workers"] == 3
        assert pairs["Strategy"] == "greedy"


class TestFromSources:
    def test_environment_fallback(self):
        config = BuildConfig.from_sources(
            environ={"BRYT_THRESHOLD": "2.5", "BRYT_WORKERS": "3", "BRYT_CACHE_DIR": "/tmp/bryt-cache"}
        )
        assert config.threshold == 2.5
        assert config.workers == 3
        assert config.cache_dir == Path("/tmp/bryt-cache")

    def test_explicit_wins(self):
        config = BuildConfig.from_sources(
            threshold=8, workers=1, cache_dir=Path("c"), environ={"BRYT_THRESHOLD": "2.5", "BRYT_WORKERS": "3"}
        )
        assert config.threshold == 8.0
        assert config.workers == 1
        assert config.cache_dir == Path("c")

    def test_empty_environment_values_ignored(self):
        config = BuildConfig.from_sources(environ={"BRYT_THRESHOLD": ""})
        assert config.threshold == 5.0

    @pytest.mark.parametrize("name, raw", [("BRYT_THRESHOLD", "lots"), ("BRYT_WORKERS", "2.5")])
    def test_bad_environment_value(self, name, raw):
        with pytest.raises(ValueError, match=name):
            BuildConfig.from_sources(environ={name: raw})

    def test_validates(self):
        with pytest.raises(ValueError):
            BuildConfig.from_sources(threshold=0, environ={})
