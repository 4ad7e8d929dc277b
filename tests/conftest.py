import os
from pathlib import Path

import pytest

from diskstash.core.cache_engine import CacheEngine
from diskstash.infrastructure.cache.directory import CacheDirectory
from diskstash.infrastructure.config import settings
from diskstash.infrastructure.config.settings import clear_test_config


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Cache root that does not exist yet; the engine creates it."""
    return tmp_path / "CacheDirectory"


@pytest.fixture
def directory(cache_root: Path) -> CacheDirectory:
    d = CacheDirectory(cache_root)
    d.ensure_exists()
    return d


@pytest.fixture
def cache(cache_root: Path, clock: FakeClock) -> CacheEngine:
    """Engine on a fresh directory, driven by the fake clock."""
    return CacheEngine(CacheDirectory(cache_root), clock=clock)


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch):
    """Keeps user config and DISKSTASH_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("DISKSTASH_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr(settings, "_config", {})
    clear_test_config()
    yield
    clear_test_config()
