"""Shared pytest fixtures for the log retention test suite."""

import os
from datetime import datetime, timedelta, timezone

import pytest

from log_retention.config import Config


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 0, 30, tzinfo=timezone.utc))


@pytest.fixture()
def log_dir(tmp_path) -> str:
    path = tmp_path / "logs"
    path.mkdir()
    return str(path)


@pytest.fixture()
def make_config(log_dir):
    def _make(**overrides) -> Config:
        defaults = dict(log_dir=log_dir, max_bytes=0, retention_days=3)
        defaults.update(overrides)
        return Config(**defaults)
    return _make


def read_all(directory: str) -> dict[str, bytes]:
    """Map of file name -> contents for every regular file in *directory*."""
    contents = {}
    for name in os.listdir(directory):
        path = os.path.join(directory, name)
        if os.path.isfile(path):
            with open(path, "rb") as f:
                contents[name] = f.read()
    return contents
