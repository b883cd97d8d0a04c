# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Pytest configuration and shared fixtures for CompositeClock tests.
"""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from compositeclock.time_state import from_datetime


class FakeWallClock:
    """Wall clock that only moves when told to."""

    def __init__(self, now: int):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_timestamp(hour=13, minute=5, second=0, millisecond=0, day=6):
    """Local timestamp on 2025-01-<day> at the given time."""
    return from_datetime(datetime(2025, 1, day, hour, minute, second, millisecond * 1000))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store():
    """A fresh store, disposed after the test."""
    from compositeclock.store import Store
    store = Store()
    yield store
    store.dispose()


@pytest.fixture
def wall_clock():
    """Fake wall clock reading 2025-01-06 09:00:00."""
    return FakeWallClock(make_timestamp(9, 0, 0))


@pytest.fixture
def clock(wall_clock):
    """Clock set to 2025-01-06 13:05:00 with a fake wall clock."""
    from compositeclock.controller import CompositeClock
    clock = CompositeClock(timestamp=make_timestamp(13, 5, 0), wall_clock=wall_clock)
    yield clock
    clock.dispose()


@pytest.fixture
def sample_config_dict():
    """Return a minimal valid config dictionary."""
    return {
        "clock": {
            "tick_interval_ms": 100,
            "start_time": None,
            "start_timestamp": None
        },
        "display": {
            "show_angles": False,
            "angle_units": "degrees"
        },
        "logging": {
            "level": "INFO",
            "directory": None
        }
    }


@pytest.fixture
def sample_config_yaml(temp_dir, sample_config_dict):
    """Create a temporary config.yaml file."""
    import yaml
    config_path = temp_dir / "config.yaml"
    with open(config_path, 'w') as f:
        yaml.dump(sample_config_dict, f)
    return config_path
