"""Pytest configuration: make timewarp importable and provide a controllable real clock."""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add src/ to sys.path so `import timewarp` works without installing.
_src_dir = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "src",
)
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)


class FakeRealTime:
    """Stand-in for the wall clock: returns a fixed instant until advanced."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def real_time():
    return FakeRealTime()


@pytest.fixture
def make_clock(real_time):
    """Factory for clocks driven by the shared fake real-time source."""
    from timewarp import SimClock

    def _make(
        start_date="2024-01-01",
        start_time="00:00",
        time_zone="UTC",
        multiplier=1.0,
        **kwargs,
    ):
        return SimClock(
            start_date, start_time, time_zone, multiplier, real_time=real_time, **kwargs
        )

    return _make
