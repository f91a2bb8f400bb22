"""Simulated clock: real elapsed time scaled onto an independent timeline."""

from timewarp.clock import ClockState, SimClock, utc_now
from timewarp.config import ClockConfig
from timewarp.exceptions import (
    ClockOverflowError,
    FetchError,
    InvalidLocationError,
    InvalidTimestampError,
    ParseError,
    SimClockError,
    SynchronizationError,
    TimeFormatError,
)
from timewarp.sync import HttpTimeSource, SyncPayload, TimeSource, parse_rfc3339

__all__ = [
    "ClockConfig",
    "ClockOverflowError",
    "ClockState",
    "FetchError",
    "HttpTimeSource",
    "InvalidLocationError",
    "InvalidTimestampError",
    "ParseError",
    "SimClock",
    "SimClockError",
    "SyncPayload",
    "SynchronizationError",
    "TimeFormatError",
    "TimeSource",
    "parse_rfc3339",
    "utc_now",
]
