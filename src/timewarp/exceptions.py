"""Exceptions raised by the simulated clock and its synchronization source."""


class SimClockError(Exception):
    """Base exception for all simulated clock errors."""


class InvalidLocationError(SimClockError):
    """Timezone identifier could not be resolved."""

    def __init__(self, time_zone: str, reason: str = "unknown time zone"):
        self.time_zone = time_zone
        self.reason = reason
        super().__init__(f"Invalid location {time_zone!r}: {reason}")


class InvalidTimestampError(SimClockError):
    """Start date/time did not match the ``YYYY-MM-DD HH:MM`` layout."""

    def __init__(self, value: str, reason: str = "expected 'YYYY-MM-DD HH:MM'"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid timestamp {value!r}: {reason}")


class SynchronizationError(SimClockError):
    """Base exception for failures while synchronizing against a remote source."""

    def __init__(self, address: str, message: str):
        self.address = address
        self.message = message
        super().__init__(f"[{address}] {message}")


class FetchError(SynchronizationError):
    """Transport failure or non-success response from the time source."""


class TimeFormatError(SynchronizationError):
    """Response body is not an object carrying a ``simulated_time`` string."""


class ParseError(SynchronizationError):
    """``simulated_time`` is not a valid RFC 3339 timestamp."""


class ClockOverflowError(SimClockError, OverflowError):
    """Scaled duration or resulting timestamp falls outside datetime's range."""
