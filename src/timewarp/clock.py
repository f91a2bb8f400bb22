"""Simulated clock running at a configurable multiple of real time."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable

from timewarp.config import ClockConfig
from timewarp.exceptions import ClockOverflowError, SimClockError
from timewarp.sync import HttpTimeSource, TimeSource
from timewarp.zones import parse_start, resolve_location

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current real instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _utc(dt: datetime) -> datetime:
    # Aware datetimes sharing a tzinfo subtract and add as wall-clock times,
    # so absolute arithmetic is done in UTC.
    return dt.astimezone(timezone.utc) if dt.tzinfo is not None else dt


_UTC_MAX = datetime.max.replace(tzinfo=timezone.utc)
_UTC_MIN = datetime.min.replace(tzinfo=timezone.utc)


def _sign(value: float) -> int:
    # NaN compares false both ways and yields 0
    return (value > 0) - (value < 0)


def _scale(delta: timedelta, multiplier: float) -> timedelta:
    try:
        return delta * multiplier
    except OverflowError as exc:
        raise ClockOverflowError(f"{delta} x {multiplier} exceeds the timedelta range") from exc
    except ValueError as exc:
        # timedelta * nan
        raise ClockOverflowError(f"{delta} x {multiplier} is not a duration") from exc


@dataclass(frozen=True)
class ClockState:
    """Consistent view of the anchor pair and multiplier."""

    real_anchor: datetime
    sim_anchor: datetime
    multiplier: float


class SimClock:
    """Maps real elapsed time onto a simulated timeline.

    Simulated time is extrapolated from the most recent anchor pair::

        now = sim_anchor + (real_now - real_anchor) * multiplier

    The anchors and multiplier are guarded by a single lock so readers never
    observe a half-applied update. Only ``synchronize`` blocks, and it does so
    outside the lock.
    """

    def __init__(
        self,
        start_date: str,
        start_time: str,
        time_zone: str = "UTC",
        multiplier: float = 1.0,
        *,
        real_time: Callable[[], datetime] | None = None,
        time_source: TimeSource | None = None,
        sync_url: str | None = None,
    ):
        self._location = resolve_location(time_zone)
        self._start = parse_start(start_date, start_time, self._location)
        self._real_time = real_time or utc_now
        self._time_source = time_source or HttpTimeSource()
        self.sync_url = sync_url

        self._lock = threading.Lock()
        # Both anchors are held in UTC.
        self._real_anchor = _utc(self._real_time())
        self._sim_anchor = _utc(self._start)
        self._multiplier = float(multiplier)
        logger.info(
            "SimClock started at %s (%s) with multiplier=%s",
            self._start.isoformat(),
            time_zone or "UTC",
            self._multiplier,
        )

    @classmethod
    def from_config(
        cls,
        config: ClockConfig,
        *,
        real_time: Callable[[], datetime] | None = None,
        time_source: TimeSource | None = None,
    ) -> "SimClock":
        """Build a clock from a ClockConfig."""
        return cls(
            config.start_date,
            config.start_time,
            config.time_zone,
            config.multiplier,
            real_time=real_time,
            time_source=time_source or HttpTimeSource(timeout=config.sync_timeout_s),
            sync_url=config.sync_url,
        )

    def _localize(self, dt: datetime) -> datetime:
        try:
            return dt.astimezone(self._location)
        except OverflowError as exc:
            raise ClockOverflowError(f"{dt.isoformat()} is out of range") from exc

    # Callers must hold self._lock.
    def _project(self, real_now: datetime) -> datetime:
        elapsed_sim = _scale(real_now - self._real_anchor, self._multiplier)
        try:
            return self._sim_anchor + elapsed_sim
        except OverflowError as exc:
            raise ClockOverflowError(
                f"{self._sim_anchor.isoformat()} + {elapsed_sim} is out of range"
            ) from exc

    # Callers must hold self._lock.
    def _reanchor(self, sim_anchor: datetime, real_now: datetime) -> None:
        self._sim_anchor = sim_anchor
        self._real_anchor = real_now

    # Callers must hold self._lock.
    def _fold(self, real_now: datetime) -> None:
        """Move both anchors to the present. Never raises.

        A projection outside datetime's range is clamped to datetime.max or
        datetime.min by the sign of the elapsed product. A NaN product keeps
        the current simulated anchor.
        """
        try:
            sim_anchor = self._project(real_now)
        except ClockOverflowError as exc:
            elapsed_real = (real_now - self._real_anchor) / timedelta(seconds=1)
            direction = _sign(elapsed_real) * _sign(self._multiplier)
            if direction > 0:
                sim_anchor = _UTC_MAX
            elif direction < 0:
                sim_anchor = _UTC_MIN
            else:
                sim_anchor = self._sim_anchor
            logger.warning("Clamping simulated time to %s: %s", sim_anchor.isoformat(), exc)
        self._reanchor(sim_anchor, real_now)

    @property
    def location(self) -> tzinfo:
        """Time zone every simulated value is reported in."""
        return self._location

    @property
    def start(self) -> datetime:
        """Simulated time the clock was constructed with."""
        return self._start

    @property
    def multiplier(self) -> float:
        with self._lock:
            return self._multiplier

    def now(self) -> datetime:
        """Current simulated time, expressed in the clock's location."""
        with self._lock:
            current = self._project(_utc(self._real_time()))
        return self._localize(current)

    def timestamp(self) -> float:
        """Current simulated time as POSIX seconds."""
        return self.now().timestamp()

    def elapsed(self) -> timedelta:
        """Simulated time elapsed since the construction-time start."""
        return _utc(self.now()) - _utc(self._start)

    def duration(self, from_: datetime, to: datetime) -> timedelta:
        """Simulated equivalent of the real interval ``from_`` -> ``to``."""
        with self._lock:
            multiplier = self._multiplier
        return _scale(_utc(to) - _utc(from_), multiplier)

    def snapshot(self) -> ClockState:
        """Anchors and multiplier as observed by a single lock acquisition."""
        with self._lock:
            real_anchor, sim_anchor, multiplier = (
                self._real_anchor,
                self._sim_anchor,
                self._multiplier,
            )
        return ClockState(real_anchor, self._localize(sim_anchor), multiplier)

    def set_multiplier(self, multiplier: float) -> None:
        """Change the rate of simulated time.

        The anchors move to the present first, so simulated time stays
        continuous and only its slope changes.
        """
        with self._lock:
            real_now = _utc(self._real_time())
            self._fold(real_now)
            old, self._multiplier = self._multiplier, float(multiplier)
        logger.debug("Multiplier changed %s -> %s", old, multiplier)

    def reset(self) -> None:
        """Re-anchor to the present without changing the current simulated time."""
        with self._lock:
            real_now = _utc(self._real_time())
            self._fold(real_now)
        logger.debug("SimClock re-anchored at %s", real_now.isoformat())

    def restart(self) -> None:
        """Jump back to the construction-time start, keeping the multiplier."""
        with self._lock:
            self._reanchor(_utc(self._start), _utc(self._real_time()))
        logger.debug("SimClock restarted at %s", self._start.isoformat())

    def synchronize(self, address: str | None = None) -> datetime:
        """Jump to the simulated time reported by ``address``.

        Raises FetchError, TimeFormatError or ParseError; on failure the clock
        is left exactly as it was.
        """
        address = address or self.sync_url
        if not address:
            raise ValueError("No synchronization address given and no sync_url configured")

        try:
            fetched = self._time_source.fetch(address)
        except SimClockError as exc:
            logger.warning("Synchronization with %s failed: %s", address, exc)
            raise

        with self._lock:
            self._reanchor(_utc(fetched), _utc(self._real_time()))
        sim_time = self._localize(fetched)
        logger.info("SimClock synchronized to %s from %s", sim_time.isoformat(), address)
        return sim_time
