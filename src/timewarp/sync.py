"""Remote time sources used to resynchronize a SimClock.

The clock only depends on the ``TimeSource`` protocol: something that, given an
address, returns the authoritative simulated time. ``HttpTimeSource`` is the
default implementation and expects a JSON object such as::

    {"simulated_time": "2024-06-01T12:30:00Z"}

Any other fields in the body are ignored.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from timewarp.exceptions import FetchError, ParseError, TimeFormatError

logger = logging.getLogger(__name__)

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))"
)


class TimeSource(Protocol):
    """Anything that can report the authoritative simulated time."""

    def fetch(self, address: str) -> datetime: ...


class SyncPayload(BaseModel):
    """Body returned by a time authority."""

    model_config = ConfigDict(extra="ignore")

    simulated_time: StrictStr


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime.

    Seconds and a zone designator are mandatory. Fractions beyond microsecond
    precision are truncated. Raises ValueError on anything else.
    """
    m = _RFC3339_RE.fullmatch(value)
    if m is None:
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    year, month, day, hour, minute, second = (int(g) for g in m.group(1, 2, 3, 4, 5, 6))
    fraction = m.group(7) or ""
    micros = int((fraction + "000000")[:6])
    if m.group(8):
        tz = timezone.utc
    else:
        offset_h, offset_m = int(m.group(10)), int(m.group(11))
        if offset_h > 23 or offset_m > 59:
            raise ValueError(f"zone offset out of range: {value!r}")
        offset = timedelta(hours=offset_h, minutes=offset_m)
        tz = timezone(-offset if m.group(9) == "-" else offset)
    return datetime(year, month, day, hour, minute, second, micros, tzinfo=tz)


class HttpTimeSource:
    """Fetch ``simulated_time`` from a JSON endpoint over HTTP.

    A caller-supplied ``httpx.Client`` is reused and left open; otherwise a
    short-lived client with ``timeout`` seconds is created for each fetch.
    """

    def __init__(self, client: httpx.Client | None = None, timeout: float = 5.0):
        self._client = client
        self.timeout = timeout

    def _get(self, address: str) -> httpx.Response:
        if self._client is not None:
            resp = self._client.get(address)
            resp.raise_for_status()
            return resp
        with httpx.Client(timeout=self.timeout) as client:
            resp = client.get(address)
            resp.raise_for_status()
            return resp

    def fetch(self, address: str) -> datetime:
        """GET ``address`` and return the simulated time it reports."""
        try:
            resp = self._get(address)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(address, str(exc)) from exc

        try:
            payload = SyncPayload.model_validate_json(resp.content)
        except ValidationError as exc:
            raise TimeFormatError(address, f"unexpected body: {exc.errors()[0]['msg']}") from exc

        try:
            sim_time = parse_rfc3339(payload.simulated_time)
        except ValueError as exc:
            raise ParseError(address, str(exc)) from exc

        logger.debug("Fetched simulated time %s from %s", sim_time.isoformat(), address)
        return sim_time
