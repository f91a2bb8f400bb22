"""Timezone resolution and the fixed start-time layout."""

from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timewarp.exceptions import InvalidLocationError, InvalidTimestampError

START_LAYOUT = "%Y-%m-%d %H:%M"

_START_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{1,2}:\d{2}")


def resolve_location(time_zone: str) -> tzinfo:
    """Resolve an IANA identifier. Empty and "UTC" give UTC, "Local" the host zone."""
    if time_zone in ("", "UTC"):
        return timezone.utc
    if time_zone == "Local":
        return datetime.now().astimezone().tzinfo
    try:
        return ZoneInfo(time_zone)
    except ZoneInfoNotFoundError as exc:
        raise InvalidLocationError(time_zone) from exc
    except ValueError as exc:
        # Malformed keys such as absolute paths or "..".
        raise InvalidLocationError(time_zone, str(exc)) from exc


def parse_start(start_date: str, start_time: str, location: tzinfo) -> datetime:
    """Parse ``"<date> <time>"`` as a wall-clock reading in ``location``."""
    value = f"{start_date} {start_time}"
    if not _START_RE.fullmatch(value):
        raise InvalidTimestampError(value)
    try:
        naive = datetime.strptime(value, START_LAYOUT)
    except ValueError as exc:
        raise InvalidTimestampError(value, str(exc)) from exc
    return naive.replace(tzinfo=location)
