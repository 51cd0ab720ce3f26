# advisor_booking/core/time_window.py
"""
Clock and time-window utilities.

Everything here is pure: no database, no settings. Services take a
``Clock`` so reminder due-ness can be tested against a fixed "now".
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import threading
from typing import Dict, Optional, Protocol, Tuple

import pytz

from .enums import EmailType


class Clock(Protocol):
    def now(self) -> datetime:
        """Return the current instant as an aware UTC datetime."""
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Manually driven clock for tests."""

    def __init__(self, start: datetime):
        self._now = ensure_utc(start)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, instant: datetime) -> None:
        with self._lock:
            self._now = ensure_utc(instant)

    def advance(self, delta: timedelta) -> datetime:
        with self._lock:
            self._now = self._now + delta
            return self._now


@dataclass(frozen=True)
class TimeWindow:
    """
    A window expressed as offsets from "now".

    Both ends are inclusive: an instant exactly at ``now + end_offset`` is
    still inside the window.
    """

    start_offset: timedelta
    end_offset: timedelta

    def __post_init__(self) -> None:
        if self.end_offset < self.start_offset:
            raise ValueError("end_offset must not precede start_offset")

    def bounds(self, now: datetime) -> Tuple[datetime, datetime]:
        now = ensure_utc(now)
        return now + self.start_offset, now + self.end_offset

    def contains(self, instant: datetime, now: datetime) -> bool:
        start, end = self.bounds(now)
        return start <= ensure_utc(instant) <= end


# The ±1h (24h) and ±5min (1h) slack assumes the default 5-minute poll interval.
REMINDER_24H_WINDOW = TimeWindow(timedelta(hours=23), timedelta(hours=25))
REMINDER_1H_WINDOW = TimeWindow(timedelta(minutes=55), timedelta(minutes=65))

REMINDER_WINDOWS: Dict[EmailType, TimeWindow] = {
    EmailType.REMINDER_24H: REMINDER_24H_WINDOW,
    EmailType.REMINDER_1H: REMINDER_1H_WINDOW,
}


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime; naive values are assumed to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing ``Z``, an explicit offset, or no offset at all
    (interpreted as UTC).

    Raises:
        ValueError: if the value is not a valid ISO timestamp
    """
    text = (value or "").strip()
    if not text:
        raise ValueError("empty datetime value")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def is_valid_timezone(name: Optional[str]) -> bool:
    return bool(name) and name in pytz.all_timezones_set


def to_timezone(dt: datetime, tz_name: str) -> datetime:
    """Render an instant in an IANA timezone, falling back to UTC for unknown names."""
    tz = pytz.timezone(tz_name) if is_valid_timezone(tz_name) else pytz.UTC
    return ensure_utc(dt).astimezone(tz)


def localize(naive: datetime, tz_name: str) -> datetime:
    """Attach an IANA timezone to a naive wall-clock datetime and convert to UTC."""
    tz = pytz.timezone(tz_name) if is_valid_timezone(tz_name) else pytz.UTC
    return tz.localize(naive).astimezone(timezone.utc)
