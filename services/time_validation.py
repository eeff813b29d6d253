"""
services/time_validation.py

Shared time-of-day handling for every submission form (OD request, meeting,
stayback). All comparisons are done on minutes since midnight.

- parse_time("09:30"), parse_time("9:30", "AM"), parse_time("9:30 PM")
- convert_to_24_hour("1:05", "PM") -> "13:05"
- convert_to_12_hour("13:05") -> "1:05 PM"
- validate_time_range(start, end, window) -> error message or None
"""

import re
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Optional, Union

from config.settings import settings

END_BEFORE_START_MESSAGE = "End time must be after start time"

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*(AM|PM)?\s*$", re.IGNORECASE)

TimeLike = Union[str, time]


def parse_time(value: TimeLike, modifier: Optional[str] = None) -> time:
    """
    Parse a form time value.

    Accepts "HH:MM" (24h), "h:mm" with a separate AM/PM modifier, or "h:mm AM".
    A modifier embedded in the string wins over the separate one.
    Raises ValueError for anything else.
    """
    if isinstance(value, time):
        return value
    if value is None:
        raise ValueError("time value is required")

    match = _TIME_RE.match(str(value))
    if not match:
        raise ValueError(f"invalid time value: {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    meridiem = (match.group(3) or modifier or "").upper() or None
    if meridiem not in (None, "AM", "PM"):
        raise ValueError(f"invalid AM/PM modifier: {modifier!r}")

    if meridiem is not None:
        if not 1 <= hours <= 12:
            raise ValueError(f"invalid 12-hour value: {value!r}")
        if meridiem == "PM" and hours < 12:
            hours += 12
        if meridiem == "AM" and hours == 12:
            hours = 0

    if hours > 23 or minutes > 59:
        raise ValueError(f"invalid time value: {value!r}")
    return time(hours, minutes)


def to_minutes(value: TimeLike, modifier: Optional[str] = None) -> int:
    t = parse_time(value, modifier)
    return t.hour * 60 + t.minute


def convert_to_24_hour(value: TimeLike, modifier: Optional[str] = None) -> str:
    if value in (None, ""):
        return ""
    t = parse_time(value, modifier)
    return f"{t.hour:02d}:{t.minute:02d}"


def convert_to_12_hour(value: TimeLike) -> str:
    if value in (None, ""):
        return ""
    t = parse_time(value)
    meridiem = "PM" if t.hour >= 12 else "AM"
    hour12 = t.hour % 12 or 12
    return f"{hour12}:{t.minute:02d} {meridiem}"


@dataclass(frozen=True)
class BusinessHours:
    """Working-hours window, inclusive on both ends."""

    start: time = time(8, 0)
    end: time = time(17, 0)

    @classmethod
    def from_settings(cls) -> "BusinessHours":
        return cls(parse_time(settings.BUSINESS_HOURS_START), parse_time(settings.BUSINESS_HOURS_END))

    @property
    def start_minutes(self) -> int:
        return self.start.hour * 60 + self.start.minute

    @property
    def end_minutes(self) -> int:
        return self.end.hour * 60 + self.end.minute

    def contains(self, minutes: int) -> bool:
        return self.start_minutes <= minutes <= self.end_minutes

    @property
    def message(self) -> str:
        return f"Please select times between {convert_to_12_hour(self.start)} and {convert_to_12_hour(self.end)}"


def is_outside_business_hours(value: TimeLike, modifier: Optional[str] = None,
                              window: Optional[BusinessHours] = None) -> bool:
    """Soft check used by the meeting form: before the window opens or at/after it closes."""
    window = window or BusinessHours.from_settings()
    minutes = to_minutes(value, modifier)
    return minutes < window.start_minutes or minutes >= window.end_minutes


def validate_time_range(start: TimeLike, end: TimeLike, window: Optional[BusinessHours] = None,
                        start_modifier: Optional[str] = None, end_modifier: Optional[str] = None,
                        enforce_window: bool = True) -> Optional[str]:
    """
    Return the first problem with a start/end pair, or None.

    Missing values are not an error here; the form checks presence itself.
    """
    if start in (None, "") or end in (None, ""):
        return None

    start_minutes = to_minutes(start, start_modifier)
    end_minutes = to_minutes(end, end_modifier)

    if start_minutes >= end_minutes:
        return END_BEFORE_START_MESSAGE

    if enforce_window:
        window = window or BusinessHours.from_settings()
        if not (window.contains(start_minutes) and window.contains(end_minutes)):
            return window.message
    return None


def to_naive_utc(value: datetime) -> datetime:
    # the store keeps naive UTC timestamps
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
