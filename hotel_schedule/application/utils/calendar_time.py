from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone as dt_timezone, tzinfo

from hotel_schedule.application.exceptions import ParseError

CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")
US_DATE_PATTERN = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s*$")

UTC = dt_timezone.utc


def parse_clock(text: str | None) -> tuple[int, int]:
    """Parse a 24-hour "HH:MM" string. Returns (hour, minute)."""
    if not text or not isinstance(text, str):
        raise ParseError("missing time of day")

    match = CLOCK_PATTERN.match(text)
    if not match:
        raise ParseError(f"not an HH:MM time: {text!r}")

    hour = int(match.group(1))
    minute = int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ParseError(f"time out of range: {text!r}")
    return (hour, minute)


def minute_of_day(text: str | None) -> int:
    hour, minute = parse_clock(text)
    return hour * 60 + minute


def display_hour_label(hour: int) -> str:
    """
    Hour bucket label on a 12-hour clock, e.g. 14 -> "02:00 pm".

    Hours above 12 are shifted down; 0 stays 0, so midnight reads "00:00 am".
    """
    period = "am" if hour < 12 else "pm"
    display = hour - 12 if hour > 12 else hour
    return f"{display:02d}:00 {period}"


def label_sort_key(label: str) -> int:
    """24-hour value of a bucket label, used for clock ordering."""
    hour = int(label[:2])
    if label.endswith("pm") and hour != 12:
        hour += 12
    return hour


def parse_calendar_date(value: str | None, timezone: tzinfo = UTC) -> date:
    """
    Parse a booking date field to a local calendar date.

    Accepts "YYYY-MM-DD", "MM/DD/YYYY" and ISO datetimes. Aware datetimes
    are converted to `timezone` before the date is taken.
    """
    if not value or not isinstance(value, str):
        raise ParseError("missing date")

    text = value.strip()
    us_match = US_DATE_PATTERN.match(text)
    if us_match:
        try:
            return date(int(us_match.group(3)), int(us_match.group(1)), int(us_match.group(2)))
        except ValueError as e:
            raise ParseError(f"invalid date: {value!r}") from e

    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as e:
        raise ParseError(f"invalid date: {value!r}") from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone)
    return parsed.date()


def day_strip(center: date, radius: int = 3) -> list[date]:
    """Days shown in the selector, centered on `center`."""
    return [center + timedelta(days=offset) for offset in range(-radius, radius + 1)]


def shift_day(day: date, days: int) -> date:
    return day + timedelta(days=days)
