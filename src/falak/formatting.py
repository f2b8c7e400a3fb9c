"""Display formatting for instants, dates and durations."""

import math
from datetime import date, datetime, timedelta

from pytz import timezone, utc

MINUTES_IN_DAY = 1440


def _twelve_hour(hour: int, minute: int) -> str:
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = (hour + 11) % 12 + 1
    return f"{display_hour}:{minute:02d} {suffix}"


def format_time(instant: datetime, time_zone: str) -> str:
    """Format an instant as local 12-hour time, e.g. "9:30 AM"."""
    if instant.tzinfo is None:
        instant = utc.localize(instant)
    local = instant.astimezone(timezone(time_zone))
    return _twelve_hour(local.hour, local.minute)


def format_date(day: date) -> str:
    """Format a date like "Monday, January 15, 2024"."""
    return f"{day.strftime('%A')}, {day.strftime('%B')} {day.day}, {day.year}"


def format_minutes_label(value: float) -> str:
    """Format minutes since midnight (wrapping past 1440) as 12-hour time."""
    if not math.isfinite(value):
        return ""
    normalized = round(value) % MINUTES_IN_DAY
    return _twelve_hour(normalized // 60, normalized % 60)


def format_coordinate(value: float, positive_label: str, negative_label: str) -> str:
    """Format a coordinate with its hemisphere, e.g. "43.6532° N"."""
    return f"{abs(value):.4f}° {positive_label if value >= 0 else negative_label}"


def format_time_remaining(remaining: timedelta) -> str:
    """Format a duration as "Xh Ym Zs"."""
    total = max(int(remaining.total_seconds()), 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}h {minutes}m {seconds}s"
