"""Julian Day conversion — the common substrate for the solar model and the Hijri calendar."""

import math
from datetime import MAXYEAR, MINYEAR, date, datetime

from pytz import utc

J2000 = 2451545.0  # JD of 2000-01-01 12:00 TT
DAYS_PER_CENTURY = 36525.0


def _check_year(year: int) -> None:
    if not MINYEAR <= year <= MAXYEAR:
        raise ValueError(f"year must be within [{MINYEAR}, {MAXYEAR}], got {year}")


def to_julian_day(year: int, month: int, day: int, fraction_of_day: float = 0.0) -> float:
    """Convert a (proleptic) Gregorian civil date and time of day to a Julian Day.

    Args:
        year: Gregorian year.
        month: 1..12.
        day: Day of month.
        fraction_of_day: Time of day as a fraction (0.5 = noon UTC).

    Returns:
        Continuous Julian Day value.
    """
    _check_year(year)
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    return (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day
        + fraction_of_day
        + b
        - 1524.5
    )


def from_julian_day(jd: float) -> tuple[int, int, int, float]:
    """Inverse of :func:`to_julian_day`, proleptic Gregorian for every era.

    Returns:
        (year, month, day, fraction_of_day).
    """
    z = math.floor(jd + 0.5)
    f = jd + 0.5 - z
    alpha = math.floor((z - 1867216.25) / 36524.25)
    a = z + 1 + alpha - math.floor(alpha / 4)
    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)

    day = b - d - math.floor(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715
    _check_year(year)
    return year, month, day, f


def julian_day_number(civil_date: date) -> int:
    """Integer Julian Day Number of a civil date (the JD at that day's noon)."""
    return int(to_julian_day(civil_date.year, civil_date.month, civil_date.day, 0.5))


def as_utc(instant: datetime) -> datetime:
    """Aware UTC copy of ``instant``. Naive datetimes are taken as UTC."""
    if instant.tzinfo is None:
        return utc.localize(instant)
    return instant.astimezone(utc)


def instant_to_julian_day(instant: datetime) -> float:
    """Julian Day of an aware datetime. Naive datetimes are taken as UTC."""
    instant = as_utc(instant)
    seconds = (
        instant.hour * 3600
        + instant.minute * 60
        + instant.second
        + instant.microsecond / 1_000_000
    )
    return to_julian_day(instant.year, instant.month, instant.day, seconds / 86400.0)


def julian_century(jd: float) -> float:
    """Julian centuries since J2000.0."""
    return (jd - J2000) / DAYS_PER_CENTURY
