"""Schedule aggregation — daily, monthly and yearly timetables.

Each day is computed independently; ``map_days`` lets the caller fan the
work out (for example ``ThreadPoolExecutor().map``).
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Iterator, Mapping

from pytz import utc

from falak.cache import ComputationCache, cache_key
from falak.compute import compute_day, current_event, next_event
from falak.julian import as_utc
from falak.models import (
    CalculationParameters,
    DaySchedule,
    EventKind,
    GeoCoordinates,
    Schedule,
)

DayMapper = Callable[[Callable[[date], DaySchedule], Iterable[date]], Iterable[DaySchedule]]


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    day = start
    one = timedelta(days=1)
    while day <= end:
        yield day
        day += one


def daily(
    labels: Mapping[EventKind, str] | None,
    coordinates: GeoCoordinates,
    params: CalculationParameters,
    day: date,
    now: datetime | None = None,
    cache: ComputationCache | None = None,
) -> DaySchedule:
    """Build one civil day's schedule.

    Args:
        labels: Display names per event (English transliterations if None).
        coordinates: Observer position.
        params: Calculation parameters, including the IANA time zone.
        day: Civil date in ``params.time_zone``.
        now: Reference instant for ``current_event``; the current time if None.
            Naive values are taken as UTC.
        cache: Optional caller-owned cache of computed events.

    Returns:
        DaySchedule with strictly increasing events.
    """
    now = datetime.now(utc) if now is None else as_utc(now)

    def build() -> tuple:
        return compute_day(coordinates, day, params, labels)

    if cache is None:
        events, next_fajr = build()
    else:
        events, next_fajr = cache.get_or_compute(
            cache_key(coordinates, day, params, labels), build
        )

    upcoming = next_event(events, now)
    return DaySchedule(
        date=day,
        time_zone=params.time_zone,
        events=events,
        next_fajr=next_fajr,
        current_event=current_event(events, now),
        next_event_time=None if upcoming is None else upcoming.instant,
    )


def _collect(
    labels: Mapping[EventKind, str] | None,
    coordinates: GeoCoordinates,
    params: CalculationParameters,
    days: Iterable[date],
    now: datetime | None,
    map_days: DayMapper,
) -> tuple[DaySchedule, ...]:
    if now is None:
        now = datetime.now(utc)
    return tuple(map_days(lambda d: daily(labels, coordinates, params, d, now), days))


def monthly(
    labels: Mapping[EventKind, str] | None,
    coordinates: GeoCoordinates,
    params: CalculationParameters,
    anchor_date: date,
    now: datetime | None = None,
    map_days: DayMapper = map,
) -> Schedule:
    """Every day of ``anchor_date``'s month, labelled "March 2024"."""
    year, month = anchor_date.year, anchor_date.month
    last_day = calendar.monthrange(year, month)[1]
    days = date_range(date(year, month, 1), date(year, month, last_day))
    return Schedule(
        label=f"{calendar.month_name[month]} {year}",
        dates=_collect(labels, coordinates, params, days, now, map_days),
    )


def yearly(
    labels: Mapping[EventKind, str] | None,
    coordinates: GeoCoordinates,
    params: CalculationParameters,
    anchor_date: date,
    now: datetime | None = None,
    map_days: DayMapper = map,
) -> Schedule:
    """Every day of ``anchor_date``'s year (365 or 366), labelled by the year number."""
    year = anchor_date.year
    days = date_range(date(year, 1, 1), date(year, 12, 31))
    return Schedule(
        label=year,
        dates=_collect(labels, coordinates, params, days, now, map_days),
    )
