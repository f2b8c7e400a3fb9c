"""Prayer time computation layer — turns coordinates, a civil date and parameters into events.

All instants are computed in UTC and only formatted in the parameters' time
zone. A civil date is solved around the UTC calendar day whose mean solar
transit lies nearest local noon of that date, so zones far from their
longitude's mean time (Samoa, Kiribati) still get the events of their own day.
"""

import calendar
import logging
import math
from datetime import date, datetime, timedelta
from typing import Callable, Mapping, NamedTuple

from pytz import timezone, utc

from falak.formatting import format_time
from falak.i18n import event_labels
from falak.julian import as_utc, to_julian_day
from falak.models import (
    CalculationParameters,
    EventKind,
    GeoCoordinates,
    HighLatitudeRule,
    PrayerEvent,
    Shafaq,
)
from falak.solar import hour_angle_for_altitude, solar_coordinates

log = logging.getLogger(__name__)

SUNRISE_ALTITUDE = -50.0 / 60.0  # Refraction (34') plus solar semi-diameter (16')
LATITUDE_STEP = 0.5  # Degrees per step of the nearest-latitude search
SEASONAL_LATITUDE_LIMIT = 55.0  # Above this the seasonal curves give way to 1/7 of the night
ORDER_NUDGE = timedelta(minutes=1)

EVENT_ORDER: tuple[EventKind, ...] = tuple(EventKind)
# Night events still running before Fajr, carried over from the previous evening
_CARRIED_OVER = (EventKind.ISHA, EventKind.MIDNIGHT, EventKind.LAST_THIRD_NIGHT)


class _SolarDay(NamedTuple):
    """Raw (unadjusted) solar events of one civil day, as UTC datetimes."""

    transit: datetime
    sunrise: datetime
    sunset: datetime
    fajr: datetime | None  # None when the sun never reaches the Fajr depression
    isha: datetime | None
    asr: datetime | None
    latitude: float  # Latitude the events were solved at


def _utc_midnight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=utc)


def solar_base_date(coordinates: GeoCoordinates, day: date, time_zone: str) -> date:
    """UTC calendar day whose mean transit is nearest local noon of ``day``."""
    local_noon = timezone(time_zone).localize(datetime(day.year, day.month, day.day, 12))
    mean_transit = timedelta(hours=12.0 - coordinates.longitude / 15.0)
    return (local_noon.astimezone(utc) - mean_transit + timedelta(hours=12)).date()


def _transit_hours(base_jd: float, longitude: float) -> float:
    """Hours after 00:00 UTC of the sun's meridian transit."""
    hours = 12.0 - longitude / 15.0
    for _ in range(2):
        sun = solar_coordinates(base_jd + hours / 24.0)
        hours = 12.0 - longitude / 15.0 - sun.equation_of_time_minutes / 60.0
    return hours


def _time_for_altitude(
    base_jd: float,
    longitude: float,
    latitude: float,
    altitude_at: Callable[[float], float | None],
    after_transit: bool,
) -> float | None:
    """Hours after 00:00 UTC at which the sun reaches an altitude.

    ``altitude_at`` maps the declination to the target altitude, so the Asr
    threshold can follow the sun. The estimate is refined with the solar
    coordinates at the event's own time.
    """
    hours = 12.0 - longitude / 15.0
    for _ in range(3):
        sun = solar_coordinates(base_jd + hours / 24.0)
        altitude = altitude_at(sun.declination)
        if altitude is None:
            return None
        hour_angle = hour_angle_for_altitude(latitude, sun.declination, altitude)
        if hour_angle is None:
            return None
        noon = 12.0 - longitude / 15.0 - sun.equation_of_time_minutes / 60.0
        hours = noon + hour_angle / 15.0 if after_transit else noon - hour_angle / 15.0
    return hours


def asr_altitude(latitude: float, declination: float, shadow_length: int) -> float | None:
    """Altitude at which an object's shadow is ``shadow_length`` plus its noon shadow."""
    noon_zenith = abs(latitude - declination)
    if noon_zenith >= 90.0:
        return None
    threshold = shadow_length + math.tan(math.radians(noon_zenith))
    return math.degrees(math.atan(1.0 / threshold))


def _solar_day(
    coordinates: GeoCoordinates, day: date, params: CalculationParameters
) -> _SolarDay:
    """Solve the solar events of UTC calendar day ``day``.

    Moves toward the equator during polar day/night.
    """
    base_jd = to_julian_day(day.year, day.month, day.day)
    longitude = coordinates.longitude
    latitude = coordinates.latitude

    def solve(altitude: float, after: bool) -> float | None:
        return _time_for_altitude(base_jd, longitude, latitude, lambda _: altitude, after)

    sunrise = solve(SUNRISE_ALTITUDE, False)
    sunset = solve(SUNRISE_ALTITUDE, True)
    while sunrise is None or sunset is None:
        latitude = math.copysign(max(abs(latitude) - LATITUDE_STEP, 0.0), latitude)
        sunrise = solve(SUNRISE_ALTITUDE, False)
        sunset = solve(SUNRISE_ALTITUDE, True)
    if latitude != coordinates.latitude:
        log.debug(
            "No sunrise/sunset at latitude %.4f on %s; using nearest latitude %.1f",
            coordinates.latitude,
            day,
            latitude,
        )

    fajr = solve(-params.fajr_angle, False)
    isha = None if params.uses_isha_interval else solve(-params.isha_angle, True)
    shadow = params.madhab.shadow_length
    asr = _time_for_altitude(
        base_jd,
        longitude,
        latitude,
        lambda declination: asr_altitude(latitude, declination, shadow),
        True,
    )

    midnight = _utc_midnight(day)

    def at(hours: float | None) -> datetime | None:
        return None if hours is None else midnight + timedelta(hours=hours)

    return _SolarDay(
        transit=midnight + timedelta(hours=_transit_hours(base_jd, longitude)),
        sunrise=midnight + timedelta(hours=sunrise),
        sunset=midnight + timedelta(hours=sunset),
        fajr=at(fajr),
        isha=at(isha),
        asr=at(asr),
        latitude=latitude,
    )


def _night_portion(params: CalculationParameters, angle: float) -> float:
    rule = params.high_latitude_rule
    if rule is HighLatitudeRule.SEVENTH_OF_THE_NIGHT:
        return 1.0 / 7.0
    if rule is HighLatitudeRule.TWILIGHT_ANGLE:
        return angle / 60.0
    return 0.5


def _days_since_solstice(day: date, latitude: float) -> int:
    day_of_year = day.timetuple().tm_yday
    days_in_year = 366 if calendar.isleap(day.year) else 365
    if latitude >= 0:
        return (day_of_year + 10) % days_in_year
    southern_offset = 173 if calendar.isleap(day.year) else 172
    return (day_of_year - southern_offset) % days_in_year


def _seasonal_minutes(days_since_solstice: int, a: float, b: float, c: float, d: float) -> float:
    """Piecewise-linear seasonal curve through a (winter) → d (summer) and back."""
    dyy = days_since_solstice
    if dyy < 91:
        return a + (b - a) / 91.0 * dyy
    if dyy < 137:
        return b + (c - b) / 46.0 * (dyy - 91)
    if dyy < 183:
        return c + (d - c) / 46.0 * (dyy - 137)
    if dyy < 229:
        return d + (c - d) / 46.0 * (dyy - 183)
    if dyy < 275:
        return c + (b - c) / 46.0 * (dyy - 229)
    return b + (a - b) / 91.0 * (dyy - 275)


def seasonal_morning_twilight(latitude: float, day: date) -> timedelta:
    """Moonsighting Committee Fajr offset before sunrise."""
    lat = abs(latitude)
    a = 75 + 28.65 / 55.0 * lat
    b = 75 + 19.44 / 55.0 * lat
    c = 75 + 32.74 / 55.0 * lat
    d = 75 + 48.10 / 55.0 * lat
    minutes = _seasonal_minutes(_days_since_solstice(day, latitude), a, b, c, d)
    return timedelta(seconds=round(minutes * 60.0))


def seasonal_evening_twilight(latitude: float, day: date, shafaq: Shafaq) -> timedelta:
    """Moonsighting Committee Isha offset after sunset."""
    lat = abs(latitude)
    if shafaq is Shafaq.AHMER:
        a, b, c, d = 62 + 17.40 / 55.0 * lat, 62 - 7.16 / 55.0 * lat, 62 + 5.12 / 55.0 * lat, 62 + 19.44 / 55.0 * lat
    elif shafaq is Shafaq.ABYAD:
        a, b, c, d = 75 + 25.60 / 55.0 * lat, 75 + 7.16 / 55.0 * lat, 75 + 36.84 / 55.0 * lat, 75 + 81.84 / 55.0 * lat
    else:
        a, b, c, d = 75 + 25.60 / 55.0 * lat, 75 + 2.05 / 55.0 * lat, 75 - 9.21 / 55.0 * lat, 75 + 6.14 / 55.0 * lat
    minutes = _seasonal_minutes(_days_since_solstice(day, latitude), a, b, c, d)
    return timedelta(seconds=round(minutes * 60.0))


def _uses_seasonal(params: CalculationParameters, latitude: float) -> bool:
    return params.seasonal_twilight and abs(latitude) < SEASONAL_LATITUDE_LIMIT


def _resolve_fajr(
    day: date, today: _SolarDay, previous: _SolarDay, params: CalculationParameters
) -> datetime:
    """Fajr bounded by the preceding night (previous sunset → today's sunrise)."""
    night = today.sunrise - previous.sunset
    if _uses_seasonal(params, today.latitude):
        safe = today.sunrise - seasonal_morning_twilight(today.latitude, day)
    elif params.seasonal_twilight:
        safe = today.sunrise - night / 7
    else:
        safe = today.sunrise - night * _night_portion(params, params.fajr_angle)
    if today.fajr is None or today.fajr < safe:
        log.debug("Fajr on %s resolved by the high-latitude rule", day)
        return safe
    return today.fajr


def _resolve_isha(
    day: date, today: _SolarDay, following: _SolarDay, params: CalculationParameters
) -> datetime:
    """Isha bounded by the following night (today's sunset → next sunrise)."""
    if params.uses_isha_interval:
        return today.sunset + timedelta(minutes=params.isha_interval_minutes)
    night = following.sunrise - today.sunset
    if _uses_seasonal(params, today.latitude):
        safe = today.sunset + seasonal_evening_twilight(today.latitude, day, params.shafaq)
    elif params.seasonal_twilight:
        safe = today.sunset + night / 7
    else:
        safe = today.sunset + night * _night_portion(params, params.isha_angle)
    if today.isha is None or today.isha > safe:
        log.debug("Isha on %s resolved by the high-latitude rule", day)
        return safe
    return today.isha


def _adjusted(params: CalculationParameters, kind: EventKind, instant: datetime) -> datetime:
    minutes = params.adjustments.get(kind, 0)
    return instant + timedelta(minutes=minutes) if minutes else instant


def compute_instants(
    coordinates: GeoCoordinates, day: date, params: CalculationParameters
) -> tuple[dict[EventKind, datetime], datetime]:
    """Compute every event instant of ``day`` plus the following day's Fajr.

    Returns:
        (mapping of EventKind → aware UTC datetime in daily order, next Fajr).
    """
    base = solar_base_date(coordinates, day, params.time_zone)
    previous = _solar_day(coordinates, base - timedelta(days=1), params)
    today = _solar_day(coordinates, base, params)
    following = _solar_day(coordinates, base + timedelta(days=1), params)

    fajr = _resolve_fajr(day, today, previous, params)
    isha = _resolve_isha(day, today, following, params)
    asr = today.asr
    if asr is None or not today.transit < asr < today.sunset:
        log.debug("Asr on %s has no solution; using the Dhuhr/Maghrib midpoint", day)
        asr = today.transit + (today.sunset - today.transit) / 2

    next_fajr = _adjusted(
        params,
        EventKind.FAJR,
        _resolve_fajr(day + timedelta(days=1), following, today, params),
    )

    instants = {
        EventKind.FAJR: _adjusted(params, EventKind.FAJR, fajr),
        EventKind.SUNRISE: _adjusted(params, EventKind.SUNRISE, today.sunrise),
        EventKind.DHUHR: _adjusted(params, EventKind.DHUHR, today.transit),
        EventKind.ASR: _adjusted(params, EventKind.ASR, asr),
        EventKind.MAGHRIB: _adjusted(params, EventKind.MAGHRIB, today.sunset),
        EventKind.ISHA: _adjusted(params, EventKind.ISHA, isha),
    }
    maghrib = instants[EventKind.MAGHRIB]
    night = next_fajr - maghrib
    instants[EventKind.MIDNIGHT] = maghrib + night / 2
    instants[EventKind.LAST_THIRD_NIGHT] = maghrib + night * 2 / 3

    if instants[EventKind.ISHA] >= instants[EventKind.MIDNIGHT]:
        log.debug("Isha on %s falls after the middle of the night; using 1/7 of the night", day)
        instants[EventKind.ISHA] = maghrib + night / 7

    _enforce_order(instants, day)
    return instants, next_fajr


def _enforce_order(instants: dict[EventKind, datetime], day: date) -> None:
    """Keep events strictly increasing when minute adjustments collapse a polar night."""
    previous: datetime | None = None
    for kind in EVENT_ORDER:
        if previous is not None and instants[kind] <= previous:
            log.debug("%s on %s nudged after the preceding event", kind.value, day)
            instants[kind] = previous + ORDER_NUDGE
        previous = instants[kind]


def _build_events(
    instants: Mapping[EventKind, datetime],
    params: CalculationParameters,
    labels: Mapping[EventKind, str] | None,
) -> tuple[PrayerEvent, ...]:
    names = labels if labels is not None else event_labels("en")
    return tuple(
        PrayerEvent(
            kind=kind,
            instant=instants[kind],
            label=names.get(kind, kind.value),
            local_label=format_time(instants[kind], params.time_zone),
        )
        for kind in EVENT_ORDER
    )


def compute_day(
    coordinates: GeoCoordinates,
    day: date,
    params: CalculationParameters,
    labels: Mapping[EventKind, str] | None = None,
) -> tuple[tuple[PrayerEvent, ...], datetime]:
    """Compute the day's ordered events together with the next day's Fajr instant."""
    instants, next_fajr = compute_instants(coordinates, day, params)
    return _build_events(instants, params, labels), next_fajr


def compute_prayer_times(
    coordinates: GeoCoordinates,
    day: date,
    params: CalculationParameters,
    labels: Mapping[EventKind, str] | None = None,
) -> tuple[PrayerEvent, ...]:
    """Compute the ordered prayer and twilight events of one civil day.

    Args:
        coordinates: Observer position.
        day: Civil date in ``params.time_zone``.
        params: Angles, interval, madhab, high-latitude rule and time zone.
        labels: Display names per event. English transliterations if None.

    Returns:
        Eight events, Fajr through the last third of the night, strictly
        increasing by instant.
    """
    events, _ = compute_day(coordinates, day, params, labels)
    return events


def current_event(events: tuple[PrayerEvent, ...], now: datetime) -> EventKind | None:
    """Latest event that has started by ``now``.

    Before today's Fajr the night events are carried over from the previous
    evening, approximated by today's instants shifted back a day; if none of
    those has started either, ISHA. Naive ``now`` is taken as UTC.
    """
    if not events:
        return None
    now = as_utc(now)
    for event in reversed(events):
        if event.instant <= now:
            return event.kind
    for event in reversed(events):
        if event.kind in _CARRIED_OVER and event.instant - timedelta(days=1) <= now:
            return event.kind
    return EventKind.ISHA


def next_event(events: tuple[PrayerEvent, ...], now: datetime) -> PrayerEvent | None:
    """First event strictly after ``now``, or None once the day is over."""
    now = as_utc(now)
    for event in events:
        if event.instant > now:
            return event
    return None


def time_until_next(events: tuple[PrayerEvent, ...], now: datetime) -> timedelta | None:
    now = as_utc(now)
    upcoming = next_event(events, now)
    return None if upcoming is None else upcoming.instant - now
