"""Data model definitions — immutable records passed between the calculation layers."""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from pytz import UnknownTimeZoneError, timezone


class FalakError(Exception):
    """Base class for every error raised by the engine."""


class InvalidCoordinate(FalakError, ValueError):
    """Latitude or longitude outside the valid range."""


class InvalidParameterCombination(FalakError, ValueError):
    """Calculation parameters that cannot produce a schedule.

    The message always starts with the offending field name.
    """

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name


class HijriOutOfRange(FalakError, ValueError):
    """Julian Day Number before the Islamic calendar epoch."""


class EventKind(Enum):
    """Named prayer and twilight events, in daily order."""

    FAJR = "fajr"
    SUNRISE = "sunrise"
    DHUHR = "dhuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"
    MIDNIGHT = "middleOfTheNight"
    LAST_THIRD_NIGHT = "lastThirdOfTheNight"

    @property
    def is_fard(self) -> bool:
        """True for the five obligatory prayers."""
        return self in _FARD


_FARD = frozenset(
    {EventKind.FAJR, EventKind.DHUHR, EventKind.ASR, EventKind.MAGHRIB, EventKind.ISHA}
)


class Madhab(Enum):
    """Asr shadow convention. The value is the shadow-length multiplier."""

    SHAFI = 1
    HANAFI = 2

    @property
    def shadow_length(self) -> int:
        return self.value


class HighLatitudeRule(Enum):
    """Bound applied to Fajr/Isha when twilight lasts most or all of the night."""

    MIDDLE_OF_THE_NIGHT = "middle_of_the_night"
    SEVENTH_OF_THE_NIGHT = "seventh_of_the_night"
    TWILIGHT_ANGLE = "twilight_angle"

    @classmethod
    def recommended(cls, coordinates: "GeoCoordinates") -> "HighLatitudeRule":
        """Seventh of the night above 48° latitude, middle of the night otherwise."""
        if abs(coordinates.latitude) > 48:
            return cls.SEVENTH_OF_THE_NIGHT
        return cls.MIDDLE_OF_THE_NIGHT


class Shafaq(Enum):
    """Twilight flavour used by the seasonal-adjusted Isha curves."""

    GENERAL = "general"
    AHMER = "ahmer"  # red twilight
    ABYAD = "abyad"  # white twilight


@dataclass(frozen=True)
class GeoCoordinates:
    """Observer position. Validated on construction."""

    latitude: float  # Decimal degrees, north positive
    longitude: float  # Decimal degrees, east positive

    def __post_init__(self) -> None:
        if not math.isfinite(self.latitude) or not -90.0 <= self.latitude <= 90.0:
            raise InvalidCoordinate(f"latitude must be within [-90, 90], got {self.latitude}")
        if not math.isfinite(self.longitude) or not -180.0 <= self.longitude <= 180.0:
            raise InvalidCoordinate(
                f"longitude must be within [-180, 180], got {self.longitude}"
            )


@dataclass(frozen=True)
class CalculationParameters:
    """Everything the calculator needs besides coordinates and a date.

    A positive ``isha_interval_minutes`` overrides ``isha_angle`` entirely:
    Isha is then Maghrib plus that many minutes.
    """

    fajr_angle: float  # Degrees below the horizon
    isha_angle: float  # Degrees below the horizon (ignored when an interval is set)
    time_zone: str  # IANA name, e.g. "America/Toronto"
    isha_interval_minutes: float = 0.0
    madhab: Madhab = Madhab.SHAFI
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    shafaq: Shafaq = Shafaq.GENERAL
    method_name: str = "Other"  # CalculationMethod value the preset came from
    seasonal_twilight: bool = False  # Moonsighting Committee seasonal curves
    adjustments: dict[EventKind, float] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not math.isfinite(self.fajr_angle) or self.fajr_angle <= 0:
            raise InvalidParameterCombination(
                "fajr_angle", f"must be a positive angle, got {self.fajr_angle}"
            )
        if not math.isfinite(self.isha_interval_minutes) or self.isha_interval_minutes < 0:
            raise InvalidParameterCombination(
                "isha_interval_minutes",
                f"must not be negative, got {self.isha_interval_minutes}",
            )
        if not self.uses_isha_interval and (
            not math.isfinite(self.isha_angle) or self.isha_angle <= 0
        ):
            raise InvalidParameterCombination(
                "isha_angle",
                f"must be a positive angle when no interval is set, got {self.isha_angle}",
            )
        try:
            timezone(self.time_zone)
        except UnknownTimeZoneError as e:
            raise InvalidParameterCombination(
                "time_zone", f"unknown IANA time zone {self.time_zone!r}"
            ) from e

    @property
    def uses_isha_interval(self) -> bool:
        return self.isha_interval_minutes > 0


@dataclass(frozen=True)
class SolarPosition:
    """Apparent solar position for one observer and instant."""

    declination: float  # Degrees
    right_ascension: float  # Degrees, [0, 360)
    equation_of_time_minutes: float  # Apparent minus mean solar time
    hour_angle: float  # Degrees, positive west of the meridian
    altitude: float  # Degrees above the horizon (geometric)
    azimuth: float  # Degrees clockwise from north, [0, 360)
    distance_au: float  # Earth–sun distance


@dataclass(frozen=True)
class PrayerEvent:
    """A single computed event."""

    kind: EventKind
    instant: datetime  # Aware UTC datetime
    label: str  # Display name ("Fajr", "Maġrib", ...)
    local_label: str  # Local wall-clock time ("5:42 AM")

    @property
    def is_fard(self) -> bool:
        return self.kind.is_fard


@dataclass(frozen=True)
class DaySchedule:
    """One civil day of events. ``events`` is strictly increasing by instant."""

    date: date
    time_zone: str
    events: tuple[PrayerEvent, ...]
    next_fajr: datetime | None  # Following day's Fajr, anchors the timeline end
    current_event: EventKind | None  # Latest event <= now (previous night carried over before Fajr)
    next_event_time: datetime | None  # First event after now, if any today

    def instant_of(self, kind: EventKind) -> datetime | None:
        """Return the instant of ``kind``, or None if the schedule lacks it."""
        for event in self.events:
            if event.kind is kind:
                return event.instant
        return None


@dataclass(frozen=True)
class Schedule:
    """Month or year of day schedules."""

    label: str | int  # "March 2024" for months, 2024 for years
    dates: tuple[DaySchedule, ...]


@dataclass(frozen=True)
class HijriDate:
    """Tabular Islamic calendar date."""

    day: int  # 1..30
    month_index: int  # 0..11, 0 = al-Muḥarram
    month_name: str
    year: int  # Anno Hegirae
    weekday_name: str


@dataclass(frozen=True)
class HijriExplanation:
    """Intermediate values of a Hijri conversion, for step-by-step display."""

    julian_day_number: int  # After applying the day offset
    offset_from_epoch: int
    cycle_index: int  # Complete 30-year cycles since the epoch
    remainder_days: int  # Days left after removing complete cycles
    years_into_cycle: int
    remainder_after_years: int
    raw_month: int  # 1..12 after clamping
    date: HijriDate


@dataclass(frozen=True)
class Timeline:
    """One day's events mapped onto [0, 1], Fajr to next Fajr.

    ``dhuhr`` is a display position (midpoint of sunrise and maghrib);
    the true Dhuhr instant is kept in ``dhuhr_instant``.
    """

    fajr: float
    sunrise: float
    dhuhr: float
    asr: float
    maghrib: float
    isha: float
    mid_night: float
    last_third: float
    end: float
    dhuhr_instant: datetime | None = None
    is_fallback: bool = False
