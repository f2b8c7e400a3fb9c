import math

import pytest

from falak.models import (
    CalculationParameters,
    DaySchedule,
    EventKind,
    FalakError,
    GeoCoordinates,
    HighLatitudeRule,
    InvalidCoordinate,
    InvalidParameterCombination,
    Madhab,
)


@pytest.mark.parametrize(
    "latitude,longitude",
    [(90.5, 0.0), (-91.0, 0.0), (0.0, 180.1), (0.0, -200.0), (math.nan, 0.0), (0.0, math.inf)],
)
def test_invalid_coordinates(latitude, longitude):
    with pytest.raises(InvalidCoordinate):
        GeoCoordinates(latitude, longitude)


def test_boundary_coordinates_are_valid():
    GeoCoordinates(90.0, 180.0)
    GeoCoordinates(-90.0, -180.0)


@pytest.mark.parametrize(
    "kwargs,field_name",
    [
        ({"fajr_angle": 0.0, "isha_angle": 17.0}, "fajr_angle"),
        ({"fajr_angle": -18.0, "isha_angle": 17.0}, "fajr_angle"),
        ({"fajr_angle": 18.0, "isha_angle": 0.0}, "isha_angle"),
        ({"fajr_angle": 18.0, "isha_angle": 17.0, "isha_interval_minutes": -5}, "isha_interval_minutes"),
        ({"fajr_angle": 18.0, "isha_angle": 17.0, "time_zone": "Mars/Olympus_Mons"}, "time_zone"),
    ],
)
def test_invalid_parameters_name_the_field(kwargs, field_name):
    kwargs.setdefault("time_zone", "UTC")
    with pytest.raises(InvalidParameterCombination) as excinfo:
        CalculationParameters(**kwargs)
    assert excinfo.value.field_name == field_name
    assert str(excinfo.value).startswith(f"{field_name}:")


def test_interval_makes_isha_angle_optional():
    params = CalculationParameters(fajr_angle=18.5, isha_angle=0.0, isha_interval_minutes=90, time_zone="Asia/Riyadh")
    assert params.uses_isha_interval


def test_errors_share_a_base_class():
    assert issubclass(InvalidCoordinate, FalakError)
    assert issubclass(InvalidParameterCombination, ValueError)


def test_event_kinds():
    assert [kind.value for kind in EventKind] == [
        "fajr",
        "sunrise",
        "dhuhr",
        "asr",
        "maghrib",
        "isha",
        "middleOfTheNight",
        "lastThirdOfTheNight",
    ]
    assert EventKind.ASR.is_fard
    assert not EventKind.SUNRISE.is_fard
    assert not EventKind.MIDNIGHT.is_fard


def test_madhab_shadow_length():
    assert Madhab.SHAFI.shadow_length == 1
    assert Madhab.HANAFI.shadow_length == 2


def test_recommended_high_latitude_rule():
    assert HighLatitudeRule.recommended(GeoCoordinates(45.0, 0.0)) is HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    assert HighLatitudeRule.recommended(GeoCoordinates(-52.0, 0.0)) is HighLatitudeRule.SEVENTH_OF_THE_NIGHT


def test_instant_of_missing_event():
    day = DaySchedule(
        date=None,
        time_zone="UTC",
        events=(),
        next_fajr=None,
        current_event=None,
        next_event_time=None,
    )
    assert day.instant_of(EventKind.FAJR) is None
