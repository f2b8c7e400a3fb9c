import pytest

from falak.methods import CalculationMethod, detect_method
from falak.models import EventKind, HighLatitudeRule, InvalidParameterCombination, Madhab


@pytest.mark.parametrize(
    "method,fajr,isha,interval",
    [
        (CalculationMethod.OTHER, 12, 12, 0),
        (CalculationMethod.MUSLIM_WORLD_LEAGUE, 18, 17, 0),
        (CalculationMethod.EGYPTIAN, 19.5, 17.5, 0),
        (CalculationMethod.KARACHI, 18, 18, 0),
        (CalculationMethod.UMM_AL_QURA, 18.5, 0, 90),
        (CalculationMethod.DUBAI, 18.2, 18.2, 0),
        (CalculationMethod.MOONSIGHTING_COMMITTEE, 18, 18, 0),
        (CalculationMethod.NORTH_AMERICA, 15, 15, 0),
        (CalculationMethod.KUWAIT, 18, 17.5, 0),
        (CalculationMethod.QATAR, 18, 0, 90),
        (CalculationMethod.SINGAPORE, 20, 18, 0),
        (CalculationMethod.TURKEY, 18, 17, 0),
    ],
)
def test_preset_angles(method, fajr, isha, interval):
    assert method.fajr_angle == fajr
    assert method.isha_angle == isha
    assert method.isha_interval_minutes == interval


def test_parameters_carry_the_preset():
    params = CalculationMethod.MOONSIGHTING_COMMITTEE.parameters(
        time_zone="America/Toronto",
        madhab=Madhab.HANAFI,
        high_latitude_rule=HighLatitudeRule.SEVENTH_OF_THE_NIGHT,
    )
    assert params.method_name == "MoonsightingCommittee"
    assert params.seasonal_twilight
    assert params.madhab is Madhab.HANAFI
    assert params.adjustments == {EventKind.DHUHR: 5, EventKind.MAGHRIB: 3}


def test_adjustments_are_copies():
    CalculationMethod.TURKEY.adjustments[EventKind.SUNRISE] = 0
    assert CalculationMethod.TURKEY.adjustments[EventKind.SUNRISE] == -7


def test_overrides():
    params = CalculationMethod.MUSLIM_WORLD_LEAGUE.parameters(time_zone="UTC", fajr_angle=16.0)
    assert params.fajr_angle == 16.0
    assert params.isha_angle == 17.0

    interval = CalculationMethod.MUSLIM_WORLD_LEAGUE.parameters(time_zone="UTC", isha_interval_minutes=75)
    assert interval.uses_isha_interval


def test_dropping_the_interval_needs_an_isha_angle():
    with pytest.raises(InvalidParameterCombination, match="isha_angle"):
        CalculationMethod.UMM_AL_QURA.parameters(time_zone="Asia/Riyadh", isha_interval_minutes=0)
    params = CalculationMethod.UMM_AL_QURA.parameters(
        time_zone="Asia/Riyadh", isha_interval_minutes=0, isha_angle=18.0
    )
    assert params.isha_angle == 18.0


def test_isha_angle_override_is_kept_with_an_interval():
    params = CalculationMethod.UMM_AL_QURA.parameters(time_zone="Asia/Riyadh", isha_angle=17.0)
    assert params.isha_angle == 17.0
    assert params.uses_isha_interval


def test_detect_method():
    assert detect_method(18, 17) is CalculationMethod.MUSLIM_WORLD_LEAGUE
    assert detect_method(15.001, 15) is CalculationMethod.NORTH_AMERICA
    assert detect_method(18.5, 0, 90) is CalculationMethod.UMM_AL_QURA
    assert detect_method(18, 0, 90) is CalculationMethod.QATAR
    assert detect_method(13, 14) is CalculationMethod.OTHER


def test_labels():
    assert CalculationMethod.NORTH_AMERICA.label.startswith("North America")
    assert CalculationMethod("Turkey") is CalculationMethod.TURKEY
