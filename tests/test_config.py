import pytest

from falak.config import ConfigurationError, Settings, load_settings, resolve_time_zone
from falak.methods import CalculationMethod
from falak.models import HighLatitudeRule, InvalidCoordinate, Madhab

from conftest import OTTAWA

BASE_ENV = {
    "FALAK_LATITUDE": "45.3506",
    "FALAK_LONGITUDE": "-75.7930",
    "FALAK_TIMEZONE": "America/Toronto",
}


def test_load_settings_from_mapping():
    settings = load_settings(
        {
            **BASE_ENV,
            "FALAK_METHOD": "NorthAmerica",
            "FALAK_MADHAB": "hanafi",
            "FALAK_HIJRI_OFFSET": "-1",
            "FALAK_LANG": "ar",
        }
    )
    assert settings.coordinates == OTTAWA
    assert settings.method is CalculationMethod.NORTH_AMERICA
    assert settings.madhab is Madhab.HANAFI
    assert settings.hijri_offset == -1
    assert settings.lang == "ar"
    assert settings.time_zone == "America/Toronto"


def test_defaults():
    settings = load_settings(dict(BASE_ENV))
    assert settings.method is CalculationMethod.MUSLIM_WORLD_LEAGUE
    assert settings.madhab is Madhab.SHAFI
    assert settings.high_latitude_rule is HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    assert settings.hijri_offset == 0
    assert settings.lang == "en"


def test_high_latitude_default_follows_latitude():
    settings = load_settings({**BASE_ENV, "FALAK_LATITUDE": "60.17", "FALAK_LONGITUDE": "24.94"})
    assert settings.high_latitude_rule is HighLatitudeRule.SEVENTH_OF_THE_NIGHT


def test_enum_values_accept_names():
    settings = load_settings(
        {**BASE_ENV, "FALAK_METHOD": "umm_al_qura", "FALAK_HIGH_LATITUDE_RULE": "TWILIGHT_ANGLE"}
    )
    assert settings.method is CalculationMethod.UMM_AL_QURA
    assert settings.high_latitude_rule is HighLatitudeRule.TWILIGHT_ANGLE


@pytest.mark.parametrize(
    "override,field_name",
    [
        ({"FALAK_LATITUDE": "north"}, "FALAK_LATITUDE"),
        ({"FALAK_METHOD": "Jupiter"}, "FALAK_METHOD"),
        ({"FALAK_HIJRI_OFFSET": "1.5"}, "FALAK_HIJRI_OFFSET"),
    ],
)
def test_bad_values_name_the_variable(override, field_name):
    with pytest.raises(ConfigurationError) as excinfo:
        load_settings({**BASE_ENV, **override})
    assert excinfo.value.field_name == field_name


def test_out_of_range_latitude():
    with pytest.raises(InvalidCoordinate):
        load_settings({**BASE_ENV, "FALAK_LATITUDE": "123"})


def test_time_zone_resolved_from_coordinates():
    assert resolve_time_zone(OTTAWA) == "America/Toronto"
    settings = load_settings({"FALAK_LATITUDE": "21.4225", "FALAK_LONGITUDE": "39.8262"})
    assert settings.time_zone == "Asia/Riyadh"


def test_settings_build_parameters():
    settings = load_settings({**BASE_ENV, "FALAK_METHOD": "Karachi"})
    assert isinstance(settings, Settings)
    params = settings.parameters()
    assert params.method_name == "Karachi"
    assert params.time_zone == "America/Toronto"


def test_load_settings_reads_the_environment(monkeypatch):
    for name, value in BASE_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("FALAK_METHOD", "Qatar")
    assert load_settings().method is CalculationMethod.QATAR
