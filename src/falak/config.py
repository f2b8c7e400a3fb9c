"""Settings for the command-line timetable, read from the environment.

Values come from ``FALAK_*`` variables (a ``.env`` file is loaded first).
Without ``FALAK_TIMEZONE`` the zone is looked up offline from the
coordinates.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv
from timezonefinder import TimezoneFinder

from falak.methods import CalculationMethod
from falak.models import (
    CalculationParameters,
    GeoCoordinates,
    HighLatitudeRule,
    InvalidParameterCombination,
    Madhab,
    Shafaq,
)

log = logging.getLogger(__name__)

DEFAULT_LATITUDE = 21.4225241  # Makkah
DEFAULT_LONGITUDE = 39.8261818

_tf: TimezoneFinder | None = None


class ConfigurationError(InvalidParameterCombination):
    """Environment variable with an unusable value."""


@dataclass(frozen=True)
class Settings:
    coordinates: GeoCoordinates
    method: CalculationMethod
    madhab: Madhab
    high_latitude_rule: HighLatitudeRule
    shafaq: Shafaq
    time_zone: str
    hijri_offset: int = 0
    lang: str = "en"

    def parameters(self) -> CalculationParameters:
        return self.method.parameters(
            time_zone=self.time_zone,
            madhab=self.madhab,
            high_latitude_rule=self.high_latitude_rule,
            shafaq=self.shafaq,
        )


def resolve_time_zone(coordinates: GeoCoordinates) -> str:
    """IANA zone containing ``coordinates``, falling back to UTC at sea."""
    global _tf
    if _tf is None:
        _tf = TimezoneFinder()
    tz_str = _tf.timezone_at(lat=coordinates.latitude, lng=coordinates.longitude)
    if tz_str is None:
        log.warning(
            "No time zone found for %.4f, %.4f; using UTC",
            coordinates.latitude,
            coordinates.longitude,
        )
        return "UTC"
    return tz_str


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(name, f"expected a number, got {raw!r}") from e


def _member(env: Mapping[str, str], name: str, enum_type, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    for member in enum_type:
        if raw.lower() in (member.name.lower(), str(member.value).lower()):
            return member
    choices = ", ".join(str(member.value) for member in enum_type)
    raise ConfigurationError(name, f"unknown value {raw!r} (expected one of {choices})")


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from ``env`` (``os.environ`` after loading ``.env`` if None).

    Raises:
        ConfigurationError: If a variable cannot be parsed.
        InvalidCoordinate: If the coordinates are out of range.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    coordinates = GeoCoordinates(
        latitude=_float(env, "FALAK_LATITUDE", DEFAULT_LATITUDE),
        longitude=_float(env, "FALAK_LONGITUDE", DEFAULT_LONGITUDE),
    )
    method = _member(env, "FALAK_METHOD", CalculationMethod, CalculationMethod.MUSLIM_WORLD_LEAGUE)
    madhab = _member(env, "FALAK_MADHAB", Madhab, Madhab.SHAFI)
    rule = _member(
        env,
        "FALAK_HIGH_LATITUDE_RULE",
        HighLatitudeRule,
        HighLatitudeRule.recommended(coordinates),
    )
    shafaq = _member(env, "FALAK_SHAFAQ", Shafaq, Shafaq.GENERAL)

    time_zone = env.get("FALAK_TIMEZONE") or resolve_time_zone(coordinates)
    hijri_offset = _float(env, "FALAK_HIJRI_OFFSET", 0)
    if hijri_offset != int(hijri_offset):
        raise ConfigurationError("FALAK_HIJRI_OFFSET", f"expected whole days, got {hijri_offset}")

    settings = Settings(
        coordinates=coordinates,
        method=method,
        madhab=madhab,
        high_latitude_rule=rule,
        shafaq=shafaq,
        time_zone=time_zone,
        hijri_offset=int(hijri_offset),
        lang=env.get("FALAK_LANG") or "en",
    )
    log.debug("Loaded settings: %s", settings)
    return settings
