"""Qibla direction: great-circle bearing to the Kaaba and compass helpers."""

import math

from falak.models import GeoCoordinates

KAABA = GeoCoordinates(latitude=21.4225241, longitude=39.8261818)


def _normalize(angle: float) -> float:
    return angle - 360.0 * math.floor(angle / 360.0)


def qibla_bearing(coordinates: GeoCoordinates) -> float:
    """Initial bearing from ``coordinates`` to the Kaaba, degrees clockwise from north in [0, 360)."""
    lat = math.radians(coordinates.latitude)
    delta_lon = math.radians(KAABA.longitude) - math.radians(coordinates.longitude)
    y = math.sin(delta_lon)
    x = math.cos(lat) * math.tan(math.radians(KAABA.latitude)) - math.sin(lat) * math.cos(delta_lon)
    return _normalize(math.degrees(math.atan2(y, x)))


def relative_rotation(bearing: float, heading: float) -> float:
    """Clockwise rotation from the device heading to the Qibla, in [0, 360)."""
    return _normalize(bearing - heading)


def is_pointing_at_qibla(rotation: float, tolerance: float = 5.0) -> bool:
    return rotation < tolerance or rotation > 360.0 - tolerance


def format_direction_instruction(rotation: float) -> str:
    """Turn instruction such as "12° right" or "40° left"."""
    if rotation < 180.0:
        return f"{round(rotation)}° right"
    return f"{round(360.0 - rotation)}° left"
