"""Low-precision solar position model (Meeus, Astronomical Algorithms ch. 25/28).

Accurate to roughly 0.01° in declination and a few seconds in the equation
of time between 1950 and 2050, which is well inside the resolution a
prayer timetable is published at.
"""

import math
from datetime import datetime
from typing import NamedTuple

from falak.julian import as_utc, instant_to_julian_day, julian_century
from falak.models import GeoCoordinates, SolarPosition


class SolarCoordinates(NamedTuple):
    """Observer-independent part of the solar position."""

    declination: float  # Degrees
    right_ascension: float  # Degrees, [0, 360)
    equation_of_time_minutes: float
    distance_au: float


def unwind_angle(angle: float) -> float:
    """Normalize an angle to [0, 360)."""
    return angle - 360.0 * math.floor(angle / 360.0)


def quadrant_shift_angle(angle: float) -> float:
    """Normalize an angle to (-180, 180]."""
    shifted = unwind_angle(angle)
    return shifted - 360.0 if shifted > 180.0 else shifted


def mean_solar_longitude(t: float) -> float:
    return unwind_angle(280.46646 + 36000.76983 * t + 0.0003032 * t * t)


def mean_solar_anomaly(t: float) -> float:
    return unwind_angle(357.52911 + 35999.05029 * t - 0.0001537 * t * t)


def mean_lunar_longitude(t: float) -> float:
    return unwind_angle(218.3165 + 481267.8813 * t)


def ascending_lunar_node(t: float) -> float:
    return unwind_angle(125.04452 - 1934.136261 * t + 0.0020708 * t * t + t**3 / 450000)


def orbital_eccentricity(t: float) -> float:
    """Eccentricity of Earth's orbit."""
    return 0.016708634 - 0.000042037 * t - 0.0000001267 * t * t


def equation_of_center(t: float, mean_anomaly: float) -> float:
    m = math.radians(mean_anomaly)
    return (
        (1.914602 - 0.004817 * t - 0.000014 * t * t) * math.sin(m)
        + (0.019993 - 0.000101 * t) * math.sin(2 * m)
        + 0.000289 * math.sin(3 * m)
    )


def mean_obliquity(t: float) -> float:
    return 23.439291 - 0.013004167 * t - 0.0000001639 * t**2 + 0.0000005036 * t**3


def nutation_in_longitude(l0: float, lunar_longitude: float, node: float) -> float:
    """Δψ in degrees, truncated to the four largest terms."""
    return (
        -17.20 * math.sin(math.radians(node))
        - 1.32 * math.sin(2 * math.radians(l0))
        - 0.23 * math.sin(2 * math.radians(lunar_longitude))
        + 0.21 * math.sin(2 * math.radians(node))
    ) / 3600.0


def solar_coordinates(jd: float) -> SolarCoordinates:
    """Declination, right ascension, equation of time and distance at ``jd``."""
    t = julian_century(jd)

    l0 = mean_solar_longitude(t)
    m = mean_solar_anomaly(t)
    e = orbital_eccentricity(t)
    c = equation_of_center(t, m)

    true_longitude = l0 + c
    true_anomaly = m + c
    distance = 1.000001018 * (1 - e * e) / (1 + e * math.cos(math.radians(true_anomaly)))

    omega = 125.04 - 1934.136 * t
    apparent_longitude = unwind_angle(
        true_longitude - 0.00569 - 0.00478 * math.sin(math.radians(omega))
    )
    obliquity = mean_obliquity(t) + 0.00256 * math.cos(math.radians(omega))

    lam = math.radians(apparent_longitude)
    eps = math.radians(obliquity)
    declination = math.degrees(math.asin(math.sin(eps) * math.sin(lam)))
    right_ascension = unwind_angle(
        math.degrees(math.atan2(math.cos(eps) * math.sin(lam), math.cos(lam)))
    )

    # Meeus (28.1): E = L0 - 0.0057183° - α + Δψ·cos ε
    dpsi = nutation_in_longitude(l0, mean_lunar_longitude(t), ascending_lunar_node(t))
    eot_degrees = quadrant_shift_angle(l0 - 0.0057183 - right_ascension + dpsi * math.cos(eps))

    return SolarCoordinates(
        declination=declination,
        right_ascension=right_ascension,
        equation_of_time_minutes=eot_degrees * 4.0,
        distance_au=distance,
    )


def altitude_of(latitude: float, declination: float, hour_angle: float) -> float:
    """Geometric altitude in degrees of a body at the given hour angle."""
    phi = math.radians(latitude)
    delta = math.radians(declination)
    sin_alt = math.sin(phi) * math.sin(delta) + math.cos(phi) * math.cos(delta) * math.cos(
        math.radians(hour_angle)
    )
    return math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))


def hour_angle_for_altitude(
    latitude: float, declination: float, altitude: float
) -> float | None:
    """Hour angle (degrees, >= 0) at which the sun reaches ``altitude``.

    Returns None if the sun never reaches that altitude on this day
    (polar day/night, or the observer is on a pole).
    """
    phi = math.radians(latitude)
    delta = math.radians(declination)
    denominator = math.cos(phi) * math.cos(delta)
    if abs(denominator) < 1e-12:
        return None
    cos_h = (math.sin(math.radians(altitude)) - math.sin(phi) * math.sin(delta)) / denominator
    if cos_h < -1.0 or cos_h > 1.0:
        return None
    return math.degrees(math.acos(cos_h))


def azimuth_of(latitude: float, declination: float, hour_angle: float, altitude: float) -> float:
    """Azimuth clockwise from north, from the spherical law of cosines."""
    phi = math.radians(latitude)
    alt = math.radians(altitude)
    denominator = math.cos(alt) * math.cos(phi)
    if abs(denominator) < 1e-12:
        # On a pole (or sun at zenith) every direction is south/north.
        return 180.0 if latitude >= 0 else 0.0
    cos_a = (math.sin(math.radians(declination)) - math.sin(alt) * math.sin(phi)) / denominator
    azimuth = math.degrees(math.acos(max(-1.0, min(1.0, cos_a))))
    if math.sin(math.radians(hour_angle)) > 0:
        azimuth = 360.0 - azimuth
    return unwind_angle(azimuth)


def local_hour_angle(instant: datetime, longitude: float, equation_of_time_minutes: float) -> float:
    """Hour angle of the sun at ``instant``, positive west (afternoon)."""
    instant = as_utc(instant)
    ut_hours = (
        instant.hour
        + instant.minute / 60.0
        + instant.second / 3600.0
        + instant.microsecond / 3_600_000_000.0
    )
    apparent_solar_degrees = ut_hours * 15.0 + longitude + equation_of_time_minutes / 4.0
    return quadrant_shift_angle(apparent_solar_degrees - 180.0)


def compute(coordinates: GeoCoordinates, instant: datetime) -> SolarPosition:
    """Compute the apparent solar position for an observer and instant.

    Args:
        coordinates: Observer position.
        instant: Aware datetime (naive values are taken as UTC).

    Returns:
        SolarPosition with all angles in degrees.
    """
    sun = solar_coordinates(instant_to_julian_day(instant))
    hour_angle = local_hour_angle(instant, coordinates.longitude, sun.equation_of_time_minutes)
    altitude = altitude_of(coordinates.latitude, sun.declination, hour_angle)
    azimuth = azimuth_of(coordinates.latitude, sun.declination, hour_angle, altitude)
    return SolarPosition(
        declination=sun.declination,
        right_ascension=sun.right_ascension,
        equation_of_time_minutes=sun.equation_of_time_minutes,
        hour_angle=hour_angle,
        altitude=altitude,
        azimuth=azimuth,
        distance_au=sun.distance_au,
    )
