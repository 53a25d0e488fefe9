"""Solar position engine using a NOAA-style ephemeris approximation.

Degree-level accuracy: enough for a compass or a sky dial, not for surveying.
All trigonometry runs in radians; inputs and outputs are in degrees.
"""

import math
from datetime import datetime
from typing import NamedTuple

from pytz import utc

from sunoptimizer.models import GeoInstant, SolarPosition

_J2000 = 2451545.0
_DAYS_PER_CENTURY = 36525.0
_MINUTES_PER_DAY = 1440.0

# |sin(zenith)| below this means the sun is at zenith or nadir; azimuth is undefined
_DEGENERATE_SIN_ZENITH = 1e-4

_CARDINALS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


class InvalidCoordinatesError(ValueError):
    """Latitude or longitude outside the valid range, or not a finite number."""


class _SolarCoordinates(NamedTuple):
    declination_deg: float
    right_ascension_deg: float
    equation_of_time_min: float


def julian_day(instant: datetime) -> float:
    """Julian Day of a UTC datetime (proleptic Gregorian calendar).

    January and February count as months 13 and 14 of the previous year.
    """
    year = instant.year
    month = instant.month
    day = (
        instant.day
        + instant.hour / 24
        + instant.minute / 1440
        + (instant.second + instant.microsecond / 1e6) / 86400
    )
    if month <= 2:
        year -= 1
        month += 12

    a = year // 100
    b = 2 - a + a // 4
    return (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day
        + b
        - 1524.5
    )


def _solar_coordinates(jd: float) -> _SolarCoordinates:
    """Declination, right ascension and equation of time for a Julian Day."""
    t = (jd - _J2000) / _DAYS_PER_CENTURY

    # Geometric mean longitude and mean anomaly (degrees)
    l0 = (280.46646 + t * (36000.76983 + t * 0.0003032)) % 360
    m = (357.52911 + t * (35999.05029 - 0.0001537 * t)) % 360
    e = 0.016708634 - t * (0.000042037 + 0.0000001267 * t)

    m_rad = math.radians(m)
    center = (
        math.sin(m_rad) * (1.914602 - t * (0.004817 + 0.000014 * t))
        + math.sin(2 * m_rad) * (0.019993 - 0.000101 * t)
        + math.sin(3 * m_rad) * 0.000289
    )

    true_longitude = l0 + center
    omega = 125.04 - 1934.136 * t
    apparent_longitude = (
        true_longitude - 0.00569 - 0.00478 * math.sin(math.radians(omega))
    )

    obliquity_mean = (
        23 + (26 + (21.448 - t * (46.815 + t * (0.00059 - t * 0.001813))) / 60) / 60
    )
    obliquity = obliquity_mean + 0.00256 * math.cos(math.radians(omega))

    eps_rad = math.radians(obliquity)
    lam_rad = math.radians(apparent_longitude)

    right_ascension = (
        math.degrees(
            math.atan2(math.cos(eps_rad) * math.sin(lam_rad), math.cos(lam_rad))
        )
        % 360
    )
    declination = math.degrees(math.asin(math.sin(eps_rad) * math.sin(lam_rad)))

    y = math.tan(eps_rad / 2) ** 2
    l0_rad = math.radians(l0)
    equation_of_time = 4 * math.degrees(
        y * math.sin(2 * l0_rad)
        - 2 * e * math.sin(m_rad)
        + 4 * e * y * math.sin(m_rad) * math.cos(2 * l0_rad)
        - 0.5 * y * y * math.sin(4 * l0_rad)
        - 1.25 * e * e * math.sin(2 * m_rad)
    )

    return _SolarCoordinates(
        declination_deg=declination,
        right_ascension_deg=right_ascension,
        equation_of_time_min=equation_of_time,
    )


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, value))


def _validate(latitude: float, longitude: float) -> None:
    if not (math.isfinite(latitude) and -90 <= latitude <= 90):
        raise InvalidCoordinatesError(f"Latitude must be -90 to 90, got {latitude}")
    if not (math.isfinite(longitude) and -180 <= longitude <= 180):
        raise InvalidCoordinatesError(
            f"Longitude must be -180 to 180, got {longitude}"
        )


def compute_position(
    latitude: float, longitude: float, instant: datetime
) -> SolarPosition:
    """Compute the sun's azimuth and elevation seen from a point on Earth.

    Args:
        latitude: Decimal degrees, -90 to 90 (north positive).
        longitude: Decimal degrees, -180 to 180 (east positive).
        instant: The moment to evaluate. Naive datetimes are read as UTC;
            aware ones are converted to UTC.

    Returns:
        SolarPosition with azimuth in [0, 360) and elevation in [-90, 90].

    Raises:
        InvalidCoordinatesError: If a coordinate is out of range or not finite.
    """
    _validate(latitude, longitude)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=utc)
    instant = instant.astimezone(utc)

    coords = _solar_coordinates(julian_day(instant))

    utc_minutes = (
        instant.hour * 60
        + instant.minute
        + (instant.second + instant.microsecond / 1e6) / 60
    )
    true_solar_time = (
        utc_minutes + coords.equation_of_time_min + 4 * longitude
    ) % _MINUTES_PER_DAY
    hour_angle = true_solar_time / 4 - 180

    lat_rad = math.radians(latitude)
    dec_rad = math.radians(coords.declination_deg)
    ha_rad = math.radians(hour_angle)

    cos_zenith = _clamp_unit(
        math.sin(lat_rad) * math.sin(dec_rad)
        + math.cos(lat_rad) * math.cos(dec_rad) * math.cos(ha_rad)
    )
    zenith_rad = math.acos(cos_zenith)
    elevation = 90.0 - math.degrees(zenith_rad)

    sin_zenith = math.sin(zenith_rad)
    if abs(sin_zenith) < _DEGENERATE_SIN_ZENITH:
        azimuth = 0.0
    else:
        cos_azimuth = _clamp_unit(
            (math.sin(dec_rad) - math.sin(lat_rad) * cos_zenith)
            / (math.cos(lat_rad) * sin_zenith)
        )
        azimuth = math.degrees(math.acos(cos_azimuth))
        # Afternoon: the sun is west of the meridian
        if hour_angle > 0:
            azimuth = 360.0 - azimuth
        azimuth %= 360.0

    return SolarPosition(
        azimuth_deg=azimuth,
        elevation_deg=elevation,
        above_horizon=elevation > 0,
    )


def position_at(query: GeoInstant) -> SolarPosition:
    """compute_position for a GeoInstant."""
    return compute_position(query.latitude, query.longitude, query.instant)


def cardinal_direction(azimuth_deg: float) -> str:
    """Nearest of the eight compass points. Halfway values round clockwise."""
    index = math.floor(azimuth_deg / 45 + 0.5) % 8
    return _CARDINALS[index]
