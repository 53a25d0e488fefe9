"""Input boundary that turns decoded weather-provider payloads into a WeatherSnapshot.

Provider responses are loosely typed (optional blocks, nulls inside arrays,
local strings with or without offsets). Every such quirk is resolved here so
the analyzer only ever sees HourlyUVSample values in local wall-clock time.
No network I/O happens in this module; callers pass already-decoded JSON.
"""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from sunoptimizer.models import HourlyUVSample, WeatherSnapshot
from sunoptimizer.timeutils import (
    parse_local_timestamp,
    resolve_wall_clock,
    wall_clock_from_epoch,
)

logger = logging.getLogger(__name__)


class PayloadError(ValueError):
    """A provider payload is missing required fields or has the wrong shape."""


def _require(payload: Mapping[str, Any], key: str, source: str) -> Any:
    try:
        return payload[key]
    except (KeyError, TypeError):
        raise PayloadError(f"{source}: missing '{key}'") from None


def _on_day(
    samples: list[HourlyUVSample], day: date, source: str
) -> tuple[HourlyUVSample, ...]:
    """Samples whose wall-clock date is the forecast day.

    Providers return rolling or multi-day series; the analyzer groups by hour
    of day, so hours from other dates must not reach it.
    """
    kept = tuple(s for s in samples if s.local_time.date() == day)
    if len(kept) < len(samples):
        logger.debug(
            "%s: dropped %d hourly samples outside %s",
            source,
            len(samples) - len(kept),
            day,
        )
    return kept


def _uv_value(raw: Any, where: str) -> float:
    """UV reading as a non-negative float. Missing readings count as 0."""
    if raw is None:
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise PayloadError(f"{where}: UV value {raw!r} is not a number") from None
    if value < 0:
        logger.warning("%s: negative UV %s clamped to 0", where, value)
        return 0.0
    return value


def from_open_meteo(
    payload: Mapping[str, Any], latitude: float, longitude: float
) -> WeatherSnapshot:
    """Normalize an Open-Meteo forecast response.

    Expects the request to have asked for ``hourly=uv_index``,
    ``daily=sunrise,sunset`` and ``timezone=auto``. Times in the response are
    local wall-clock strings without an offset ("2026-01-08T09:00").
    Only hours on the date of the first sunrise are kept, so multi-day
    responses (the default is seven days) analyze the first day.

    Raises:
        PayloadError: If timezone or sunrise/sunset data is missing.
    """
    source = "open-meteo"
    tz_name = _require(payload, "timezone", source)
    hourly = payload.get("hourly") or {}
    times = hourly.get("time") or []
    uv_values = hourly.get("uv_index") or []

    samples: list[HourlyUVSample] = []
    for index, raw_time in enumerate(times):
        stamp = parse_local_timestamp(raw_time)
        wall_clock = resolve_wall_clock(stamp, tz_name)
        raw_uv = uv_values[index] if index < len(uv_values) else None
        samples.append(
            HourlyUVSample(
                local_time=wall_clock,
                hour=wall_clock.hour,
                uv_index=_uv_value(raw_uv, f"{source} hourly[{index}]"),
            )
        )

    daily = payload.get("daily") or {}
    sunrises = daily.get("sunrise") or []
    sunsets = daily.get("sunset") or []
    if not sunrises or not sunsets:
        raise PayloadError(f"{source}: missing daily sunrise/sunset")

    sunrise = resolve_wall_clock(parse_local_timestamp(sunrises[0]), tz_name)
    sunset = resolve_wall_clock(parse_local_timestamp(sunsets[0]), tz_name)
    current = payload.get("current") or {}
    return WeatherSnapshot(
        latitude=latitude,
        longitude=longitude,
        timezone=tz_name,
        utc_offset_seconds=int(payload.get("utc_offset_seconds") or 0),
        current_uv=_uv_value(current.get("uv_index"), f"{source} current"),
        hourly=_on_day(samples, sunrise.date(), source),
        sunrise=sunrise,
        sunset=sunset,
    )


def from_open_weather(
    payload: Mapping[str, Any], latitude: float, longitude: float
) -> WeatherSnapshot:
    """Normalize an OpenWeatherMap One Call 3.0 response.

    All times arrive as Unix epochs; they are converted to wall-clock time in
    the payload's IANA timezone. The hourly series is rolling (it starts at the
    current hour), so only hours on the local date of today's sunrise are kept.

    Raises:
        PayloadError: If timezone, current or hourly data is missing.
    """
    source = "openweather"
    tz_name = _require(payload, "timezone", source)
    current = _require(payload, "current", source)
    hourly = _require(payload, "hourly", source)

    samples: list[HourlyUVSample] = []
    for index, entry in enumerate(hourly):
        wall_clock = wall_clock_from_epoch(
            _require(entry, "dt", f"{source} hourly[{index}]"), tz_name
        )
        samples.append(
            HourlyUVSample(
                local_time=wall_clock,
                hour=wall_clock.hour,
                uv_index=_uv_value(entry.get("uvi"), f"{source} hourly[{index}]"),
            )
        )

    sunrise = wall_clock_from_epoch(
        _require(current, "sunrise", f"{source} current"), tz_name
    )
    sunset = wall_clock_from_epoch(
        _require(current, "sunset", f"{source} current"), tz_name
    )
    return WeatherSnapshot(
        latitude=latitude,
        longitude=longitude,
        timezone=tz_name,
        utc_offset_seconds=int(payload.get("timezone_offset") or 0),
        current_uv=_uv_value(current.get("uvi"), f"{source} current"),
        hourly=_on_day(samples, sunrise.date(), source),
        sunrise=sunrise,
        sunset=sunset,
    )
