"""Time and timezone helpers shared by the input boundary and the analyzer.

The analyzer works on local wall-clock times only; everything that knows about
UTC offsets or IANA zones lives here.
"""

import logging
import re
from datetime import datetime, timedelta

from pytz import FixedOffset, timezone, utc
from pytz.exceptions import AmbiguousTimeError, NonExistentTimeError
from timezonefinder import TimezoneFinder

from sunoptimizer.config import get_settings
from sunoptimizer.models import DaylightStatus, LocalTimestamp

logger = logging.getLogger(__name__)

_tf = TimezoneFinder()

_TIMESTAMP_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[T ](?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.\d+)?)?"
    r"(?P<offset>Z|[+-]\d{2}:?\d{2})?$"
)


def parse_local_timestamp(text: str) -> LocalTimestamp:
    """Parse an ISO-8601 timestamp without touching its clock reading.

    "2024-01-05T14:00" and "2024-01-05T14:00:00+01:00" both read 14:00; only
    the second is tagged with an offset.

    Raises:
        ValueError: If the string is not an ISO-8601 date-time.
    """
    if not isinstance(text, str):
        raise ValueError(f"Invalid timestamp: {text!r}")
    match = _TIMESTAMP_RE.match(text.strip())
    if match is None:
        raise ValueError(f"Invalid timestamp: {text!r}")
    wall_clock = datetime.strptime(
        f"{match['date']} {match['hour']}:{match['minute']}:{match['second'] or '00'}",
        "%Y-%m-%d %H:%M:%S",
    )

    raw_offset = match["offset"]
    if raw_offset is None:
        offset = None
    elif raw_offset == "Z":
        offset = timedelta(0)
    else:
        digits = raw_offset[1:].replace(":", "")
        offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        if raw_offset[0] == "-":
            offset = -offset
    return LocalTimestamp(wall_clock=wall_clock, utc_offset=offset)


def extract_hour(text: str) -> int:
    """Hour of day as written in the string, independent of the host timezone."""
    return parse_local_timestamp(text).wall_clock.hour


def timezone_for(latitude: float, longitude: float) -> str:
    """IANA timezone name for a coordinate.

    Points without a zone (open ocean, some polar areas) get the configured
    default timezone.
    """
    tz_name = _tf.timezone_at(lat=latitude, lng=longitude)
    if tz_name is None:
        tz_name = get_settings().default_timezone
        logger.warning(
            "No timezone at lat=%s, lng=%s; using %s", latitude, longitude, tz_name
        )
    return tz_name


def localize(wall_clock: datetime, tz_name: str) -> datetime:
    """Attach an IANA zone to a naive wall-clock time.

    A reading that is ambiguous or skipped by a DST change resolves to the
    standard-time interpretation.
    """
    tz = timezone(tz_name)
    try:
        return tz.localize(wall_clock, is_dst=None)
    except (AmbiguousTimeError, NonExistentTimeError):
        return tz.localize(wall_clock, is_dst=False)


def to_local(instant: datetime, tz_name: str) -> datetime:
    """Convert an instant to the zone's local time. Naive input is UTC."""
    if instant.tzinfo is None:
        instant = utc.localize(instant)
    return instant.astimezone(timezone(tz_name))


def wall_clock_from_epoch(epoch_seconds: float, tz_name: str) -> datetime:
    """Naive local wall-clock time of a Unix timestamp."""
    instant = datetime.fromtimestamp(epoch_seconds, tz=utc)
    return to_local(instant, tz_name).replace(tzinfo=None)


def resolve_wall_clock(stamp: LocalTimestamp, tz_name: str) -> datetime:
    """Naive wall-clock time of a parsed timestamp in the given zone.

    Offset-tagged stamps are shifted into the zone; bare stamps are already
    local and are returned unchanged.
    """
    if stamp.utc_offset is None:
        return stamp.wall_clock
    offset_minutes = int(stamp.utc_offset.total_seconds() // 60)
    aware = stamp.wall_clock.replace(tzinfo=FixedOffset(offset_minutes))
    return to_local(aware, tz_name).replace(tzinfo=None)


def day_length_seconds(sunrise: datetime, sunset: datetime) -> int:
    return int((sunset - sunrise).total_seconds())


def solar_noon(sunrise: datetime, sunset: datetime) -> datetime:
    """Midpoint between sunrise and sunset."""
    return sunrise + (sunset - sunrise) / 2


def daylight_status(
    now: datetime, sunrise: datetime, sunset: datetime, tz_name: str
) -> DaylightStatus:
    """Whether `now` falls between sunrise and sunset at the location.

    Args:
        now: Instant to check. Naive values are read as UTC.
        sunrise: Naive local wall-clock sunrise.
        sunset: Naive local wall-clock sunset.
        tz_name: IANA zone of the location.
    """
    tz = timezone(tz_name)
    local_now = to_local(now, tz_name)
    sunrise_local = localize(sunrise, tz_name)
    sunset_local = localize(sunset, tz_name)
    return DaylightStatus(
        is_daytime=sunrise_local <= local_now <= sunset_local,
        local_time=local_now,
        sunrise=sunrise_local,
        sunset=sunset_local,
        solar_noon=tz.normalize(solar_noon(sunrise_local, sunset_local)),
        day_length_seconds=day_length_seconds(sunrise_local, sunset_local),
    )
