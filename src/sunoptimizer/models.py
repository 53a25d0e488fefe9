"""Data model definitions — explicit boundaries between input, compute, and report layers."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class GeoInstant:
    """A location and an absolute instant. Constructed per query."""

    latitude: float  # Decimal degrees, [-90, 90]
    longitude: float  # Decimal degrees, [-180, 180]
    instant: datetime  # UTC datetime (with tzinfo=utc)


@dataclass(frozen=True)
class SolarPosition:
    """Sun position in horizontal coordinates."""

    azimuth_deg: float  # [0, 360), clockwise from true north
    elevation_deg: float  # [-90, 90], negative below the horizon
    above_horizon: bool  # elevation_deg > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "azimuth_deg": self.azimuth_deg,
            "elevation_deg": self.elevation_deg,
            "above_horizon": self.above_horizon,
        }


@dataclass(frozen=True)
class LocalTimestamp:
    """A parsed timestamp string, tagged by whether it carried a UTC offset.

    Weather providers disagree: Open-Meteo sends bare local wall-clock strings
    ("2024-01-08T09:00"), OpenWeatherMap-derived strings carry "+01:00" or "Z".
    """

    wall_clock: datetime  # Naive; the clock reading exactly as written
    utc_offset: timedelta | None  # None when the string had no offset

    @property
    def has_offset(self) -> bool:
        return self.utc_offset is not None


@dataclass(frozen=True)
class HourlyUVSample:
    """UV index for one local hour."""

    local_time: datetime  # Naive local wall-clock time at the location
    hour: int  # Local hour of day, 0-23
    uv_index: float  # >= 0


class RiskLevel(Enum):
    """UV exposure risk, ordered by increasing UV threshold."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very-high"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)

    def __lt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank


_RISK_ORDER = tuple(RiskLevel)


class ReasonTag(str, Enum):
    """Why a window was chosen. Presentation looks these up in its own dictionary."""

    OPTIMAL_UV = "optimalUV"
    LOW_UV_TODAY = "lowUVToday"
    VERY_LOW_UV_TODAY = "veryLowUVToday"
    HIGH_UV_TODAY = "highUVToday"
    EXTREME_UV_TODAY = "extremeUVToday"


@dataclass(frozen=True)
class UVRange:
    min: float
    max: float


@dataclass(frozen=True)
class ExposureWindow:
    """Recommended block of hours for sun exposure."""

    start_time: datetime  # Local wall clock, start of the first hour
    end_time: datetime  # Local wall clock, end of the last hour
    uv_range: UVRange
    duration_minutes: int
    is_good_for_vitamin_d: bool
    reason_tag: ReasonTag
    reason_params: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "uv_range": {"min": self.uv_range.min, "max": self.uv_range.max},
            "duration_minutes": self.duration_minutes,
            "is_good_for_vitamin_d": self.is_good_for_vitamin_d,
            "reason_tag": self.reason_tag.value,
            "reason_params": dict(self.reason_params),
        }


@dataclass(frozen=True)
class GoldenHourBounds:
    """The hour after sunrise and the hour before sunset."""

    morning_start: datetime  # == sunrise
    morning_end: datetime  # sunrise + 1h
    evening_start: datetime  # sunset - 1h
    evening_end: datetime  # == sunset

    def to_dict(self) -> dict[str, str]:
        return {
            "morning_start": self.morning_start.isoformat(),
            "morning_end": self.morning_end.isoformat(),
            "evening_start": self.evening_start.isoformat(),
            "evening_end": self.evening_end.isoformat(),
        }


@dataclass(frozen=True)
class ProtectionAdvice:
    """Risk level with the sunscreen factor it calls for."""

    level: RiskLevel
    spf_needed: int


@dataclass(frozen=True)
class DaylightStatus:
    """Day/night state of a location at one instant."""

    is_daytime: bool
    local_time: datetime  # Aware, in the location's timezone
    sunrise: datetime  # Aware
    sunset: datetime  # Aware
    solar_noon: datetime  # Aware; midpoint of sunrise and sunset
    day_length_seconds: int


@dataclass(frozen=True)
class WeatherSnapshot:
    """Normalized weather input for one location and day. Input to analysis."""

    latitude: float
    longitude: float
    timezone: str  # IANA name ("Europe/Madrid")
    utc_offset_seconds: int
    current_uv: float
    hourly: tuple[HourlyUVSample, ...]
    sunrise: datetime  # Naive local wall clock
    sunset: datetime  # Naive local wall clock


@dataclass(frozen=True)
class SunReport:
    """The sole value handed to a presentation layer. Fully computed state."""

    snapshot: WeatherSnapshot
    position: SolarPosition
    cardinal: str  # Compass point of the sun's azimuth ("SE")
    risk: RiskLevel  # For snapshot.current_uv
    protection: ProtectionAdvice
    exposure_minutes: int
    window: ExposureWindow | None  # None: no recommendation available today
    golden_hour: GoldenHourBounds
    daylight: DaylightStatus

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "location": {
                "latitude": self.snapshot.latitude,
                "longitude": self.snapshot.longitude,
                "timezone": self.snapshot.timezone,
            },
            "current_uv": self.snapshot.current_uv,
            "position": self.position.to_dict(),
            "cardinal": self.cardinal,
            "risk": self.risk.value,
            "spf_needed": self.protection.spf_needed,
            "exposure_minutes": self.exposure_minutes,
            "window": self.window.to_dict() if self.window else None,
            "golden_hour": self.golden_hour.to_dict(),
            "is_daytime": self.daylight.is_daytime,
            "solar_noon": self.daylight.solar_noon.isoformat(),
            "day_length_seconds": self.daylight.day_length_seconds,
        }
