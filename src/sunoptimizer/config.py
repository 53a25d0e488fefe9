"""Static threshold tables and environment-driven settings."""

import math
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from sunoptimizer.models import RiskLevel

# WHO UV index bands. Each level covers [lower, upper); every edge is compared with "<".
UV_THRESHOLDS: tuple[tuple[RiskLevel, float], ...] = (
    (RiskLevel.LOW, 3.0),
    (RiskLevel.MODERATE, 6.0),
    (RiskLevel.HIGH, 8.0),
    (RiskLevel.VERY_HIGH, 11.0),
    (RiskLevel.EXTREME, math.inf),
)

# Vitamin D synthesis without excessive burn risk (inclusive both ends)
OPTIMAL_UV_RANGE: tuple[float, float] = (3.0, 7.0)

# Lower UV bound of the "safe" hours used on high-UV days
SAFE_UV_MIN = 2.0

# Hours below this UV do not count on low-UV days
MEANINGFUL_UV_MIN = 1.0

# Local hours considered for a recommendation (inclusive)
DAYLIGHT_HOURS: tuple[int, int] = (6, 20)
EARLY_MORNING_HOURS: tuple[int, int] = (7, 9)

MAX_LOW_UV_WINDOW_HOURS = 4

# Hours before noon count as "morning" when picking a safe run
MORNING_CUTOFF_HOUR = 12

SPF_RECOMMENDATIONS: dict[RiskLevel, int] = {
    RiskLevel.LOW: 15,
    RiskLevel.MODERATE: 30,
    RiskLevel.HIGH: 30,
    RiskLevel.VERY_HIGH: 50,
    RiskLevel.EXTREME: 50,
}

# (inclusive UV ceiling, minutes); anything above the last ceiling gets the fallback
EXPOSURE_MINUTES_STEPS: tuple[tuple[float, int], ...] = (
    (2.0, 60),
    (5.0, 30),
    (7.0, 20),
    (10.0, 15),
)
EXPOSURE_MINUTES_FALLBACK = 10


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Read from the environment (and .env) once."""

    log_level: str = "WARNING"
    default_timezone: str = "UTC"  # Used when a coordinate has no IANA zone


@lru_cache()
def get_settings() -> Settings:
    """Cached settings factory.

    Environment variables:
        SUNOPTIMIZER_LOG_LEVEL: Logging level name (default WARNING).
        SUNOPTIMIZER_DEFAULT_TIMEZONE: Fallback IANA timezone (default UTC).
    """
    load_dotenv()
    return Settings(
        log_level=os.environ.get("SUNOPTIMIZER_LOG_LEVEL", "WARNING").upper(),
        default_timezone=os.environ.get("SUNOPTIMIZER_DEFAULT_TIMEZONE", "UTC"),
    )
