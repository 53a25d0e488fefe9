"""Top-level composition: one location, one instant, everything the UI shows."""

import logging
from datetime import datetime

from sunoptimizer.exposure import (
    classify_risk,
    find_optimal_window,
    golden_hour,
    protection_advice,
    recommended_exposure_minutes,
)
from sunoptimizer.models import SunReport, WeatherSnapshot
from sunoptimizer.solar import cardinal_direction, compute_position
from sunoptimizer.timeutils import daylight_status

logger = logging.getLogger(__name__)


def build_report(snapshot: WeatherSnapshot, instant: datetime) -> SunReport:
    """Run the solar engine and the exposure analyzer for one query.

    Args:
        snapshot: Normalized weather data (see normalize).
        instant: The moment to evaluate. Naive values are read as UTC.

    Returns:
        Fully computed SunReport. ``window`` is None when no exposure
        recommendation exists for the day.
    """
    position = compute_position(snapshot.latitude, snapshot.longitude, instant)
    window = find_optimal_window(snapshot.hourly)
    if window is None:
        logger.info(
            "No exposure window for lat=%s, lng=%s",
            snapshot.latitude,
            snapshot.longitude,
        )

    return SunReport(
        snapshot=snapshot,
        position=position,
        cardinal=cardinal_direction(position.azimuth_deg),
        risk=classify_risk(snapshot.current_uv),
        protection=protection_advice(snapshot.current_uv),
        exposure_minutes=recommended_exposure_minutes(snapshot.current_uv),
        window=window,
        golden_hour=golden_hour(snapshot.sunrise, snapshot.sunset),
        daylight=daylight_status(
            instant, snapshot.sunrise, snapshot.sunset, snapshot.timezone
        ),
    )
