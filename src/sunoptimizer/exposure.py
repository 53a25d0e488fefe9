"""UV exposure analysis: risk classification and the daily exposure window.

All times here are local wall-clock times at the location. Timezone
resolution happens before samples reach this module (see timeutils).
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from sunoptimizer.config import (
    DAYLIGHT_HOURS,
    EARLY_MORNING_HOURS,
    EXPOSURE_MINUTES_FALLBACK,
    EXPOSURE_MINUTES_STEPS,
    MAX_LOW_UV_WINDOW_HOURS,
    MEANINGFUL_UV_MIN,
    MORNING_CUTOFF_HOUR,
    OPTIMAL_UV_RANGE,
    SAFE_UV_MIN,
    SPF_RECOMMENDATIONS,
    UV_THRESHOLDS,
)
from sunoptimizer.models import (
    ExposureWindow,
    GoldenHourBounds,
    HourlyUVSample,
    ProtectionAdvice,
    ReasonTag,
    RiskLevel,
    UVRange,
)

logger = logging.getLogger(__name__)

_ONE_HOUR = timedelta(hours=1)

Run = list[HourlyUVSample]


def classify_risk(uv_index: float) -> RiskLevel:
    """Risk level for a UV index. Bands are half-open: [lower, upper)."""
    for level, upper in UV_THRESHOLDS:
        if uv_index < upper:
            return level
    return RiskLevel.EXTREME


def protection_advice(uv_index: float) -> ProtectionAdvice:
    level = classify_risk(uv_index)
    return ProtectionAdvice(level=level, spf_needed=SPF_RECOMMENDATIONS[level])


def recommended_exposure_minutes(uv_index: float) -> int:
    """Rough safe exposure time for the current UV.

    A step function standing in for skin-type-specific dosimetry; it never
    increases as UV rises.
    """
    for ceiling, minutes in EXPOSURE_MINUTES_STEPS:
        if uv_index <= ceiling:
            return minutes
    return EXPOSURE_MINUTES_FALLBACK


def golden_hour(sunrise: datetime, sunset: datetime) -> GoldenHourBounds:
    """The hour after sunrise and the hour before sunset."""
    return GoldenHourBounds(
        morning_start=sunrise,
        morning_end=sunrise + _ONE_HOUR,
        evening_start=sunset - _ONE_HOUR,
        evening_end=sunset,
    )


def contiguous_runs(samples: Sequence[HourlyUVSample]) -> list[Run]:
    """Split samples into maximal runs of consecutive hours.

    Samples are ordered by hour first (stable, so duplicates keep input
    order). A repeated hour or a gap starts a new run.
    """
    if not samples:
        return []
    ordered = sorted(samples, key=lambda s: s.hour)
    runs: list[Run] = [[ordered[0]]]
    for sample in ordered[1:]:
        if sample.hour == runs[-1][-1].hour + 1:
            runs[-1].append(sample)
        else:
            runs.append([sample])
    return runs


def _window(
    selected: Sequence[HourlyUVSample],
    reason: ReasonTag,
    good_for_vitamin_d: bool,
    peak_uv: float | None = None,
) -> ExposureWindow:
    uv_values = [s.uv_index for s in selected]
    params = {} if peak_uv is None else {"uv": round(peak_uv, 1)}
    logger.debug(
        "Exposure window %s: %s-%s (%d h)",
        reason.value,
        selected[0].local_time,
        selected[-1].local_time + _ONE_HOUR,
        len(selected),
    )
    return ExposureWindow(
        start_time=selected[0].local_time,
        end_time=selected[-1].local_time + _ONE_HOUR,
        uv_range=UVRange(min=min(uv_values), max=max(uv_values)),
        duration_minutes=len(selected) * 60,
        is_good_for_vitamin_d=good_for_vitamin_d,
        reason_tag=reason,
        reason_params=params,
    )


def _trim_around_peak(run: Run, peak_hour: int) -> Run:
    """Cut a run down to MAX_LOW_UV_WINDOW_HOURS starting two hours before the peak.

    Clamping at the run's end can leave fewer hours than the maximum.
    """
    if len(run) <= MAX_LOW_UV_WINDOW_HOURS:
        return run
    peak_index = next((i for i, s in enumerate(run) if s.hour == peak_hour), -1)
    start = max(0, peak_index - 2)
    end = min(len(run), start + MAX_LOW_UV_WINDOW_HOURS)
    return run[start:end]


def find_optimal_window(
    samples: Sequence[HourlyUVSample],
) -> ExposureWindow | None:
    """Best block of hours for sun exposure today.

    Only local hours 6-20 are considered. Cases are tried in order:

    1. Some hours have UV 3-7: the longest run of them (``optimalUV``).
    2. Every hour is below UV 3: the run of UV >= 1 hours around the peak,
       at most four hours (``lowUVToday``), or the peak hour alone when no
       hour reaches UV 1 (``veryLowUVToday``).
    3. The day peaks above 7: the first morning run of UV 2-7 hours, else the
       first such run (``highUVToday``).
    4. Nothing is safe: hours 7-9 only (``extremeUVToday``).

    Args:
        samples: Hourly UV for one day in local time.

    Returns:
        The recommended ExposureWindow, or None when no recommendation can
        be made (no daylight samples, or no early-morning hours on an
        extreme day).
    """
    first_hour, last_hour = DAYLIGHT_HOURS
    daylight = [s for s in samples if first_hour <= s.hour <= last_hour]
    if not daylight:
        return None

    peak = max(daylight, key=lambda s: s.uv_index)
    optimal_min, optimal_max = OPTIMAL_UV_RANGE

    optimal = [s for s in daylight if optimal_min <= s.uv_index <= optimal_max]
    if optimal:
        best: Run = []
        for run in contiguous_runs(optimal):
            if len(run) > len(best):
                best = run
        return _window(best, ReasonTag.OPTIMAL_UV, True)

    if all(s.uv_index < optimal_min for s in daylight):
        meaningful = [s for s in daylight if s.uv_index >= MEANINGFUL_UV_MIN]
        if not meaningful:
            return _window(
                [peak], ReasonTag.VERY_LOW_UV_TODAY, False, peak.uv_index
            )
        runs = contiguous_runs(meaningful)
        with_peak = next(
            (run for run in runs if any(s.hour == peak.hour for s in run)),
            runs[0],
        )
        selected = _trim_around_peak(with_peak, peak.hour)
        return _window(selected, ReasonTag.LOW_UV_TODAY, False, peak.uv_index)

    safe = [s for s in daylight if SAFE_UV_MIN <= s.uv_index <= optimal_max]
    if safe:
        runs = contiguous_runs(safe)
        morning = next(
            (run for run in runs if run[0].hour < MORNING_CUTOFF_HOUR), runs[0]
        )
        return _window(morning, ReasonTag.HIGH_UV_TODAY, True, peak.uv_index)

    early_first, early_last = EARLY_MORNING_HOURS
    early = [s for s in daylight if early_first <= s.hour <= early_last]
    if early:
        return _window(early, ReasonTag.EXTREME_UV_TODAY, False, peak.uv_index)

    logger.debug("No exposure window: peak UV %.1f and no early hours", peak.uv_index)
    return None
