"""
Unit tests for weather payload normalization.

Payloads mirror the decoded JSON shapes of Open-Meteo forecast and
OpenWeatherMap One Call 3.0 responses.
"""

from datetime import datetime

import pytest

from sunoptimizer.exposure import find_optimal_window
from sunoptimizer.normalize import PayloadError, from_open_meteo, from_open_weather

MADRID = (40.4168, -3.7038)
TOKYO = (35.6762, 139.6503)

# 2024-01-01T00:00:00Z
_EPOCH_NEW_YEAR = 1704067200
# 2024-06-21T00:00:00Z
_EPOCH_SOLSTICE = 1718928000


@pytest.fixture
def open_meteo_payload():
    uv = [0.0] * 6 + [0.2, 0.8, 1.9, 3.4, 5.1, 6.6, 7.4, 7.6, 7.0, 5.9, 4.3, 2.6, 1.2, 0.4, 0.0]
    uv += [0.0, 0.0, 0.0]
    uv[3] = None
    return {
        "latitude": 40.42,
        "longitude": -3.70,
        "utc_offset_seconds": 7200,
        "timezone": "Europe/Madrid",
        "timezone_abbreviation": "CEST",
        "current": {"time": "2024-06-21T12:00", "interval": 900, "uv_index": 6.95},
        "hourly": {
            "time": [f"2024-06-21T{h:02d}:00" for h in range(24)],
            "uv_index": uv,
        },
        "daily": {
            "time": ["2024-06-21"],
            "sunrise": ["2024-06-21T06:44"],
            "sunset": ["2024-06-21T21:48"],
            "uv_index_max": [7.6],
        },
    }


@pytest.fixture
def open_weather_payload():
    return {
        "lat": 35.6762,
        "lon": 139.6503,
        "timezone": "Asia/Tokyo",
        "timezone_offset": 32400,
        "current": {
            "dt": _EPOCH_NEW_YEAR,
            "sunrise": _EPOCH_NEW_YEAR - 7200 + 3000,  # 07:50 JST
            "sunset": _EPOCH_NEW_YEAR + 8 * 3600 - 1200,  # 16:40 JST
            "uvi": 3.2,
            "clouds": 20,
        },
        "hourly": [
            {"dt": _EPOCH_NEW_YEAR + i * 3600, "uvi": round(i * 0.1, 1), "clouds": 0}
            for i in range(48)
        ],
    }


class TestFromOpenMeteo:
    def test_hourly_samples(self, open_meteo_payload):
        snapshot = from_open_meteo(open_meteo_payload, *MADRID)
        assert len(snapshot.hourly) == 24
        assert [s.hour for s in snapshot.hourly] == list(range(24))
        assert snapshot.hourly[9].local_time == datetime(2024, 6, 21, 9, 0)
        assert snapshot.hourly[13].uv_index == 7.6

    def test_null_uv_becomes_zero(self, open_meteo_payload):
        snapshot = from_open_meteo(open_meteo_payload, *MADRID)
        assert snapshot.hourly[3].uv_index == 0.0

    def test_metadata(self, open_meteo_payload):
        snapshot = from_open_meteo(open_meteo_payload, *MADRID)
        assert snapshot.latitude == MADRID[0]
        assert snapshot.longitude == MADRID[1]
        assert snapshot.timezone == "Europe/Madrid"
        assert snapshot.utc_offset_seconds == 7200
        assert snapshot.current_uv == 6.95
        assert snapshot.sunrise == datetime(2024, 6, 21, 6, 44)
        assert snapshot.sunset == datetime(2024, 6, 21, 21, 48)

    def test_missing_current_uv_is_zero(self, open_meteo_payload):
        del open_meteo_payload["current"]
        assert from_open_meteo(open_meteo_payload, *MADRID).current_uv == 0.0

    def test_short_uv_array_pads_with_zero(self, open_meteo_payload):
        open_meteo_payload["hourly"]["uv_index"] = [1.0, 2.0]
        snapshot = from_open_meteo(open_meteo_payload, *MADRID)
        assert [s.uv_index for s in snapshot.hourly[:3]] == [1.0, 2.0, 0.0]

    def test_negative_uv_clamped(self, open_meteo_payload):
        open_meteo_payload["hourly"]["uv_index"][0] = -0.3
        assert from_open_meteo(open_meteo_payload, *MADRID).hourly[0].uv_index == 0.0

    def test_offset_tagged_times_shifted_to_zone(self, open_meteo_payload):
        open_meteo_payload["hourly"]["time"] = ["2024-06-21T10:00:00Z"]
        open_meteo_payload["hourly"]["uv_index"] = [5.0]
        sample = from_open_meteo(open_meteo_payload, *MADRID).hourly[0]
        assert sample.local_time == datetime(2024, 6, 21, 12, 0)
        assert sample.hour == 12

    def test_missing_timezone(self, open_meteo_payload):
        del open_meteo_payload["timezone"]
        with pytest.raises(PayloadError):
            from_open_meteo(open_meteo_payload, *MADRID)

    def test_missing_sunrise(self, open_meteo_payload):
        open_meteo_payload["daily"]["sunrise"] = []
        with pytest.raises(PayloadError):
            from_open_meteo(open_meteo_payload, *MADRID)

    def test_non_numeric_uv(self, open_meteo_payload):
        open_meteo_payload["hourly"]["uv_index"][5] = "high"
        with pytest.raises(PayloadError):
            from_open_meteo(open_meteo_payload, *MADRID)

    def test_malformed_time(self, open_meteo_payload):
        open_meteo_payload["hourly"]["time"][0] = "yesterday"
        with pytest.raises(ValueError):
            from_open_meteo(open_meteo_payload, *MADRID)


class TestFromOpenWeather:
    def test_sunrise_day_only(self, open_weather_payload):
        # 48 entries from 09:00 JST; only the rest of 1 January is kept
        snapshot = from_open_weather(open_weather_payload, *TOKYO)
        assert [s.hour for s in snapshot.hourly] == list(range(9, 24))
        day = snapshot.sunrise.date()
        assert all(s.local_time.date() == day for s in snapshot.hourly)

    def test_epochs_to_local_wall_clock(self, open_weather_payload):
        snapshot = from_open_weather(open_weather_payload, *TOKYO)
        first = snapshot.hourly[0]
        assert first.local_time == datetime(2024, 1, 1, 9, 0)
        assert first.hour == 9
        assert snapshot.hourly[-1].hour == 23
        assert snapshot.hourly[-1].local_time == datetime(2024, 1, 1, 23, 0)
        assert snapshot.hourly[5].uv_index == 0.5

    def test_sun_times(self, open_weather_payload):
        snapshot = from_open_weather(open_weather_payload, *TOKYO)
        assert snapshot.sunrise == datetime(2024, 1, 1, 7, 50)
        assert snapshot.sunset == datetime(2024, 1, 1, 16, 40)
        assert snapshot.current_uv == 3.2
        assert snapshot.utc_offset_seconds == 32400
        assert snapshot.timezone == "Asia/Tokyo"

    def test_missing_current(self, open_weather_payload):
        del open_weather_payload["current"]
        with pytest.raises(PayloadError):
            from_open_weather(open_weather_payload, *TOKYO)

    def test_missing_sunset(self, open_weather_payload):
        del open_weather_payload["current"]["sunset"]
        with pytest.raises(PayloadError):
            from_open_weather(open_weather_payload, *TOKYO)

    def test_hourly_entry_without_dt(self, open_weather_payload):
        del open_weather_payload["hourly"][2]["dt"]
        with pytest.raises(PayloadError):
            from_open_weather(open_weather_payload, *TOKYO)

    def test_missing_uvi_is_zero(self, open_weather_payload):
        del open_weather_payload["hourly"][4]["uvi"]
        assert from_open_weather(open_weather_payload, *TOKYO).hourly[4].uv_index == 0.0

    def test_rolling_day_window_stays_on_one_date(self):
        # Rolling 24 h from 15:00 CEST; tomorrow's morning must not extend today's run
        start = _EPOCH_SOLSTICE + 13 * 3600
        payload = {
            "timezone": "Europe/Madrid",
            "timezone_offset": 7200,
            "current": {
                "dt": start,
                "sunrise": _EPOCH_SOLSTICE + 4 * 3600 + 44 * 60,  # 06:44 CEST
                "sunset": _EPOCH_SOLSTICE + 19 * 3600 + 48 * 60,  # 21:48 CEST
                "uvi": 4.0,
            },
            "hourly": [{"dt": start + i * 3600, "uvi": 4.0} for i in range(24)],
        }
        snapshot = from_open_weather(payload, *MADRID)
        assert [s.hour for s in snapshot.hourly] == list(range(15, 24))

        window = find_optimal_window(snapshot.hourly)
        assert window.start_time == datetime(2024, 6, 21, 15, 0)
        assert window.end_time == datetime(2024, 6, 21, 21, 0)
        assert window.start_time < window.end_time
        assert window.duration_minutes == 360


class TestFromOpenMeteoMultiDay:
    @pytest.fixture
    def two_day_payload(self):
        times = [f"2024-06-{d}T{h:02d}:00" for d in (21, 22) for h in range(24)]
        uv = [4.0 if 8 <= h <= 11 else 0.0 for _ in (21, 22) for h in range(24)]
        return {
            "timezone": "Europe/Madrid",
            "utc_offset_seconds": 7200,
            "hourly": {"time": times, "uv_index": uv},
            "daily": {
                "time": ["2024-06-21", "2024-06-22"],
                "sunrise": ["2024-06-21T06:44", "2024-06-22T06:44"],
                "sunset": ["2024-06-21T21:48", "2024-06-22T21:48"],
            },
        }

    def test_keeps_first_day(self, two_day_payload):
        snapshot = from_open_meteo(two_day_payload, *MADRID)
        assert len(snapshot.hourly) == 24
        assert {s.local_time.date() for s in snapshot.hourly} == {
            datetime(2024, 6, 21).date()
        }

    def test_window_covers_one_day(self, two_day_payload):
        window = find_optimal_window(from_open_meteo(two_day_payload, *MADRID).hourly)
        assert window.start_time == datetime(2024, 6, 21, 8, 0)
        assert window.end_time == datetime(2024, 6, 21, 12, 0)
        assert window.duration_minutes == 240
