"""
Global pytest configuration and fixtures.
"""

import os
from datetime import date, datetime

import pytest
import pytz

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from sunmoon.models.sun_moon_data import MoonPhase, RawSunMoonData, SunMoonSnapshot, WaxWane
from sunmoon.render.drawing_surface import ensure_gui_application


class FakeClock:
    """Settable clock returning epoch seconds, for TTLCache."""

    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


# 08:19:20 EDT on the day of the sample payload
FIXED_NOW = datetime(2021, 9, 10, 12, 19, 20, tzinfo=pytz.utc)


@pytest.fixture(scope="session")
def qapp():
    """Create a headless QGuiApplication for tests that paint."""
    return ensure_gui_application()


@pytest.fixture
def sample_payload():
    """Provide a provider answer as returned by ipgeolocation.io."""
    return {
        "location": {"latitude": 42.68, "longitude": -71.47},
        "date": "2021-09-10",
        "current_time": "08:19:20.199",
        "sunrise": "06:20",
        "sunset": "19:04",
        "sun_status": "-",
        "solar_noon": "12:42",
        "day_length": "12:44",
        "moonrise": "10:22",
        "moonset": "21:11",
        "moon_status": "-",
    }


@pytest.fixture
def raw_data(sample_payload):
    """Provide parsed raw data for the sample payload."""
    return RawSunMoonData.from_api(sample_payload)


@pytest.fixture
def snapshot():
    """Provide a snapshot matching the sample payload."""
    return SunMoonSnapshot(
        date=date(2021, 9, 10),
        current_time="08:19:20.199",
        sunrise="06:20",
        sunset="19:04",
        moonrise="10:22",
        moonset="21:11",
        first_light="04:44",
        last_light="20:40",
        lunar_age_days=3.2,
        lunar_illumination_percent=11,
        lunar_wax_wane=WaxWane.WAXING,
        lunar_phase=MoonPhase.WAXING_CRESCENT,
    )


@pytest.fixture
def fixed_now():
    """Provide the fixed current time used by service tests."""
    return FIXED_NOW


@pytest.fixture
def cache_clock():
    """Provide a settable epoch-seconds clock starting at FIXED_NOW."""
    return FakeClock(FIXED_NOW.timestamp())


@pytest.fixture
def cache_path(tmp_path):
    """Provide a temporary cache file path."""
    return tmp_path / "sunmoon-cache.json"
