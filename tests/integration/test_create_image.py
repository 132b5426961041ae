"""
End-to-end tests for create_image with a real cache, Qt surface and writer.
"""

import dataclasses
from unittest.mock import AsyncMock

import pytest

from sunmoon.api.ipgeolocation_api_manager import AstronomyDataProvider, AstronomyNetworkException
from sunmoon.cache.ttl_cache import TTLCache
from sunmoon.managers.astronomy_data_service import AstronomyDataService
from sunmoon.managers.sun_moon_builder import SunMoonBuilder
from sunmoon.utils.image_writer import SimpleImageWriter

TIME_ZONE = "America/New_York"


@pytest.fixture
def provider(raw_data):
    provider = AsyncMock(spec=AstronomyDataProvider)
    provider.fetch.return_value = raw_data
    provider.get_source_name.return_value = "mock"
    return provider


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "images"


@pytest.fixture
def builder(qapp, provider, output_dir, cache_path, cache_clock, fixed_now):
    service = AstronomyDataService(TTLCache(str(cache_path), clock=cache_clock), clock=lambda: fixed_now)
    return SunMoonBuilder(service, provider, SimpleImageWriter(str(output_dir)))


async def _create(builder):
    return await builder.create_image(
        location="Onset, MA",
        file_name="onset.jpg",
        lat="42.68",
        lon="-71.47",
        api_key="key",
        time_zone=TIME_ZONE,
    )


class TestCreateImage:
    """Test the whole pipeline."""

    @pytest.mark.asyncio
    async def test_writes_jpeg(self, builder, output_dir, cache_path):
        assert await _create(builder) is True

        image = output_dir / "onset.jpg"
        assert image.exists()
        assert image.read_bytes()[:2] == b"\xff\xd8"
        assert cache_path.exists()

    @pytest.mark.asyncio
    async def test_second_image_uses_cache(self, builder, provider):
        assert await _create(builder) is True
        assert await _create(builder) is True

        assert provider.fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_failing_provider_writes_nothing(self, builder, provider, output_dir):
        provider.fetch.side_effect = AstronomyNetworkException("Request timed out")

        assert await _create(builder) is False
        assert not (output_dir / "onset.jpg").exists()

    @pytest.mark.asyncio
    async def test_day_without_moon_events(self, builder, provider, raw_data, output_dir):
        provider.fetch.return_value = dataclasses.replace(raw_data, moonrise="-:-", moonset="-:-")

        assert await _create(builder) is True
        assert (output_dir / "onset.jpg").exists()

    @pytest.mark.asyncio
    async def test_malformed_times_still_render(self, builder, provider, raw_data, output_dir):
        provider.fetch.return_value = dataclasses.replace(raw_data, sunrise="25:00", current_time="??")

        assert await _create(builder) is True
        assert (output_dir / "onset.jpg").exists()
