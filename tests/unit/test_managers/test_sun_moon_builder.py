"""
Tests for the image builder entry point.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from sunmoon.api.ipgeolocation_api_manager import AstronomyDataProvider
from sunmoon.managers.astronomy_data_service import AstronomyDataService
from sunmoon.managers.sun_moon_builder import SunMoonBuilder
from sunmoon.render.drawing_surface import DrawingSurface
from sunmoon.utils.image_writer import ImageWriter


@pytest.fixture
def data_service(snapshot):
    service = AsyncMock(spec=AstronomyDataService)
    service.get_snapshot.return_value = snapshot
    return service


@pytest.fixture
def surface():
    surface = Mock(spec=DrawingSurface)
    surface.width = 1920
    surface.height = 1080
    surface.measure_text.return_value = 100.0
    surface.encode_jpeg.return_value = b"\xff\xd8jpeg"
    return surface


@pytest.fixture
def writer():
    return Mock(spec=ImageWriter)


@pytest.fixture
def provider():
    return AsyncMock(spec=AstronomyDataProvider)


@pytest.fixture
def builder(data_service, provider, writer, surface):
    return SunMoonBuilder(data_service, provider, writer, surface_factory=lambda: surface)


async def _create(builder, **overrides):
    args = dict(
        location="Onset, MA",
        file_name="onset.jpg",
        lat="42.4",
        lon="-71.6",
        api_key="key",
        time_zone="America/New_York",
    )
    args.update(overrides)
    return await builder.create_image(**args)


class TestCreateImage:
    """Test create_image."""

    @pytest.mark.asyncio
    async def test_success_writes_image(self, builder, data_service, provider, writer, surface):
        assert await _create(builder) is True

        data_service.get_snapshot.assert_awaited_once_with(
            "42.4", "-71.6", provider, "key", "America/New_York", None
        )
        surface.encode_jpeg.assert_called_once_with(80)
        writer.save_file.assert_called_once_with("onset.jpg", b"\xff\xd8jpeg")

    @pytest.mark.asyncio
    async def test_title_includes_location(self, builder, surface):
        await _create(builder)

        texts = [c.args[0] for c in surface.fill_text.call_args_list]
        assert "Sun & Moon Times for Onset, MA" in texts

    @pytest.mark.asyncio
    async def test_date_override_passed_through(self, builder, data_service, provider):
        await _create(builder, date_override="2021-12-25")

        data_service.get_snapshot.assert_awaited_once_with(
            "42.4", "-71.6", provider, "key", "America/New_York", "2021-12-25"
        )

    @pytest.mark.asyncio
    async def test_no_snapshot_returns_false(self, data_service, provider, writer):
        data_service.get_snapshot.return_value = None
        surface_factory = Mock()
        builder = SunMoonBuilder(data_service, provider, writer, surface_factory=surface_factory)

        assert await _create(builder) is False
        surface_factory.assert_not_called()
        writer.save_file.assert_not_called()

    @pytest.mark.asyncio
    async def test_service_exception_returns_false(self, builder, data_service, writer):
        data_service.get_snapshot.side_effect = RuntimeError("boom")

        assert await _create(builder) is False
        writer.save_file.assert_not_called()

    @pytest.mark.asyncio
    async def test_encode_failure_returns_false(self, builder, surface, writer):
        surface.encode_jpeg.side_effect = RuntimeError("Failed to encode image as JPEG")

        assert await _create(builder) is False
        writer.save_file.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_image_returns_false(self, builder, surface, writer):
        surface.encode_jpeg.return_value = b""

        assert await _create(builder) is False
        writer.save_file.assert_not_called()

    @pytest.mark.asyncio
    async def test_writer_failure_returns_false(self, builder, writer):
        writer.save_file.side_effect = OSError("disk full")

        assert await _create(builder) is False

    @pytest.mark.asyncio
    async def test_draw_failure_still_writes_image(self, builder, surface, writer):
        """Test a failing draw call does not stop the image being written."""
        surface.fill_rect.side_effect = RuntimeError("paint error")

        assert await _create(builder) is True
        writer.save_file.assert_called_once()
