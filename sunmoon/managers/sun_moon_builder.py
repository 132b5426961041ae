"""
Sun and moon image builder.

SunMoonBuilder is the public entry point: it fetches (or reuses) the
astronomy snapshot, renders the dial and hands the JPEG to an image writer.
"""

import logging
from datetime import date
from typing import Callable, Optional, Union

from ..api.ipgeolocation_api_manager import AstronomyDataProvider
from ..render.dial_renderer import DialRenderer, IMAGE_HEIGHT, IMAGE_WIDTH
from ..render.drawing_surface import DEFAULT_JPEG_QUALITY, DrawingSurface, QtDrawingSurface
from ..utils.image_writer import ImageWriter
from .astronomy_data_service import AstronomyDataService

logger = logging.getLogger(__name__)


def _default_surface() -> DrawingSurface:
    return QtDrawingSurface(IMAGE_WIDTH, IMAGE_HEIGHT)


class SunMoonBuilder:
    """Creates dial images for locations."""

    def __init__(self, data_service: AstronomyDataService,
                 provider: AstronomyDataProvider,
                 writer: ImageWriter,
                 renderer: Optional[DialRenderer] = None,
                 surface_factory: Optional[Callable[[], DrawingSurface]] = None,
                 jpeg_quality: int = DEFAULT_JPEG_QUALITY):
        self.data_service = data_service
        self.provider = provider
        self.writer = writer
        self.renderer = renderer or DialRenderer()
        self.surface_factory = surface_factory or _default_surface
        self.jpeg_quality = jpeg_quality

    async def create_image(self, location: str, file_name: str, lat: str, lon: str,
                           api_key: str, time_zone: str,
                           date_override: Union[date, str, None] = None) -> bool:
        """
        Create and write the dial image for one location.

        Args:
            location: Location name for the title
            file_name: Output file name handed to the writer
            lat: Latitude
            lon: Longitude
            api_key: Provider API key
            time_zone: IANA time zone name of the location
            date_override: Calendar date to render instead of today

        Returns:
            bool: True if the image was written, False otherwise
        """
        try:
            snapshot = await self.data_service.get_snapshot(
                lat, lon, self.provider, api_key, time_zone, date_override
            )
            if snapshot is None:
                logger.warning(f"Failed to get data for {location}, no image available")
                return False

            surface = self.surface_factory()
            self.renderer.render(snapshot, f"Sun & Moon Times for {location}", surface)
            image_data = surface.encode_jpeg(self.jpeg_quality)
            if not image_data:
                logger.error(f"No image data produced for {location}")
                return False

            logger.info(f"Writing: {file_name}")
            self.writer.save_file(file_name, image_data)
            return True
        except Exception as e:
            logger.error(f"create_image failed for {location}: {e}")
            return False
