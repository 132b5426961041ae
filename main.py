"""
Main entry point for Sun Moon Builder.

This module sets up logging, loads the configuration and renders the dial
image for every configured location.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
from dotenv import load_dotenv

from version import get_astronomy_info, get_version_string
from sunmoon.api import AioHttpClient, IPGeolocationProvider
from sunmoon.cache import TTLCache
from sunmoon.managers import (
    AstronomyDataService,
    BuilderConfig,
    ConfigManager,
    ConfigurationError,
    LocationConfig,
    SunMoonBuilder,
)
from sunmoon.utils import SimpleImageWriter

logger = logging.getLogger(__name__)


def setup_logging(log_dir: Path, level: str = "INFO"):
    """Setup logging with file and console output."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "sunmoon.log"

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(str(log_file)), logging.StreamHandler()],
    )

    # Per-command draw logging is only useful when debugging the layout
    logging.getLogger("sunmoon.render").setLevel(logging.INFO)
    logging.getLogger("sunmoon.api").setLevel(logging.INFO)


def select_locations(config: BuilderConfig, name: Optional[str]) -> List[LocationConfig]:
    """Get the configured locations, or only the one with the given name."""
    if name is None:
        return list(config.locations)
    return [location for location in config.locations if location.name == name]


async def build_images(config: BuilderConfig, locations: List[LocationConfig],
                       date_override: Optional[str] = None) -> bool:
    """
    Render every location.

    Returns:
        bool: True only if every image was written
    """
    cache = TTLCache(config.cache_file)
    provider = IPGeolocationProvider(
        AioHttpClient(timeout_seconds=config.timeout_seconds), base_url=config.base_url
    )
    builder = SunMoonBuilder(
        data_service=AstronomyDataService(cache),
        provider=provider,
        writer=SimpleImageWriter(config.output_directory),
    )

    success = True
    try:
        for location in locations:
            ok = await builder.create_image(
                location=location.name,
                file_name=location.file_name,
                lat=location.lat,
                lon=location.lon,
                api_key=config.api_key,
                time_zone=config.time_zone_for(location),
                date_override=date_override or location.date,
            )
            if ok:
                logger.info(f"Created {location.file_name} for {location.name}")
            else:
                logger.error(f"Failed to create {location.file_name} for {location.name}")
            success = success and ok
    finally:
        await provider.shutdown()

    return success


@click.command()
@click.option("--config", "config_path", default="config.json", show_default=True,
              type=click.Path(dir_okay=False), help="JSON configuration file.")
@click.option("--location", "location_name", default=None,
              help="Only render the configured location with this name.")
@click.option("--date", "date_override", default=None,
              help="Render this day (YYYY-MM-DD) instead of today.")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Override the configured log level.")
@click.version_option(get_version_string())
def main(config_path, location_name, date_override, log_level):
    """Render 24-hour sun and moon dial images."""
    load_dotenv()

    try:
        config = ConfigManager(config_path).load_config()
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    setup_logging(Path(config.output_directory), log_level or config.log_level)
    logger.info(f"Starting {get_version_string()}")
    logger.debug(f"Astronomy provider: {get_astronomy_info()}")

    if not config.has_api_key():
        logger.error("No API key configured, set IPGEOLOCATION_API_KEY or api_key in the config")
        sys.exit(1)

    locations = select_locations(config, location_name)
    if not locations:
        logger.error(f"No location named {location_name!r} in {config_path}")
        sys.exit(1)

    ok = asyncio.run(build_images(config, locations, date_override))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
