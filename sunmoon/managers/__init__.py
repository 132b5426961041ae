"""
Managers for Sun Moon Builder: data orchestration, image building and
configuration.
"""

from .astronomy_data_service import AstronomyDataService
from .config_manager import BuilderConfig, ConfigManager, ConfigurationError, LocationConfig
from .sun_moon_builder import SunMoonBuilder

__all__ = [
    "AstronomyDataService",
    "BuilderConfig",
    "ConfigManager",
    "ConfigurationError",
    "LocationConfig",
    "SunMoonBuilder",
]
