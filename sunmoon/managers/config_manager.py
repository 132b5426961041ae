"""
Configuration management for Sun Moon Builder.

This module handles loading, saving, and validating the builder configuration
using Pydantic models for type safety and validation.
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pytz
from pydantic import BaseModel, Field, field_validator

from ..api.ipgeolocation_api_manager import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "IPGEOLOCATION_API_KEY"
API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _validate_time_zone(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in pytz.all_timezones_set:
        raise ValueError(f"Unknown time zone: {value}")
    return value


class LocationConfig(BaseModel):
    """One dial to render."""

    name: str = Field(..., min_length=1, description="Location name shown in the title")
    file_name: str = Field(..., min_length=1, description="Output image file name")
    lat: str = Field(..., description="Latitude, passed to the provider as-is")
    lon: str = Field(..., description="Longitude, passed to the provider as-is")
    time_zone: Optional[str] = None  # Falls back to the builder default
    date: Optional[str] = None  # YYYY-MM-DD, for rendering a fixed day

    @field_validator("lat", "lon", mode="before")
    @classmethod
    def coerce_coordinate(cls, v):
        """Accept bare JSON numbers; the provider and cache key use the string form."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("lat")
    @classmethod
    def validate_lat(cls, v: str) -> str:
        try:
            value = float(v)
        except ValueError:
            raise ValueError(f"Latitude must be a number: {v}")
        if not -90 <= value <= 90:
            raise ValueError(f"Latitude must be between -90 and 90: {v}")
        return v

    @field_validator("lon")
    @classmethod
    def validate_lon(cls, v: str) -> str:
        try:
            value = float(v)
        except ValueError:
            raise ValueError(f"Longitude must be a number: {v}")
        if not -180 <= value <= 180:
            raise ValueError(f"Longitude must be between -180 and 180: {v}")
        return v

    @field_validator("time_zone")
    @classmethod
    def validate_time_zone(cls, v: Optional[str]) -> Optional[str]:
        return _validate_time_zone(v)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[str]) -> Optional[str]:
        if v:
            datetime.strptime(v, "%Y-%m-%d")
        return v or None


class BuilderConfig(BaseModel):
    """Main configuration data model."""

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1, le=60)
    time_zone: str = "America/New_York"
    output_directory: str = "images"
    cache_file: str = "sunmoon-cache.json"
    log_level: str = "INFO"
    locations: List[LocationConfig] = []

    @field_validator("time_zone")
    @classmethod
    def validate_time_zone(cls, v: str) -> str:
        return _validate_time_zone(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}")
        return level

    def time_zone_for(self, location: LocationConfig) -> str:
        return location.time_zone or self.time_zone

    def has_api_key(self) -> bool:
        return bool(self.api_key) and self.api_key != API_KEY_PLACEHOLDER


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class ConfigManager:
    """
    Manages builder configuration with file persistence.

    Handles loading configuration from JSON files, creating a default
    configuration, and saving changes back to disk.
    """

    def __init__(self, config_path: str = "config.json"):
        self.config_path = Path(config_path)
        self.config: Optional[BuilderConfig] = None
        logger.debug(f"ConfigManager initialized with path: {self.config_path}")

    def load_config(self) -> BuilderConfig:
        """
        Load configuration from file.

        If the configuration file doesn't exist, creates a default one. The
        IPGEOLOCATION_API_KEY environment variable overrides the file's key.

        Returns:
            BuilderConfig: The loaded configuration

        Raises:
            ConfigurationError: If the configuration file is invalid
        """
        logger.debug(f"Loading config from: {self.config_path}")

        if not self.config_path.exists():
            logger.info(f"Config file doesn't exist, creating default at: {self.config_path}")
            self.create_default_config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)

            env_key = os.environ.get(API_KEY_ENV_VAR)
            if env_key and isinstance(data, dict):
                data["api_key"] = env_key

            self.config = BuilderConfig.model_validate(data)
            logger.debug(f"Successfully loaded config from: {self.config_path}")
            return self.config
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file: {e}")
        except Exception as e:
            raise ConfigurationError(f"Failed to load config: {e}")

    def save_config(self, config: BuilderConfig) -> bool:
        """
        Save configuration to file.

        Returns:
            bool: True if saved successfully, False otherwise
        """
        logger.info(f"Saving config to: {self.config_path}")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(config.model_dump(), f, indent=2, ensure_ascii=False)
            self.config = config
            return True
        except Exception as e:
            logger.error(f"Failed to save config to {self.config_path}: {e}")
            return False

    def create_default_config(self) -> None:
        """Create a default configuration file with one sample location."""
        default_config = BuilderConfig(
            api_key=API_KEY_PLACEHOLDER,
            locations=[
                LocationConfig(
                    name="Onset, MA",
                    file_name="sunmoon.jpg",
                    lat="42.4",
                    lon="-71.6",
                )
            ],
        )
        self.save_config(default_config)
