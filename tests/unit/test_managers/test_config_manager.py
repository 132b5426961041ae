"""
Tests for configuration management.
"""

import json

import pytest
from pydantic import ValidationError

from sunmoon.managers.config_manager import (
    API_KEY_ENV_VAR,
    API_KEY_PLACEHOLDER,
    BuilderConfig,
    ConfigManager,
    ConfigurationError,
    LocationConfig,
)


@pytest.fixture(autouse=True)
def no_env_api_key(monkeypatch):
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.json"


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


def _location(**overrides):
    data = {"name": "Onset, MA", "file_name": "onset.jpg", "lat": "42.4", "lon": "-71.6"}
    data.update(overrides)
    return data


class TestLocationConfig:
    """Test location validation."""

    def test_valid(self):
        location = LocationConfig(**_location())
        assert location.lat == "42.4"
        assert location.time_zone is None
        assert location.date is None

    @pytest.mark.parametrize("field, value", [("lat", "91"), ("lat", "north"), ("lon", "-181"), ("lon", "")])
    def test_invalid_coordinates(self, field, value):
        with pytest.raises(ValidationError):
            LocationConfig(**_location(**{field: value}))

    def test_numeric_coordinates_become_strings(self):
        location = LocationConfig(**_location(lat=42.4, lon=-71))
        assert location.lat == "42.4"
        assert location.lon == "-71"

    def test_numeric_coordinates_still_range_checked(self):
        with pytest.raises(ValidationError):
            LocationConfig(**_location(lat=95.5))
        with pytest.raises(ValidationError):
            LocationConfig(**_location(lon=True))

    def test_invalid_time_zone(self):
        with pytest.raises(ValidationError):
            LocationConfig(**_location(time_zone="Nowhere/City"))

    def test_date(self):
        assert LocationConfig(**_location(date="2021-09-10")).date == "2021-09-10"
        with pytest.raises(ValidationError):
            LocationConfig(**_location(date="09/10/2021"))


class TestBuilderConfig:
    """Test builder configuration validation."""

    def test_defaults(self):
        config = BuilderConfig()
        assert config.timeout_seconds == 5
        assert config.time_zone == "America/New_York"
        assert config.cache_file == "sunmoon-cache.json"
        assert config.locations == []

    @pytest.mark.parametrize("timeout", [0, 61])
    def test_timeout_range(self, timeout):
        with pytest.raises(ValidationError):
            BuilderConfig(timeout_seconds=timeout)

    def test_log_level_normalized(self):
        assert BuilderConfig(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            BuilderConfig(log_level="chatty")

    def test_time_zone_for_location(self):
        config = BuilderConfig(time_zone="Europe/London")
        assert config.time_zone_for(LocationConfig(**_location())) == "Europe/London"
        assert config.time_zone_for(LocationConfig(**_location(time_zone="Asia/Tokyo"))) == "Asia/Tokyo"

    def test_has_api_key(self):
        assert not BuilderConfig().has_api_key()
        assert not BuilderConfig(api_key=API_KEY_PLACEHOLDER).has_api_key()
        assert BuilderConfig(api_key="real").has_api_key()


class TestConfigManager:
    """Test loading and saving."""

    def test_load_creates_default(self, config_path):
        config = ConfigManager(str(config_path)).load_config()

        assert config_path.exists()
        assert len(config.locations) == 1
        assert config.locations[0].name == "Onset, MA"
        assert config.locations[0].lat == "42.4"
        assert config.locations[0].lon == "-71.6"

    def test_load_existing(self, config_path):
        _write(config_path, {"api_key": "abc", "locations": [_location()]})

        config = ConfigManager(str(config_path)).load_config()

        assert config.api_key == "abc"
        assert config.locations[0].file_name == "onset.jpg"

    def test_load_numeric_coordinates(self, config_path):
        _write(config_path, {"api_key": "abc", "locations": [_location(lat=42.4, lon=-71.6)]})

        config = ConfigManager(str(config_path)).load_config()

        assert config.locations[0].lat == "42.4"
        assert config.locations[0].lon == "-71.6"

    def test_environment_api_key_overrides(self, config_path, monkeypatch):
        _write(config_path, {"api_key": "from_file"})
        monkeypatch.setenv(API_KEY_ENV_VAR, "from_env")

        assert ConfigManager(str(config_path)).load_config().api_key == "from_env"

    def test_invalid_json(self, config_path):
        config_path.write_text("{broken", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            ConfigManager(str(config_path)).load_config()

    def test_invalid_values(self, config_path):
        _write(config_path, {"time_zone": "Nowhere/City"})

        with pytest.raises(ConfigurationError):
            ConfigManager(str(config_path)).load_config()

    def test_save_and_reload(self, config_path):
        manager = ConfigManager(str(config_path))
        config = BuilderConfig(api_key="abc", locations=[LocationConfig(**_location())])

        assert manager.save_config(config) is True
        assert manager.config is config
        assert ConfigManager(str(config_path)).load_config() == config

    def test_save_failure(self, tmp_path):
        manager = ConfigManager(str(tmp_path))
        assert manager.save_config(BuilderConfig()) is False
