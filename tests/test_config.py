"""
Tests for configuration management.
"""

import pytest
from flightscout.config import Config, Settings


@pytest.fixture
def sample_config():
    """Get custom configuration as YAML text."""
    return """
acquisition:
  delay_between_calls_ms: 500
  max_retry_attempts: 3
throttle:
  floor_ms: 1000
  cap_ms: 20000
scanner:
  concurrency: 2
analysis:
  only_today: false
regions:
  asia: [DXB, SIN, HKG]
logging:
  level: DEBUG
"""


class TestConfig:
    """Tests for Config class."""

    def test_default_config(self):
        """Test loading default configuration."""
        config = Config(config_path="non_existent_config.yaml")
        assert config.delay_between_calls_ms == 1500
        assert config.max_retry_attempts == 5
        assert config.scanner_concurrency == 5
        assert config.only_today is True

        config = Config(config_path=None)
        assert config.backoff_base_ms == 1500
        assert config.backoff_multiplier == 2
        assert config.page_size == 100

    def test_custom_config(self, tmp_path, sample_config):
        """Test loading custom configuration from YAML file."""
        custom_config_path = tmp_path / "custom_config.yaml"
        custom_config_path.write_text(sample_config)
        config = Config(config_path=str(custom_config_path))

        assert config.delay_between_calls_ms == 500
        assert config.max_retry_attempts == 3
        assert config.scanner_concurrency == 2
        assert config.only_today is False
        assert config.log_level == "DEBUG"
        assert config.region_airports("asia") == ["DXB", "SIN", "HKG"]

    def test_custom_config_keeps_defaults(self, tmp_path, sample_config):
        """Test that values missing from a custom file fall back to defaults."""
        custom_config_path = tmp_path / "custom_config.yaml"
        custom_config_path.write_text(sample_config)
        config = Config(config_path=str(custom_config_path))

        assert config.backoff_base_ms == 1500
        assert config.throttle_settings["cooldown_ms"] == 60000
        assert config.throttle_settings["floor_ms"] == 1000
        assert config.timeout_seconds == 15

    def test_save_config(self, tmp_path, sample_config):
        """Test saving configuration to YAML file."""
        custom_config_path = tmp_path / "custom_config.yaml"
        custom_config_path.write_text(sample_config)
        config = Config(config_path=str(custom_config_path))

        config.set("scanner.concurrency", 4)
        config.save_config()

        reloaded_config = Config(config_path=str(custom_config_path))
        assert reloaded_config.scanner_concurrency == 4

    def test_save_without_path(self):
        """Test that saving without a path is rejected."""
        with pytest.raises(ValueError):
            Config().save_config()

    def test_malformed_config(self, tmp_path):
        """Test handling of malformed configuration file."""
        malformed_config_path = tmp_path / "malformed_config.yaml"
        malformed_config_path.write_text(
            """
throttle:
  floor_ms: 5000
  cap_ms: 100
"""
        )
        config = Config(config_path=str(malformed_config_path))
        # Should fall back to default config
        assert config.throttle_settings["floor_ms"] == 1500
        assert config.throttle_settings["cap_ms"] == 30000

    def test_partial_throttle_checked_after_merge(self, tmp_path):
        """Test that a floor above the default cap is rejected after merging."""
        config_path = tmp_path / "partial.yaml"
        config_path.write_text("throttle:\n  floor_ms: 50000\n")
        config = Config(config_path=str(config_path))

        assert config.throttle_settings["floor_ms"] == 1500
        assert config.throttle_settings["cap_ms"] == 30000

    def test_empty_sections_use_defaults(self, tmp_path):
        """Test that sections without values keep their defaults."""
        config_path = tmp_path / "empty_sections.yaml"
        config_path.write_text("provider:\nanalysis:\n  only_today: false\n")
        config = Config(config_path=str(config_path))

        assert config.timeout_seconds == 15
        assert config.page_size == 100
        assert config.only_today is False

    def test_non_mapping_section(self, tmp_path):
        """Test that a section holding a scalar falls back to defaults."""
        config_path = tmp_path / "scalar_section.yaml"
        config_path.write_text("logging: verbose\nscanner:\n  concurrency: 2\n")
        config = Config(config_path=str(config_path))

        assert config.log_level == "INFO"
        assert config.scanner_concurrency == 5

    def test_type_groups(self, tmp_path):
        """Test configured and built-in aircraft type groups."""
        config_path = tmp_path / "groups.yaml"
        config_path.write_text("type_groups:\n  quads: [A388, B748]\n")
        config = Config(config_path=str(config_path))

        assert config.aircraft_type_group("quads") == ["A388", "B748"]
        assert "A124" in config.aircraft_type_group("heavyweight")
        with pytest.raises(KeyError):
            config.aircraft_type_group("gliders")

    def test_unparsable_config(self, tmp_path):
        """Test handling of a file that is not valid YAML."""
        broken_path = tmp_path / "broken.yaml"
        broken_path.write_text("acquisition: [unclosed")
        config = Config(config_path=str(broken_path))
        assert config.max_retry_attempts == 5

    def test_dot_notation(self):
        """Test get/set with dot notation."""
        config = Config()
        assert config.get("acquisition.max_retry_attempts") == 5
        assert config.get("acquisition.missing", "fallback") == "fallback"
        assert config.get("scanner.concurrency.deeper", 7) == 7

        config.set("custom.nested.value", 42)
        assert config.get("custom.nested.value") == 42

    def test_unknown_region(self):
        """Test that unknown regions raise KeyError."""
        with pytest.raises(KeyError):
            Config().region_airports("atlantis")


class TestSettings:
    """Tests for static settings."""

    def test_window_size(self):
        assert Settings.WINDOW_SIZE_MS == 1_800_000
