"""
flightscout Configuration Management

This module provides configuration management for the flightscout analysis
pipeline. It includes physical constants, window and display settings, map
options, and runtime configuration loaded from YAML files.
"""

import os
from typing import Any, Dict, List, Optional

import yaml

# =============================================================================
# Physical Constants
# =============================================================================


class Constants:
    """Physical constants and unit conversions."""

    EARTH_RADIUS_KM: float = 6371.0  # Spherical earth, same model as the provider
    MS_PER_SECOND: int = 1000
    MS_PER_MINUTE: int = 60 * 1000
    MS_PER_DAY: int = 24 * 60 * 60 * 1000


# =============================================================================
# Analysis Settings
# =============================================================================


class Settings:
    """Settings for the window optimizer, rankings and display."""

    # --- Window Analysis ---
    WINDOW_SIZE_MS: int = 30 * 60 * 1000  # 30 minute diversity window
    UNKNOWN_AIRPORT: str = "UNKNOWN"  # Bucket for entries without an airport code

    # --- Display Limits ---
    FLIGHTS_TO_DISPLAY: int = 5
    WINDOWS_TO_DISPLAY: int = 4
    AIRPORTS_TO_DISPLAY: int = 10
    TOP_AIRPORTS_TO_DISPLAY: int = 10

    # --- Visualization ---
    DEFAULT_MAP_STYLE: str = "CartoDB.Positron"  # Base map tile style
    DEFAULT_ZOOM: int = 3  # Continental view
    MARKER_RADIUS: int = 6  # Aircraft marker size (pixels)
    MARKER_OPACITY: float = 0.8  # Marker border transparency (0-1)
    MARKER_FILL_OPACITY: float = 0.6  # Marker fill transparency (0-1)


# =============================================================================
# Color Schemes
# =============================================================================


class Colors:
    """Color definitions for map exports."""

    # Distance rank colors (closest to farthest)
    RANKED_COLORS = [
        "#e74c3c",  # Rank 1: Red (closest)
        "#f17c15",  # Rank 2: Orange
        "#ffd015",  # Rank 3: Yellow
        "#2ecc71",  # Rank 4-5: Green
        "#3498db",  # Rank 6+: Blue
    ]

    ON_GROUND_COLOR: str = "#7f8c8d"  # Grey for parked aircraft
    REFERENCE_COLOR: str = "red"  # folium icon color for reference airports


# =============================================================================
# Runtime Configuration
# =============================================================================


class Config:
    """
    Runtime configuration manager for flightscout.

    Loads settings from YAML files or uses sensible defaults.
    Provides property-based access to common settings.

    Example:
        >>> config = Config('config.yaml')
        >>> print(f"Delay between calls: {config.delay_between_calls_ms}ms")
        >>> print(f"Asia hubs: {config.region_airports('asia')}")
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file. If None or missing,
                        uses default configuration.
        """
        self.config_path = config_path
        self._config: Dict[str, Any] = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration from YAML file or return defaults.

        Returns:
            Configuration dictionary
        """
        if self.config_path is None or not os.path.exists(self.config_path):
            return self._get_default_config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
                if isinstance(config, dict):
                    merged = self._merge_defaults(config)
                    if self._validate_config(merged):
                        return merged
                print("Warning: Invalid config structure, using defaults")
                return self._get_default_config()
        except (OSError, yaml.YAMLError) as e:
            print(f"Warning: Could not load config file: {e}")
            return self._get_default_config()

    def _validate_config(self, config: Dict[str, Any]) -> bool:
        """
        Validate configuration structure and value ranges.

        Runs on the merged configuration, so every built-in section must be
        present and hold a mapping.

        Args:
            config: Configuration dictionary to validate

        Returns:
            True if valid, False otherwise
        """
        try:
            assert isinstance(config, dict)
            for section in self._get_default_config():
                assert isinstance(config[section], dict)

            acquisition = config["acquisition"]
            for key in ("delay_between_calls_ms", "backoff_base_ms"):
                assert isinstance(acquisition[key], (float, int))
                assert acquisition[key] >= 0
            assert isinstance(acquisition["max_retry_attempts"], int)
            assert acquisition["max_retry_attempts"] >= 1
            assert isinstance(acquisition["backoff_multiplier"], (float, int))
            assert acquisition["backoff_multiplier"] >= 1

            throttle = config["throttle"]
            for key in ("floor_ms", "cap_ms", "cooldown_ms", "growth", "decay"):
                assert isinstance(throttle[key], (float, int))
            assert 0 <= throttle["floor_ms"] <= throttle["cap_ms"]

            provider = config["provider"]
            assert isinstance(provider["timeout_seconds"], (float, int))
            assert provider["timeout_seconds"] > 0
            assert isinstance(provider["page_size"], int)
            assert provider["page_size"] >= 1

            assert isinstance(config["scanner"]["concurrency"], int)
            assert config["scanner"]["concurrency"] >= 1

            for group in ("regions", "type_groups"):
                for codes in config[group].values():
                    assert isinstance(codes, list)

            return True
        except (AssertionError, KeyError, TypeError):
            return False

    def _merge_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Fill sections and keys missing from a user config with defaults."""
        merged = self._get_default_config()
        for section, values in config.items():
            if values is None:
                # Empty section in the file, e.g. "provider:"
                continue
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values
        return merged

    def _get_default_config(self) -> Dict[str, Any]:
        """
        Get default configuration.

        Returns:
            Default configuration dictionary
        """
        return {
            "provider": {
                "timeout_seconds": 15,
                "page_size": 100,
                "user_agent": "Mozilla/5.0 (X11; Linux x86_64) flightscout/1.0",
            },
            "acquisition": {
                "delay_between_calls_ms": 1500,
                "max_retry_attempts": 5,
                "backoff_base_ms": 1500,
                "backoff_multiplier": 2,
            },
            "throttle": {
                "floor_ms": 1500,
                "cap_ms": 30000,
                "cooldown_ms": 60000,
                "growth": 1.5,
                "decay": 0.8,
            },
            "scanner": {"concurrency": 5},
            "analysis": {"only_today": True},
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            },
            "regions": {
                "example": ["HAM", "FRA", "MUC"],
            },
            "type_groups": {
                "heavyweight": [
                    "A345", "A346", "A388", "A124", "B742", "B743",
                    "B744", "B748", "B77W", "BLCF", "C5M", "SLCH",
                ],
                "speed": [
                    "F15", "MRF1", "MIR2", "MIRA", "RFAL", "LCA",
                    "F104", "F16", "MG29", "TOR", "SB35", "SB37",
                ],
            },
        }

    def save_config(self) -> None:
        """
        Save current configuration to YAML file.

        Raises:
            ValueError: If config_path is not set
        """
        if self.config_path is None:
            raise ValueError("Cannot save config: no config_path specified")

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(self._config, f, default_flow_style=False)

    # --- Property Accessors ---

    @property
    def timeout_seconds(self) -> float:
        """Per-call provider timeout in seconds."""
        return float(self._config["provider"]["timeout_seconds"])

    @property
    def page_size(self) -> int:
        """Number of schedule rows requested per page."""
        return int(self._config["provider"]["page_size"])

    @property
    def user_agent(self) -> str:
        return self._config["provider"]["user_agent"]

    @property
    def delay_between_calls_ms(self) -> int:
        """Fixed pause between provider calls."""
        return int(self._config["acquisition"]["delay_between_calls_ms"])

    @property
    def max_retry_attempts(self) -> int:
        return int(self._config["acquisition"]["max_retry_attempts"])

    @property
    def backoff_base_ms(self) -> int:
        return int(self._config["acquisition"]["backoff_base_ms"])

    @property
    def backoff_multiplier(self) -> float:
        return float(self._config["acquisition"]["backoff_multiplier"])

    @property
    def throttle_settings(self) -> Dict[str, float]:
        """Keyword arguments for AdaptiveThrottle."""
        return dict(self._config["throttle"])

    @property
    def scanner_concurrency(self) -> int:
        """Maximum in-flight aircraft type requests."""
        return int(self._config["scanner"]["concurrency"])

    @property
    def only_today(self) -> bool:
        return bool(self._config["analysis"]["only_today"])

    @property
    def log_level(self) -> str:
        return self._config["logging"].get("level", "INFO")

    @property
    def log_format(self) -> Optional[str]:
        return self._config["logging"].get("format")

    def region_airports(self, region: str) -> List[str]:
        """
        Get the airport codes configured for a region.

        Raises:
            KeyError: If the region is not configured
        """
        return list(self._config["regions"][region])

    def aircraft_type_group(self, group: str) -> List[str]:
        """
        Get the aircraft type codes configured for a named group.

        Raises:
            KeyError: If the group is not configured
        """
        return list(self._config["type_groups"][group])

    # --- Generic Accessors ---

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'acquisition.max_retry_attempts')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get('scanner.concurrency', 5)
            5
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'scanner.concurrency')
            value: Value to set

        Example:
            >>> config.set('acquisition.delay_between_calls_ms', 3000)
        """
        keys = key.split(".")
        config = self._config

        # Navigate to parent of target key
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
