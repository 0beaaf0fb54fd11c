"""
Simple configuration management for tsblocks.

Settings live in a JSON file (``config/default_config.json`` by default) and
are read with dotted keys such as ``"rendering.stroke_width"``.
"""

import copy
import json
import os
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

GRANULARITY_NAMES = ("day", "week", "month", "quarter", "year")


def _default_config_path() -> str:
    core_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(os.path.dirname(core_dir), "config", "default_config.json")


class ConfigManager:
    """Simple configuration manager for tsblocks settings."""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or _default_config_path()
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file."""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r') as f:
                    self._config = json.load(f)
                logger.info(f"Configuration loaded from {self.config_file}")
            else:
                logger.warning(f"Configuration file {self.config_file} not found, using defaults")
                self._config = self._get_default_config()
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading configuration: {e}")
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "detection": {
                "fallback_granularity": "month"
            },
            "rendering": {
                "stroke_width": 2.5,
                "draw_grid": True,
                "range_selector_height": 60,
                "table_max_rows": 1000,
                "colors": [
                    "#4D4D4D", "#5DA5DA", "#FAA43A", "#60BD68", "#F17CB0",
                    "#B2912F", "#B276B2", "#DECF3F", "#F15854"
                ]
            },
            "forecast": {
                "max_horizon": 100
            },
            "logging": {
                "level": "INFO",
                "log_evaluations": False
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Path to the configuration key (e.g., "rendering.stroke_width")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self._config
        for key in key_path.split('.'):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, key_path: str, value: Any) -> bool:
        """
        Set configuration value using dot notation.

        Args:
            key_path: Path to the configuration key
            value: Value to set

        Returns:
            True if successful, False if an intermediate key is not a section
        """
        keys = key_path.split('.')
        config_ref = self._config

        # Navigate to the parent of the target key
        for key in keys[:-1]:
            if key not in config_ref:
                config_ref[key] = {}
            config_ref = config_ref[key]
            if not isinstance(config_ref, dict):
                logger.error(f"Error setting config key {key_path}: '{key}' is not a section")
                return False

        config_ref[keys[-1]] = value
        return True

    def save(self) -> bool:
        """Save current configuration to file."""
        try:
            directory = os.path.dirname(self.config_file)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(self.config_file, 'w') as f:
                json.dump(self._config, f, indent=2)

            logger.info(f"Configuration saved to {self.config_file}")
            return True

        except OSError as e:
            logger.error(f"Error saving configuration: {e}")
            return False

    def validate_config(self) -> tuple[bool, list[str]]:
        """Validate current configuration."""
        errors = []

        fallback = self.get("detection.fallback_granularity")
        if fallback is not None and fallback not in GRANULARITY_NAMES:
            errors.append(f"Invalid fallback granularity '{fallback}', must be one of {list(GRANULARITY_NAMES)}")

        width = self.get("rendering.stroke_width")
        if width is not None and (not isinstance(width, (int, float)) or width <= 0):
            errors.append("Rendering stroke_width must be positive")

        height = self.get("rendering.range_selector_height")
        if height is not None and (not isinstance(height, int) or height < 0):
            errors.append("Rendering range_selector_height must be a non-negative integer")

        colors = self.get("rendering.colors")
        if colors is not None and (not isinstance(colors, list) or not colors):
            errors.append("Rendering colors must be a non-empty list")

        max_rows = self.get("rendering.table_max_rows")
        if max_rows is not None and (not isinstance(max_rows, int) or max_rows < 1):
            errors.append("Rendering table_max_rows must be at least 1")

        horizon = self.get("forecast.max_horizon")
        if horizon is not None and (not isinstance(horizon, int) or horizon < 1):
            errors.append("Forecast max_horizon must be at least 1")

        return len(errors) == 0, errors

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration as dictionary."""
        return copy.deepcopy(self._config)

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults."""
        self._config = self._get_default_config()
        logger.info("Configuration reset to defaults")


# Global configuration instance for easy access
_global_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager()
    return _global_config


def reload_config(config_file: Optional[str] = None) -> ConfigManager:
    """Reload configuration from file."""
    global _global_config
    _global_config = ConfigManager(config_file)
    return _global_config
