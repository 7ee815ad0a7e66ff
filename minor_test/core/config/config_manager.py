"""Configuration file management for minor-test.

This module handles loading, validation, and creation of YAML configuration
files using Pydantic for type safety and validation.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any
import yaml
from pydantic import ValidationError

from .settings import FunctionalTestConfig
from ...exceptions import ConfigurationError
from ...utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("test/minor-test.yaml")


class ConfigManager:
    """Manages configuration loading, validation, and access."""

    ENV_PREFIX = "MINOR_TEST_"

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize the configuration manager.

        Args:
            config_path: Optional path to configuration file.
                        Defaults to test/minor-test.yaml
        """
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Optional[FunctionalTestConfig] = None

    def load_config(self) -> FunctionalTestConfig:
        """Load and validate configuration from file.

        A missing file is not an error: the suite runs on defaults plus
        environment overrides.

        Returns:
            Validated FunctionalTestConfig instance

        Raises:
            ConfigurationError: If YAML parsing or validation fails
        """
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.error(f"YAML parsing error in {self.config_path}: {e}")
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
        else:
            logger.debug(f"No configuration file at {self.config_path}, using defaults")

        if not isinstance(config_data, dict):
            raise ConfigurationError(
                f"Configuration in {self.config_path} must be a mapping"
            )

        config_data = self._apply_env_overrides(config_data)

        try:
            self._config = FunctionalTestConfig(**config_data)
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ConfigurationError(str(e)) from e

        logger.debug(f"Configuration loaded from {self.config_path}")
        return self._config

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration.

        Environment variables are prefixed with MINOR_TEST_ and use double
        underscores for nested keys, e.g. MINOR_TEST_BROWSER__BASE_URL.

        Args:
            config_data: Original configuration dictionary

        Returns:
            Configuration with environment overrides applied
        """
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue

            key_parts = key[len(self.ENV_PREFIX):].lower().split("__")

            current_dict = config_data
            for part in key_parts[:-1]:
                if not isinstance(current_dict.get(part), dict):
                    current_dict[part] = {}
                current_dict = current_dict[part]

            current_dict[key_parts[-1]] = self._convert_env_value(value)

        return config_data

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type.

        Args:
            value: Environment variable string value

        Returns:
            Converted value (bool, int, float, or string)
        """
        if value.lower() in ('true', 'yes', 'on'):
            return True
        elif value.lower() in ('false', 'no', 'off'):
            return False

        try:
            if '.' in value:
                return float(value)
            else:
                return int(value)
        except ValueError:
            pass

        return value

    def validate_config(self) -> bool:
        """Validate the configuration file.

        Returns:
            True if configuration is valid, False otherwise
        """
        try:
            self.load_config()
            return True
        except ConfigurationError:
            return False

    def create_default_config(self, output_path: Optional[Path] = None) -> Path:
        """Create a default configuration file.

        Args:
            output_path: Where to save the config. Defaults to the manager's path

        Returns:
            Path to the created configuration file
        """
        output_path = Path(output_path) if output_path else self.config_path
        output_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = FunctionalTestConfig().model_dump(mode="json", exclude={"base_path"})

        with open(output_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

        logger.info(f"Default configuration created at {output_path}")
        return output_path

    def get_config(self) -> FunctionalTestConfig:
        """Get the current configuration, loading if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(self) -> FunctionalTestConfig:
        """Force reload of configuration from file."""
        self._config = None
        return self.load_config()
