"""
Configuration management for movie probe.

This module handles loading, validating, and saving configuration from YAML files.
The loaded ProbeConfig is passed explicitly to the inspector and job runner.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from movie_probe.config.models import ProbeConfig
from movie_probe.utils import ConfigurationError, get_logger

logger = get_logger(__name__)


class ConfigManager:
    """Manages probe configuration."""

    DEFAULT_CONFIG_LOCATIONS = [
        Path.home() / ".movie-probe.yaml",
        Path.home() / ".config" / "movie-probe" / "config.yaml",
        Path.cwd() / ".movie-probe.yaml",
    ]

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file
        """
        self.config_path = config_path
        self._config: Optional[ProbeConfig] = None

    @property
    def config(self) -> ProbeConfig:
        """
        Get current configuration, loading it if necessary.

        Raises:
            ConfigurationError: If configuration cannot be loaded
        """
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self, config_path: Optional[Path] = None) -> ProbeConfig:
        """
        Load configuration from file or create default.

        Args:
            config_path: Optional path to configuration file

        Returns:
            Loaded ProbeConfig

        Raises:
            ConfigurationError: If configuration file is missing or invalid
        """
        path = config_path or self.config_path

        if path:
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")
            return self._load_from_file(path)

        for default_path in self.DEFAULT_CONFIG_LOCATIONS:
            if default_path.exists():
                logger.info(f"Loading configuration from {default_path}")
                return self._load_from_file(default_path)

        logger.debug("No configuration file found, using defaults")
        return ProbeConfig.create_default()

    def _load_from_file(self, path: Path) -> ProbeConfig:
        """
        Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            Loaded ProbeConfig

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration: {e}")

        if data is None:
            raise ConfigurationError(f"Configuration file is empty: {path}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {path}")

        try:
            config = ProbeConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}")

        logger.debug(f"Successfully loaded configuration from {path}")
        return config

    def save(self, path: Optional[Path] = None, config: Optional[ProbeConfig] = None) -> None:
        """
        Save configuration to file.

        Args:
            path: Path to save configuration (uses default if None)
            config: Configuration to save (uses current if None)

        Raises:
            ConfigurationError: If configuration cannot be saved
        """
        cfg = config or self.config
        save_path = path or self.config_path or self.DEFAULT_CONFIG_LOCATIONS[0]

        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)
            data = cfg.model_dump(mode="json")

            with open(save_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, indent=2)

            logger.info(f"Configuration saved to {save_path}")

        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")

    def init_default_config(self, path: Optional[Path] = None, force: bool = False) -> Path:
        """
        Initialize default configuration file.

        Args:
            path: Path to create configuration file (uses default if None)
            force: Overwrite existing file

        Returns:
            Path to created configuration file

        Raises:
            ConfigurationError: If file already exists and force=False
        """
        target_path = path or self.DEFAULT_CONFIG_LOCATIONS[0]

        if target_path.exists() and not force:
            raise ConfigurationError(
                f"Configuration file already exists: {target_path}. Use force=True to overwrite."
            )

        self.save(target_path, ProbeConfig.create_default())
        return target_path

    def reload(self) -> ProbeConfig:
        """Reload configuration from file."""
        self._config = None
        return self.config


def load_config(config_path: Optional[Path] = None) -> ProbeConfig:
    """
    Load probe configuration.

    Args:
        config_path: Optional path to configuration file

    Returns:
        ProbeConfig instance
    """
    return ConfigManager(config_path).config
