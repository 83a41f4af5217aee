"""Configuration management for movie probe."""

from movie_probe.config.manager import ConfigManager, load_config
from movie_probe.config.models import DEFAULT_UNSUPPORTED_MARKERS, ProbeConfig

__all__ = [
    # Manager
    "ConfigManager",
    "load_config",
    # Models
    "DEFAULT_UNSUPPORTED_MARKERS",
    "ProbeConfig",
]
