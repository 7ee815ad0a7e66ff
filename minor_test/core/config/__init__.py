"""Configuration management module."""

from .config_manager import ConfigManager
from .settings import FunctionalTestConfig

__all__ = ["ConfigManager", "FunctionalTestConfig"]
