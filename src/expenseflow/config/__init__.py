"""Configuration module."""
from .settings import AppSettings, get_settings
from .manager import Config, ConfigManager

__all__ = ["AppSettings", "get_settings", "Config", "ConfigManager"]
