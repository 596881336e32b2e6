"""User configuration: API credentials and per-installation overrides."""
import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from .settings import get_settings
from ..utils.exceptions import ConfigError
from ..utils.paths import app_data_dir

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """System configuration."""
    gemini_api_key: str
    model_name: str = "gemini-2.5-flash-lite"
    request_timeout_seconds: int = 30
    log_level: str = "INFO"
    database_path: Optional[str] = None


class ConfigManager:
    """Loads and saves the user configuration file.

    The ``GEMINI_API_KEY`` environment variable always wins over the key
    stored on disk, so a config file is optional when the variable is set.
    """

    def __init__(self, config_dir: Path = None):
        settings = get_settings()
        self.config_dir = config_dir or app_data_dir()
        self.config_file = self.config_dir / settings.config_file
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load_config(self) -> Optional[Config]:
        """Load configuration from file and environment.

        Returns None when neither a config file nor an API key in the
        environment is available.
        """
        config_dict = {}
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config_dict = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"Failed to load configuration: {e}")

        env_key = os.getenv("GEMINI_API_KEY")
        if env_key:
            config_dict["gemini_api_key"] = env_key

        if not config_dict:
            return None

        settings = get_settings()
        config_dict.setdefault("gemini_api_key", "")
        config_dict.setdefault("model_name", settings.llm_model_name)
        config_dict.setdefault("request_timeout_seconds", settings.llm_timeout_seconds)
        config_dict.setdefault("log_level", settings.log_level)
        config_dict.setdefault("database_path", str(self.config_dir / settings.database_file))

        try:
            return Config(**config_dict)
        except TypeError as e:
            raise ConfigError(f"Unknown configuration field: {e}")

    def save_config(self, config: Config) -> None:
        """Save configuration as JSON."""
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(asdict(config), f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")

    def validate_config(self, config: Config) -> tuple[bool, str]:
        """Validate configuration values."""
        if not config.gemini_api_key:
            return False, "Gemini API key is required"

        if not config.model_name:
            return False, "Model name is required"

        if config.request_timeout_seconds < 1:
            return False, "Request timeout must be at least 1 second"

        if config.log_level.upper() not in LOG_LEVELS:
            return False, f"Log level must be one of {', '.join(LOG_LEVELS)}"

        return True, "Configuration is valid"
