"""Application settings loader from YAML configuration."""
import os
import yaml
from pathlib import Path
from dataclasses import dataclass


@dataclass
class AppSettings:
    """Application-wide settings loaded from config.yaml."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_max_file_size_mb: int
    log_backup_count: int

    # LLM
    llm_model_name: str
    llm_timeout_seconds: int

    # Retry
    retry_max_retries: int
    retry_initial_delay_seconds: float
    retry_backoff_factor: float

    # Reports
    recent_limit: int
    insights_max_chars: int

    # Paths
    config_file: str
    logs_dir: str
    log_file: str
    database_file: str

    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            override = os.getenv("EXPENSEFLOW_SETTINGS")
            if override:
                config_path = Path(override)
            else:
                config_path = Path(__file__).parent.parent / "resources" / "config.yaml"

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        return cls(
            app_name=config["app"]["name"],
            app_version=str(config["app"]["version"]),
            log_level=config["logging"]["level"],
            log_max_file_size_mb=config["logging"]["max_file_size_mb"],
            log_backup_count=config["logging"]["backup_count"],
            llm_model_name=config["llm"]["model_name"],
            llm_timeout_seconds=config["llm"]["timeout_seconds"],
            retry_max_retries=config["retry"]["max_retries"],
            retry_initial_delay_seconds=config["retry"]["initial_delay_seconds"],
            retry_backoff_factor=config["retry"]["backoff_factor"],
            recent_limit=config["reports"]["recent_limit"],
            insights_max_chars=config["reports"]["insights_max_chars"],
            config_file=config["paths"]["config_file"],
            logs_dir=config["paths"]["logs_dir"],
            log_file=config["paths"]["log_file"],
            database_file=config["paths"]["database_file"],
        )


# Global settings instance
_settings: AppSettings = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
