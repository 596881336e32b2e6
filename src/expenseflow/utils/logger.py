"""Logging infrastructure with owner context."""
import logging
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Optional

from ..config.settings import get_settings
from .paths import app_data_dir

# Each thread or asyncio task sees its own owner
_owner_id: ContextVar[Optional[str]] = ContextVar("expenseflow_owner_id", default=None)


class OwnerContextFilter(logging.Filter):
    """Add owner context to log records."""

    @property
    def owner_id(self) -> Optional[str]:
        return _owner_id.get()

    def filter(self, record):
        """Add owner_id to record."""
        record.owner_id = self.owner_id or "system"
        return True


class ExpenseFlowLogger:
    """Centralized logging manager."""

    def __init__(self, log_level: str = "INFO"):
        settings = get_settings()
        self.log_dir = app_data_dir() / settings.logs_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / settings.log_file
        self.owner_filter = OwnerContextFilter()

        self.logger = logging.getLogger("expenseflow")
        self.logger.setLevel(getattr(logging, log_level.upper()))

        # Remove existing handlers
        self.logger.handlers.clear()

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=settings.log_max_file_size_mb * 1024 * 1024,
            backupCount=settings.log_backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [owner:%(owner_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        file_handler.addFilter(self.owner_filter)
        console_handler.addFilter(self.owner_filter)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[ExpenseFlowLogger] = None


def get_logger(log_level: str = None) -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = ExpenseFlowLogger(log_level or get_settings().log_level)
    return _logger_instance.get_logger()


def set_owner_context(owner_id: Optional[str]):
    """Set owner context for logging in the current thread or task."""
    _owner_id.set(owner_id)


def set_log_level(log_level: str):
    """Change the level of the global logger, e.g. from the user config."""
    get_logger().setLevel(getattr(logging, log_level.upper()))
