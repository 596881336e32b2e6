"""Utility modules."""
from .logger import get_logger, set_log_level, set_owner_context
from .exceptions import (
    ExpenseFlowError,
    ConfigError,
    LLMError,
    ExtractionUnavailableError,
    ValidationError,
    StorageError
)
from .retry import retry_with_backoff

__all__ = [
    "get_logger",
    "set_owner_context",
    "set_log_level",
    "ExpenseFlowError",
    "ConfigError",
    "LLMError",
    "ExtractionUnavailableError",
    "ValidationError",
    "StorageError",
    "retry_with_backoff"
]
