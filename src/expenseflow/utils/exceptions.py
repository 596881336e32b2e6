"""Custom exception classes for ExpenseFlow."""


class ExpenseFlowError(Exception):
    """Base exception for ExpenseFlow."""
    pass


class ConfigError(ExpenseFlowError):
    """Configuration-related errors."""
    pass


class LLMError(ExpenseFlowError):
    """LLM processing errors."""
    pass


class ExtractionUnavailableError(LLMError):
    """The external model could not be invoked (network, auth, quota, timeout).

    Distinct from a processed-but-empty result: callers should tell the user
    to retry rather than ask for a missing amount.
    """
    pass


class ValidationError(ExpenseFlowError):
    """Data validation errors."""
    pass


class StorageError(ExpenseFlowError):
    """Expense storage errors."""
    pass
