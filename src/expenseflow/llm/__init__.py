"""LLM-backed extraction and the shared data models."""
from .models import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    SourceKind,
    ExpenseGuess,
    ExpenseDraft,
    ExpenseRecord,
    CategorySummary,
    MonthlyReport,
    OwnerCategoryTotal,
)

__all__ = [
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "SourceKind",
    "ExpenseGuess",
    "ExpenseDraft",
    "ExpenseRecord",
    "CategorySummary",
    "MonthlyReport",
    "OwnerCategoryTotal",
]
