"""Expense processing orchestration."""
from .canonicalizer import Canonicalizer
from .processor import ExpenseProcessor, ProcessingResult

__all__ = ["Canonicalizer", "ExpenseProcessor", "ProcessingResult"]
