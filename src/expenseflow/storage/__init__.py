"""Expense persistence."""
from .expense_store import ExpenseStore

__all__ = ["ExpenseStore"]
