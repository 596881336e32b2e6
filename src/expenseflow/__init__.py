"""ExpenseFlow: bilingual expense extraction and monthly reporting."""

__version__ = "0.1.0"
