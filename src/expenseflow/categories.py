"""Closed expense category taxonomy.

Shared by the model prompts, the canonicalizer and report grouping; a new
category has to be added here and nowhere else.
"""

CATEGORIES = (
    "Food",
    "Transport",
    "Entertainment",
    "Shopping",
    "Bills",
    "Health",
    "Education",
    "Other",
)
DEFAULT_CATEGORY = "Other"
