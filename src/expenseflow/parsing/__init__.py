"""Deterministic Indonesian/English expense parsing."""
from .amounts import parse_amount
from .categorizer import categorize

__all__ = ["parse_amount", "categorize"]
