"""Monthly aggregation and message rendering."""
from .aggregator import Aggregator

__all__ = ["Aggregator"]
