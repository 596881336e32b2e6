"""Rule-based expense extraction that needs no external service."""
import re
from decimal import Decimal
from typing import Callable, List, Optional, Pattern

from .amounts import parse_amount
from .categorizer import categorize
from ..llm.models import ExpenseGuess
from ..utils.logger import get_logger

logger = get_logger()

AmountMatcher = Callable[[str], Optional[Decimal]]


def pattern_matcher(pattern: Pattern[str]) -> AmountMatcher:
    """Build a matcher that parses the first match of pattern."""
    def match(text: str) -> Optional[Decimal]:
        found = pattern.search(text)
        if not found:
            return None
        return parse_amount(found.group(0))
    return match


def first_amount(text: str, matchers: List[AmountMatcher]) -> Optional[Decimal]:
    """Return the first strictly positive amount; later matchers are not tried."""
    for matcher in matchers:
        amount = matcher(text)
        if amount is not None and amount > 0:
            return amount
    return None


class HeuristicExtractor:
    """Extracts amount, category and merchant from raw text with regexes."""

    # Priority order matters: shorthand forms mask plain numbers later in the text.
    AMOUNT_PATTERNS = [
        re.compile(r"\d+(?:\.\d{3})*(?:[.,]\d+)?\s*(?:rb|ribu)", re.IGNORECASE),   # 15rb, 15 ribu
        re.compile(r"\d+(?:[.,]\d+)?\s*(?:jt|juta)\b", re.IGNORECASE),               # 1jt, 1,5 juta
        re.compile(r"\d+(?:[.,]\d+)?\s*k\b", re.IGNORECASE),                         # 15k, 2.5k
        re.compile(r"rp\.?\s*\d+(?:\.\d{3})*(?:,\d{1,2})?", re.IGNORECASE),         # Rp 15.000
        re.compile(r"\d+(?:\.\d{3})*(?:,\d{1,2})?\s*rupiah", re.IGNORECASE),         # 15000 rupiah
        re.compile(r"\d+(?:\.\d{3})+(?:,\d+)?|\d+(?:[.,]\d+)?"),                     # plain numbers
    ]

    # Words after the first must be capitalized ("at Starbucks yesterday" -> "Starbucks")
    # and "rp" never belongs to a name ("bayar listrik Rp 250.000" -> "bayar listrik").
    MERCHANT_PATTERNS = [
        re.compile(r"\b(?:di|at)\s+((?!rp\b)[A-Za-z][A-Za-z'&]*(?-i:\s+[A-Z][A-Za-z'&]*)*)", re.IGNORECASE),
        re.compile(r"((?!rp\b)[A-Za-z]+(?:\s+(?!rp\b)[A-Za-z]+)*)\s+(?:\d+|rp\b)", re.IGNORECASE),
    ]

    def __init__(self):
        self.amount_matchers = [pattern_matcher(p) for p in self.AMOUNT_PATTERNS]

    def extract(self, text: str) -> ExpenseGuess:
        """
        Produce a best-effort guess from raw text.

        Args:
            text: Raw expense statement

        Returns:
            ExpenseGuess; amount is None when no positive amount was found
        """
        if not text or not isinstance(text, str):
            return ExpenseGuess(category=categorize(""))

        amount = first_amount(text, self.amount_matchers)
        guess = ExpenseGuess(
            amount=amount,
            description=text,
            category=categorize(text),
            merchant=self.extract_merchant(text),
            raw_text=text,
        )
        logger.debug(
            f"Heuristic guess: amount={guess.amount} category={guess.category} "
            f"merchant={guess.merchant}"
        )
        return guess

    def extract_merchant(self, text: str) -> Optional[str]:
        """First merchant-looking capture longer than two characters."""
        for pattern in self.MERCHANT_PATTERNS:
            match = pattern.search(text)
            if match and len(match.group(1).strip()) > 2:
                return match.group(1).strip()
        return None
