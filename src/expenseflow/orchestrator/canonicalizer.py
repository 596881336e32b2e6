"""Validation gate between extraction and persistence."""
import re
from datetime import date, datetime
from typing import Callable, Optional

from ..llm.models import CATEGORIES, DEFAULT_CATEGORY, ExpenseDraft, ExpenseGuess, SourceKind
from ..utils.logger import get_logger

logger = get_logger()

IMAGE_DESCRIPTION_PLACEHOLDER = "Expense from image"

DATE_FORMATS = [
    "%Y-%m-%d",
    "%d/%m/%y",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%y",
    "%d.%m.%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y/%m/%d",
]


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """Try the common receipt date formats; None when nothing fits."""
    if not date_str or not isinstance(date_str, str):
        return None

    candidate = date_str.strip()
    # ISO timestamps such as 2025-05-01T10:00:00
    if re.match(r"^\d{4}-\d{2}-\d{2}T", candidate):
        candidate = candidate[:10]

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    return None


class Canonicalizer:
    """Repairs an ExpenseGuess into a well-typed ExpenseDraft."""

    def __init__(self, today: Callable[[], date] = date.today):
        self.today = today
        self._categories = {name.lower(): name for name in CATEGORIES}

    def canonicalize(self, guess: ExpenseGuess, raw_text: str, source_kind: SourceKind) -> ExpenseDraft:
        """
        Build the draft that decides whether an expense can be saved.

        Args:
            guess: Output of the extraction adapter
            raw_text: Original message text (empty for images)
            source_kind: Text or image input

        Returns:
            ExpenseDraft; amount is None when the user must be asked for it
        """
        amount = guess.amount if guess.amount is not None and guess.amount > 0 else None
        if amount is None and guess.amount is not None:
            logger.info(f"Rejected non-positive amount: {guess.amount}")

        if source_kind == SourceKind.IMAGE:
            transcript = guess.raw_text or ""
            fallback_description = IMAGE_DESCRIPTION_PLACEHOLDER
        else:
            transcript = raw_text or ""
            fallback_description = raw_text or ""

        description = (guess.description or "").strip() or fallback_description

        expense_date = parse_date(guess.date)
        if expense_date is None:
            if guess.date:
                logger.debug(f"Unparsable date '{guess.date}', using today")
            expense_date = self.today()

        return ExpenseDraft(
            amount=amount,
            description=description,
            category=self._canonical_category(guess.category),
            date=expense_date,
            merchant=guess.merchant,
            raw_text=transcript,
            source_kind=source_kind,
        )

    def _canonical_category(self, category: Optional[str]) -> str:
        if not category:
            return DEFAULT_CATEGORY
        canonical = self._categories.get(category.strip().lower())
        if canonical is None:
            logger.warning(f"Invalid category '{category}', using '{DEFAULT_CATEGORY}'")
            return DEFAULT_CATEGORY
        return canonical
