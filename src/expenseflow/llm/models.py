"""Data models for expense extraction and reporting."""
from dataclasses import dataclass, field
from datetime import date, datetime
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..categories import CATEGORIES, DEFAULT_CATEGORY  # noqa: F401
from ..parsing.amounts import parse_amount
from ..utils.exceptions import ValidationError

NEGATIVE_SIGN = re.compile(r"^\s*(?:rp\.?\s*)?-", re.IGNORECASE)


class SourceKind(str, Enum):
    """Where the expense statement came from."""
    TEXT = "text"
    IMAGE = "image"


class ExpenseGuess(BaseModel):
    """Best-effort interpretation from the model or the heuristics.

    Every field is optional and loosely typed; values the model gets wrong
    collapse to None instead of failing validation.
    """
    model_config = ConfigDict(extra="ignore")

    amount: Optional[Decimal] = None
    description: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None
    merchant: Optional[str] = None
    raw_text: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value):
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float, Decimal)):
            try:
                return Decimal(str(value))
            except InvalidOperation:
                return None
        if isinstance(value, str):
            amount = parse_amount(value)
            # "-5000" and "Rp -5.000" keep their sign
            if amount is not None and NEGATIVE_SIGN.match(value):
                return -amount
            return amount
        return None

    @field_validator("description", "category", "date", "merchant", "raw_text", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        if value is None or isinstance(value, (dict, list)):
            return None
        return str(value)

    def is_empty(self) -> bool:
        """True when no field carries information."""
        return all(
            getattr(self, name) in (None, "")
            for name in ("amount", "description", "category", "date", "merchant")
        )


@dataclass
class ExpenseDraft:
    """Canonical, unpersisted expense produced by the pipeline."""
    amount: Optional[Decimal]
    description: str
    category: str
    date: date
    merchant: Optional[str]
    raw_text: str
    source_kind: SourceKind

    @property
    def is_usable(self) -> bool:
        """Only drafts with a strictly positive amount may be persisted."""
        return self.amount is not None and self.amount > 0


@dataclass(frozen=True)
class ExpenseRecord:
    """Persisted expense owned by a single user."""
    owner_id: str
    amount: Decimal
    description: str
    category: str
    date: date
    merchant: Optional[str]
    raw_text: str
    source_kind: SourceKind
    created_at: datetime
    id: Optional[int] = None

    @classmethod
    def from_draft(cls, owner_id: str, draft: ExpenseDraft, created_at: datetime = None) -> "ExpenseRecord":
        if not draft.is_usable:
            raise ValidationError(f"Refusing to persist draft without a positive amount: {draft.amount}")
        return cls(
            owner_id=owner_id,
            amount=draft.amount,
            description=draft.description,
            category=draft.category,
            date=draft.date,
            merchant=draft.merchant,
            raw_text=draft.raw_text,
            source_kind=draft.source_kind,
            created_at=created_at or datetime.now(),
        )


@dataclass
class CategorySummary:
    """Per-category figures for one reporting period."""
    category: str
    count: int
    total: Decimal
    average: Decimal
    percentage: float


@dataclass
class MonthlyReport:
    """Aggregated expense data for an (owner, year, month) scope."""
    owner_id: str
    year: int
    month: int
    total: Decimal
    count: int
    categories: List[CategorySummary] = field(default_factory=list)
    insights: Optional[str] = None


@dataclass
class OwnerCategoryTotal:
    """One owner's spending in one category across a reporting period."""
    owner_id: str
    category: str
    count: int
    total: Decimal
