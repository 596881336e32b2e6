"""Request orchestration: extract, validate, persist, report.

Each call is independent and holds no state between requests, so one
processor can serve many owners concurrently. Nothing is written to storage
until the canonicalizer has produced a draft with a positive amount.
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from .canonicalizer import Canonicalizer
from ..config.settings import AppSettings, get_settings
from ..llm.extractor import ExpenseExtractor
from ..llm.models import (
    ExpenseDraft, ExpenseGuess, ExpenseRecord, MonthlyReport, OwnerCategoryTotal, SourceKind
)
from ..reports.aggregator import Aggregator
from ..storage.expense_store import ExpenseStore
from ..utils.exceptions import ExtractionUnavailableError
from ..utils.logger import get_logger, set_owner_context
from ..utils.retry import retry_with_backoff

logger = get_logger()


@dataclass
class ProcessingResult:
    """Outcome of one expense statement."""
    draft: ExpenseDraft
    record: Optional[ExpenseRecord] = None

    @property
    def needs_clarification(self) -> bool:
        return self.record is None


class ExpenseProcessor:
    """Orchestrates the flow: model -> canonicalizer -> storage -> reports."""

    def __init__(
        self,
        extractor: ExpenseExtractor,
        store: ExpenseStore,
        settings: AppSettings = None,
        canonicalizer: Canonicalizer = None,
        aggregator: Aggregator = None
    ):
        self.extractor = extractor
        self.store = store
        self.settings = settings or get_settings()
        self.canonicalizer = canonicalizer or Canonicalizer()
        self.aggregator = aggregator or Aggregator()

        retry = retry_with_backoff(
            max_retries=self.settings.retry_max_retries,
            initial_delay=self.settings.retry_initial_delay_seconds,
            backoff_factor=self.settings.retry_backoff_factor,
            retryable_exceptions=(ExtractionUnavailableError,)
        )
        self._extract_text = retry(self.extractor.extract_text)
        self._extract_image = retry(self.extractor.extract_image)

    def process_text(self, owner_id: str, raw_text: str) -> ProcessingResult:
        """
        Turn a chat message into a saved expense.

        Raises:
            ExtractionUnavailableError: the model stayed unreachable after retries
        """
        set_owner_context(owner_id)
        logger.info(f"Processing text expense: {raw_text[:100]!r}")

        if raw_text and raw_text.strip():
            guess = self._extract_text(raw_text)
        else:
            guess = ExpenseGuess()

        draft = self.canonicalizer.canonicalize(guess, raw_text, SourceKind.TEXT)
        return self._persist(owner_id, draft)

    def process_image(self, owner_id: str, image_bytes: bytes, mime_type: str) -> ProcessingResult:
        """
        Turn a receipt photo into a saved expense.

        Raises:
            ExtractionUnavailableError: the model stayed unreachable after retries
        """
        set_owner_context(owner_id)
        logger.info(f"Processing image expense ({len(image_bytes)} bytes, {mime_type})")

        guess = self._extract_image(image_bytes, mime_type)
        draft = self.canonicalizer.canonicalize(guess, "", SourceKind.IMAGE)
        return self._persist(owner_id, draft)

    def monthly_report(
        self,
        owner_id: str,
        year: int = None,
        month: int = None,
        include_insights: bool = False
    ) -> MonthlyReport:
        """Category breakdown for a month, the current one by default."""
        set_owner_context(owner_id)
        today = date.today()
        year = year or today.year
        month = month or today.month

        records = self.store.query_by_scope(owner_id, year, month)
        report = self.aggregator.aggregate(records, owner_id, year, month)

        if include_insights and records:
            try:
                report.insights = self.extractor.generate_insights(records)
            except ExtractionUnavailableError as e:
                logger.warning(f"Report insights unavailable: {e}")

        return report

    def analytics(self, year: int = None, month: int = None) -> List[OwnerCategoryTotal]:
        """Spending of every owner by category for a month, the current one by default."""
        set_owner_context(None)
        today = date.today()
        year = year or today.year
        month = month or today.month

        rows = self.aggregator.owner_totals(self.store.query_all_by_scope(year, month))
        logger.info(f"Analytics for {year}-{month:02d}: {len(rows)} owner/category rows")
        return rows

    def recent_expenses(self, owner_id: str, limit: int = None) -> List[ExpenseRecord]:
        """Most recently recorded expenses."""
        return self.store.query_recent(owner_id, limit or self.settings.recent_limit)

    def expenses_between(self, owner_id: str, start: date, end: date) -> List[ExpenseRecord]:
        """Expenses dated within [start, end]."""
        return self.store.query_by_date_range(owner_id, start, end)

    def _persist(self, owner_id: str, draft: ExpenseDraft) -> ProcessingResult:
        if not draft.is_usable:
            logger.info("No usable amount found, asking for clarification")
            return ProcessingResult(draft=draft)

        record = self.store.insert(ExpenseRecord.from_draft(owner_id, draft))
        logger.info(f"Saved expense #{record.id}: {record.amount} ({record.category})")
        return ProcessingResult(draft=draft, record=record)
