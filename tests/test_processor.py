"""End-to-end tests for the expense processor."""
import logging
import threading
import unittest
import tempfile
import shutil
from dataclasses import replace
from datetime import date
from decimal import Decimal
from pathlib import Path

from expenseflow.config.settings import get_settings
from expenseflow.llm.extractor import ExpenseExtractor
from expenseflow.llm.models import SourceKind
from expenseflow.orchestrator.canonicalizer import Canonicalizer
from expenseflow.orchestrator.processor import ExpenseProcessor
from expenseflow.storage.expense_store import ExpenseStore
from expenseflow.utils.exceptions import ExtractionUnavailableError
from expenseflow.utils.logger import OwnerContextFilter

from fakes import BarrierModelClient, FakeModelClient, FlakyModelClient

TODAY = date(2025, 5, 17)


class TestExpenseProcessor(unittest.TestCase):
    """Test ExpenseProcessor flows."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.store = ExpenseStore(self.test_dir / "expenses.db")
        self.settings = replace(get_settings(), retry_max_retries=0, retry_initial_delay_seconds=0)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _processor(self, client, settings=None):
        return ExpenseProcessor(
            ExpenseExtractor(client),
            self.store,
            settings=settings or self.settings,
            canonicalizer=Canonicalizer(today=lambda: TODAY)
        )

    def test_text_expense_saved(self):
        """Test "Kopi 15rb" is stored as a Food expense."""
        client = FakeModelClient(['{"amount": 15000, "description": "Kopi", "category": "Food"}'])
        result = self._processor(client).process_text("owner1", "Kopi 15rb")

        self.assertFalse(result.needs_clarification)
        self.assertEqual(result.record.amount, Decimal("15000"))
        self.assertEqual(result.record.category, "Food")
        self.assertEqual(result.record.date, TODAY)
        self.assertEqual(result.record.raw_text, "Kopi 15rb")
        self.assertEqual(self.store.query_recent("owner1"), [result.record])

    def test_heuristic_path_without_model(self):
        """Test offline extraction of "Kopi 15rb"."""
        result = self._processor(None).process_text("owner1", "Kopi 15rb")

        self.assertEqual(result.record.amount, Decimal("15000"))
        self.assertEqual(result.record.category, "Food")
        self.assertEqual(result.record.description, "Kopi 15rb")

    def test_no_amount_needs_clarification(self):
        """Test nothing is stored without an amount."""
        client = FakeModelClient(['{"amount": null, "category": "Other"}'])
        result = self._processor(client).process_text("owner1", "hello")

        self.assertTrue(result.needs_clarification)
        self.assertIsNone(result.record)
        self.assertEqual(self.store.query_recent("owner1"), [])

    def test_zero_amount_needs_clarification(self):
        """Test zero from the model is rejected."""
        client = FakeModelClient(['{"amount": 0, "description": "free"}'])
        result = self._processor(client).process_text("owner1", "gratis")

        self.assertTrue(result.needs_clarification)
        self.assertEqual(self.store.query_recent("owner1"), [])

    def test_negative_string_amount_needs_clarification(self):
        """Test "-5000" from the model is rejected like -5000."""
        for answer in ('{"amount": "-5000"}', '{"amount": -5000}'):
            client = FakeModelClient([answer])
            result = self._processor(client).process_text("owner1", "Kopi 15rb")

            self.assertTrue(result.needs_clarification)
            self.assertIsNone(result.draft.amount)
        self.assertEqual(self.store.query_recent("owner1"), [])

    def test_blank_message_skips_model(self):
        """Test blank input asks for clarification without a model call."""
        client = FakeModelClient(['{"amount": 1}'])
        result = self._processor(client).process_text("owner1", "   ")

        self.assertTrue(result.needs_clarification)
        self.assertEqual(client.calls, [])

    def test_model_unavailable_stores_nothing(self):
        """Test unavailability propagates and nothing is persisted."""
        client = FakeModelClient(error=ExtractionUnavailableError("quota exceeded"))

        with self.assertRaises(ExtractionUnavailableError):
            self._processor(client).process_text("owner1", "Kopi 15rb")
        self.assertEqual(self.store.query_recent("owner1"), [])

    def test_transient_failure_retried(self):
        """Test a flaky model is retried."""
        client = FlakyModelClient(
            failures=1,
            error=ExtractionUnavailableError("timeout"),
            responses=['{"amount": 12000, "category": "Transport"}']
        )
        settings = replace(self.settings, retry_max_retries=1)

        result = self._processor(client, settings).process_text("owner1", "Ojek 12000")

        self.assertEqual(len(client.calls), 2)
        self.assertEqual(result.record.category, "Transport")

    def test_image_expense_saved(self):
        """Test a receipt photo produces an image record."""
        client = FakeModelClient([
            '{"amount": "Rp 45.000", "category": "shopping", "merchant": "Indomaret", '
            '"date": "2025-05-02", "raw_text": "INDOMARET TOTAL 45.000"}'
        ])
        result = self._processor(client).process_image("owner1", b"img", "image/jpeg")

        record = result.record
        self.assertEqual(record.amount, Decimal("45000"))
        self.assertEqual(record.category, "Shopping")
        self.assertEqual(record.description, "Expense from image")
        self.assertEqual(record.merchant, "Indomaret")
        self.assertEqual(record.date, date(2025, 5, 2))
        self.assertEqual(record.source_kind, SourceKind.IMAGE)
        self.assertEqual(record.raw_text, "INDOMARET TOTAL 45.000")

    def test_monthly_report(self):
        """Test the report covers only the requested owner and month."""
        processor = self._processor(None)
        processor.process_text("owner1", "Kopi 15rb")
        processor.process_text("owner1", "Ojek 12000")
        processor.process_text("owner2", "Belanja 100rb")

        report = processor.monthly_report("owner1", 2025, 5)

        self.assertEqual(report.total, Decimal("27000"))
        self.assertEqual(report.count, 2)
        self.assertEqual([s.category for s in report.categories], ["Food", "Transport"])
        self.assertIsNone(report.insights)

    def test_insights_failure_leaves_report(self):
        """Test a failing insights call does not break the report."""
        self._processor(None).process_text("owner1", "Kopi 15rb")
        client = FakeModelClient(error=ExtractionUnavailableError("quota exceeded"))

        report = self._processor(client).monthly_report("owner1", 2025, 5, include_insights=True)

        self.assertEqual(report.count, 1)
        self.assertIsNone(report.insights)

    def test_insights_added(self):
        """Test model commentary is attached to the report."""
        self._processor(None).process_text("owner1", "Kopi 15rb")
        client = FakeModelClient(["  Spending is mostly on coffee.  "])

        report = self._processor(client).monthly_report("owner1", 2025, 5, include_insights=True)

        self.assertEqual(report.insights, "Spending is mostly on coffee.")
        self.assertIn("Food", client.calls[0]["prompt"])

    def test_recent_and_range(self):
        """Test recent listing and date range queries."""
        processor = self._processor(None)
        processor.process_text("owner1", "Kopi 15rb")
        processor.process_text("owner1", "Ojek 12000")

        recent = processor.recent_expenses("owner1", limit=1)
        self.assertEqual(len(recent), 1)
        self.assertEqual(recent[0].amount, Decimal("12000"))

        in_range = processor.expenses_between("owner1", TODAY, TODAY)
        self.assertEqual(len(in_range), 2)

    def test_analytics_covers_all_owners(self):
        """Test spending of every owner is grouped by category."""
        processor = self._processor(None)
        processor.process_text("owner1", "Kopi 15rb")
        processor.process_text("owner1", "Kopi 10rb")
        processor.process_text("owner2", "Belanja 100rb")

        rows = processor.analytics(2025, 5)

        self.assertEqual(
            [(r.owner_id, r.category, r.count, r.total) for r in rows],
            [("owner2", "Shopping", 1, Decimal("100000")), ("owner1", "Food", 2, Decimal("25000"))]
        )
        self.assertEqual(processor.analytics(2025, 6), [])


class RecordingHandler(logging.Handler):
    """Collects (owner, message) pairs of every log record."""

    def __init__(self):
        super().__init__()
        self.entries = []
        self.addFilter(OwnerContextFilter())

    def emit(self, record):
        self.entries.append((record.owner_id, record.getMessage()))


class TestConcurrentOwners(unittest.TestCase):
    """Test log context when requests of different owners overlap."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.handler = RecordingHandler()
        logging.getLogger("expenseflow").addHandler(self.handler)

    def tearDown(self):
        """Clean up test fixtures."""
        logging.getLogger("expenseflow").removeHandler(self.handler)
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_each_request_logs_its_own_owner(self):
        """Test overlapping requests keep separate owner context."""
        client = BarrierModelClient(parties=2, response='{"amount": 15000, "category": "Food"}')
        processor = ExpenseProcessor(
            ExpenseExtractor(client),
            ExpenseStore(self.test_dir / "expenses.db"),
            settings=replace(get_settings(), retry_max_retries=0)
        )
        results = {}
        errors = []

        def run(owner_id):
            try:
                results[owner_id] = processor.process_text(owner_id, "Kopi 15rb")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=run, args=(owner,)) for owner in ("alice", "bob")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        self.assertEqual(errors, [])
        self.assertEqual(sorted(results), ["alice", "bob"])
        for owner_id, result in results.items():
            saved = [
                owner for owner, message in self.handler.entries
                if message.startswith(f"Saved expense #{result.record.id}:")
            ]
            self.assertEqual(saved, [owner_id])


if __name__ == "__main__":
    unittest.main()
