"""Tests for the canonicalizer/validator."""
import unittest
from datetime import date
from decimal import Decimal

from expenseflow.llm.models import ExpenseGuess, SourceKind
from expenseflow.orchestrator.canonicalizer import Canonicalizer, parse_date

TODAY = date(2025, 5, 17)


class TestCanonicalizer(unittest.TestCase):
    """Test Canonicalizer functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.canonicalizer = Canonicalizer(today=lambda: TODAY)

    def _canonicalize(self, raw_text="Kopi 15rb", source_kind=SourceKind.TEXT, **fields):
        return self.canonicalizer.canonicalize(ExpenseGuess(**fields), raw_text, source_kind)

    def test_rejects_non_positive_amounts(self):
        """Test zero and negative amounts are dropped."""
        self.assertIsNone(self._canonicalize(amount=0).amount)
        self.assertIsNone(self._canonicalize(amount=-5).amount)
        self.assertFalse(self._canonicalize(amount=0).is_usable)

    def test_accepts_small_positive_amount(self):
        """Test 0.01 is accepted."""
        draft = self._canonicalize(amount=0.01)

        self.assertEqual(draft.amount, Decimal("0.01"))
        self.assertTrue(draft.is_usable)

    def test_missing_amount(self):
        """Test absent amount needs clarification."""
        draft = self._canonicalize(raw_text="hello")

        self.assertIsNone(draft.amount)
        self.assertFalse(draft.is_usable)

    def test_description_defaults(self):
        """Test description fallbacks per source kind."""
        self.assertEqual(self._canonicalize(amount=1).description, "Kopi 15rb")
        self.assertEqual(self._canonicalize(amount=1, description="  ").description, "Kopi 15rb")
        self.assertEqual(
            self._canonicalize(raw_text="", source_kind=SourceKind.IMAGE, amount=1).description,
            "Expense from image"
        )
        self.assertEqual(self._canonicalize(amount=1, description="Kopi susu").description, "Kopi susu")

    def test_category_restricted_to_taxonomy(self):
        """Test unknown categories collapse to Other."""
        self.assertEqual(self._canonicalize(category="Food").category, "Food")
        self.assertEqual(self._canonicalize(category="food").category, "Food")
        self.assertEqual(self._canonicalize(category="Groceries").category, "Other")
        self.assertEqual(self._canonicalize().category, "Other")

    def test_date_defaults_to_today(self):
        """Test missing or malformed dates become today."""
        self.assertEqual(self._canonicalize().date, TODAY)
        self.assertEqual(self._canonicalize(date="yesterday").date, TODAY)
        self.assertEqual(self._canonicalize(date="2025-02-30").date, TODAY)
        self.assertEqual(self._canonicalize(date="2025-05-01").date, date(2025, 5, 1))

    def test_raw_text_per_source(self):
        """Test text keeps the message and images keep the transcript."""
        self.assertEqual(self._canonicalize(amount=1).raw_text, "Kopi 15rb")
        draft = self._canonicalize(raw_text="", source_kind=SourceKind.IMAGE)
        self.assertEqual(draft.raw_text, "")

        image_draft = self.canonicalizer.canonicalize(
            ExpenseGuess(amount=1, raw_text="TOTAL 45.000"), "", SourceKind.IMAGE
        )
        self.assertEqual(image_draft.raw_text, "TOTAL 45.000")
        self.assertEqual(image_draft.source_kind, SourceKind.IMAGE)

    def test_merchant_passthrough(self):
        """Test merchant is kept as-is."""
        self.assertEqual(self._canonicalize(merchant="KFC").merchant, "KFC")
        self.assertIsNone(self._canonicalize().merchant)


class TestParseDate(unittest.TestCase):
    """Test parse_date formats."""

    def test_formats(self):
        """Test common receipt date formats."""
        self.assertEqual(parse_date("2025-05-01"), date(2025, 5, 1))
        self.assertEqual(parse_date("01/05/2025"), date(2025, 5, 1))
        self.assertEqual(parse_date("01.05.25"), date(2025, 5, 1))
        self.assertEqual(parse_date("2025-05-01T10:30:00"), date(2025, 5, 1))
        self.assertIsNone(parse_date("not a date"))
        self.assertIsNone(parse_date(None))


if __name__ == "__main__":
    unittest.main()
