"""Expense aggregation by category for one reporting period."""
from decimal import Decimal
from collections import defaultdict
from typing import List

from ..llm.models import CategorySummary, ExpenseRecord, MonthlyReport, OwnerCategoryTotal
from ..utils.logger import get_logger

logger = get_logger()


class Aggregator:
    """Aggregates expense records by category."""

    def aggregate(self, records: List[ExpenseRecord], owner_id: str, year: int, month: int) -> MonthlyReport:
        """
        Aggregate records of one (owner, year, month) scope.

        Args:
            records: Records matching the scope
            owner_id: Owner identifier
            year: Report year
            month: Report month (1-12)

        Returns:
            MonthlyReport with categories ordered by total descending
        """
        totals = defaultdict(Decimal)
        counts = defaultdict(int)
        for record in records:
            totals[record.category] += record.amount
            counts[record.category] += 1

        overall = sum(totals.values(), Decimal(0))

        summaries = [
            CategorySummary(
                category=category,
                count=counts[category],
                total=total,
                average=total / counts[category],
                percentage=self._percentage(total, overall),
            )
            for category, total in totals.items()
        ]
        summaries.sort(key=lambda s: (-s.total, s.category))

        logger.info(
            f"Aggregated {len(records)} expenses into {len(summaries)} categories "
            f"for {year}-{month:02d}"
        )

        return MonthlyReport(
            owner_id=owner_id,
            year=year,
            month=month,
            total=overall,
            count=len(records),
            categories=summaries,
        )

    def owner_totals(self, records: List[ExpenseRecord]) -> List[OwnerCategoryTotal]:
        """Per (owner, category) counts and totals, largest total first."""
        totals = defaultdict(Decimal)
        counts = defaultdict(int)
        for record in records:
            key = (record.owner_id, record.category)
            totals[key] += record.amount
            counts[key] += 1

        rows = [
            OwnerCategoryTotal(owner_id=owner_id, category=category, count=counts[(owner_id, category)], total=total)
            for (owner_id, category), total in totals.items()
        ]
        rows.sort(key=lambda r: (-r.total, r.owner_id, r.category))
        return rows

    @staticmethod
    def _percentage(part: Decimal, whole: Decimal) -> float:
        if whole == 0:
            return 0.0
        return float(part * 100 / whole)
