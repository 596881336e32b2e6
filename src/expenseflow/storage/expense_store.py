"""SQLite-backed expense storage."""
import sqlite3
from datetime import date, datetime
from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import List

from ..config.settings import get_settings
from ..llm.models import ExpenseRecord, SourceKind
from ..utils.exceptions import StorageError
from ..utils.logger import get_logger
from ..utils.paths import app_data_dir

logger = get_logger()

COLUMNS = "id, owner_id, amount, description, category, date, merchant, raw_text, source_kind, created_at"


def _month_bounds(year: int, month: int):
    """First day of the month and first day of the next one."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


class ExpenseStore:
    """Append-only store of expense records; every query is newest first."""

    def __init__(self, db_path: Path = None):
        self.db_path = Path(db_path) if db_path else app_data_dir() / get_settings().database_file
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS expenses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id TEXT NOT NULL,
                    amount TEXT NOT NULL,
                    description TEXT,
                    category TEXT,
                    date TEXT NOT NULL,
                    merchant TEXT,
                    raw_text TEXT,
                    source_kind TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_owner_date ON expenses(owner_id, date)")
            conn.commit()

    def insert(self, record: ExpenseRecord) -> ExpenseRecord:
        """Persist a record and return it with its assigned id."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO expenses
                    (owner_id, amount, description, category, date, merchant, raw_text, source_kind, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    record.owner_id,
                    str(record.amount),
                    record.description,
                    record.category,
                    record.date.isoformat(),
                    record.merchant,
                    record.raw_text,
                    record.source_kind.value,
                    record.created_at.isoformat()
                ))
                conn.commit()
                record_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save expense for {record.owner_id}: {e}")

        logger.debug(f"Stored expense #{record_id}: {record.amount} {record.category}")
        return replace(record, id=record_id)

    def query_by_scope(self, owner_id: str, year: int, month: int) -> List[ExpenseRecord]:
        """All records dated within the given calendar month."""
        start, end = _month_bounds(year, month)
        return self._select(
            "WHERE owner_id = ? AND date >= ? AND date < ?",
            (owner_id, start.isoformat(), end.isoformat())
        )

    def query_all_by_scope(self, year: int, month: int) -> List[ExpenseRecord]:
        """Records of every owner dated within the given calendar month."""
        start, end = _month_bounds(year, month)
        return self._select("WHERE date >= ? AND date < ?", (start.isoformat(), end.isoformat()))

    def query_recent(self, owner_id: str, limit: int = 10) -> List[ExpenseRecord]:
        """The most recently created records."""
        return self._select("WHERE owner_id = ?", (owner_id,), limit=limit)

    def query_by_date_range(self, owner_id: str, start: date, end: date) -> List[ExpenseRecord]:
        """Records dated between start and end, both inclusive."""
        return self._select(
            "WHERE owner_id = ? AND date BETWEEN ? AND ?",
            (owner_id, start.isoformat(), end.isoformat())
        )

    def _select(self, where: str, params: tuple, limit: int = None) -> List[ExpenseRecord]:
        query = f"SELECT {COLUMNS} FROM expenses {where} ORDER BY created_at DESC, id DESC"
        if limit is not None:
            query += " LIMIT ?"
            params = params + (limit,)

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            rows = cursor.fetchall()

        return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(row: tuple) -> ExpenseRecord:
        # row: (id, owner_id, amount, description, category, date, merchant, raw_text, source_kind, created_at)
        return ExpenseRecord(
            id=row[0],
            owner_id=row[1],
            amount=Decimal(row[2]),
            description=row[3] or "",
            category=row[4],
            date=date.fromisoformat(row[5]),
            merchant=row[6],
            raw_text=row[7] or "",
            source_kind=SourceKind(row[8]),
            created_at=datetime.fromisoformat(row[9])
        )
