"""Per-day expense storage keyed by ``"{year}-{month}-{day}"``."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Protocol

from ..months import parse_expense_key
from .models import ExpenseRecord
from .schema import ensure_schema

logger = logging.getLogger(__name__)


class ExpenseStore(Protocol):
    """Key-value port the calendar reads and writes day expenses through."""

    def get(self, key: str) -> list[ExpenseRecord]: ...

    def put(self, key: str, records: list[ExpenseRecord]) -> None: ...


class MemoryExpenseStore:
    """Dict-backed store for tests and one-shot CLI runs."""

    def __init__(self) -> None:
        self._data: dict[str, list[ExpenseRecord]] = {}

    def get(self, key: str) -> list[ExpenseRecord]:
        return list(self._data.get(key, []))

    def put(self, key: str, records: list[ExpenseRecord]) -> None:
        parse_expense_key(key)
        if records:
            self._data[key] = list(records)
        else:
            self._data.pop(key, None)


class ExpenseDB:
    """Manages the expenses table."""

    def __init__(
        self, db_path: str | Path = "~/.config/receiptcal/expenses.db"
    ) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get(self, key: str) -> list[ExpenseRecord]:
        """Return the records stored for a day, in insertion order."""
        conn = self._get_conn()
        rows = conn.execute(
            """SELECT name, price, store, source FROM expenses
               WHERE day_key = ? ORDER BY position, id""",
            (key,),
        ).fetchall()
        return [
            ExpenseRecord(
                name=r["name"], price=r["price"], store=r["store"], source=r["source"]
            )
            for r in rows
        ]

    def put(self, key: str, records: list[ExpenseRecord]) -> None:
        """Replace all records for a day.

        Raises:
            ValueError: If ``key`` is not a valid ``year-month-day`` key.
        """
        day = parse_expense_key(key)
        conn = self._get_conn()
        with conn:
            conn.execute("DELETE FROM expenses WHERE day_key = ?", (key,))
            conn.executemany(
                """INSERT INTO expenses
                   (day_key, year, month, day, position, name, price, store, source)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        key,
                        day.year,
                        day.month,
                        day.day,
                        position,
                        rec.name,
                        rec.price,
                        rec.store,
                        rec.source,
                    )
                    for position, rec in enumerate(records)
                ],
            )
        logger.debug("Stored %d expenses under %s", len(records), key)

    def month_totals(self, year: int, month: int) -> dict[int, float]:
        """Return ``{day: total}`` for days with at least one record."""
        conn = self._get_conn()
        rows = conn.execute(
            """SELECT day, SUM(price) AS total FROM expenses
               WHERE year = ? AND month = ?
               GROUP BY day ORDER BY day""",
            (year, month),
        ).fetchall()
        return {r["day"]: round(r["total"], 2) for r in rows}

    def month_total(self, year: int, month: int) -> float:
        return round(sum(self.month_totals(year, month).values()), 2)


def records_from_extraction(extraction: dict) -> list[ExpenseRecord]:
    """Convert an extracted receipt into scan-sourced expense records.

    Items whose price is not numeric are skipped.
    """
    store = extraction.get("storeName") or ""
    records: list[ExpenseRecord] = []
    items = extraction.get("items")
    if not isinstance(items, list):
        if items:
            logger.warning("Receipt items are not a list: %r", items)
        return records
    for item in items:
        if not isinstance(item, dict):
            logger.warning("Skipping malformed receipt item: %r", item)
            continue
        try:
            price = float(item.get("price"))
        except (TypeError, ValueError):
            logger.warning("Skipping item with non-numeric price: %r", item)
            continue
        records.append(
            ExpenseRecord(
                name=str(item.get("name") or ""),
                price=price,
                store=str(store),
                source="scan",
            )
        )
    return records
