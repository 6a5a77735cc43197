"""Expense persistence: the store port and its SQLite implementation."""

from .expenses import (
    ExpenseDB,
    ExpenseStore,
    MemoryExpenseStore,
    records_from_extraction,
)
from .models import ExpenseRecord
from .schema import ensure_schema

__all__ = [
    "ExpenseDB",
    "ExpenseRecord",
    "ExpenseStore",
    "MemoryExpenseStore",
    "ensure_schema",
    "records_from_extraction",
]
