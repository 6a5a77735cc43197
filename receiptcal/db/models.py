"""Expense record kept per calendar day."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ExpenseRecord:
    name: str
    price: float
    store: str = ""
    source: str = "manual"  # manual | scan
