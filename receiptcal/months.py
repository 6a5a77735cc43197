"""Month arithmetic and receipt-line helpers for the calendar view."""

from __future__ import annotations

import calendar as _calendar
import math
import random
from dataclasses import dataclass
from datetime import date

MONTH_NAMES = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE",
    "JULY", "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)
DAY_HEADERS = ("SU", "MO", "TU", "WE", "TH", "FR", "SA")


@dataclass(frozen=True)
class Holiday:
    month: int  # 1-12
    day: int
    name: str


@dataclass(frozen=True)
class MonthSummary:
    days: int
    weekends: int
    weeks: int


def days_in_month(year: int, month: int) -> int:
    return _calendar.monthrange(year, month)[1]


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st, with Sunday as 0."""
    return (date(year, month, 1).weekday() + 1) % 7


def calendar_days(year: int, month: int) -> list[int | None]:
    """Grid cells for a Sunday-first month: leading blanks, then 1..N."""
    cells: list[int | None] = [None] * first_weekday(year, month)
    cells.extend(range(1, days_in_month(year, month) + 1))
    return cells


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def _nth_weekday(year: int, month: int, weekday: int, n: int) -> int:
    """Day of the n-th ``weekday`` (Monday=0) in a month; n=-1 for the last."""
    if n > 0:
        first = date(year, month, 1)
        offset = (weekday - first.weekday()) % 7
        return 1 + offset + 7 * (n - 1)
    last = date(year, month, days_in_month(year, month))
    return last.day - (last.weekday() - weekday) % 7


def us_holidays(year: int) -> tuple[Holiday, ...]:
    """US holidays and observances shown on the receipt for ``year``."""
    return (
        Holiday(1, 1, "New Year's Day"),
        Holiday(1, _nth_weekday(year, 1, 0, 3), "MLK Day"),
        Holiday(2, 14, "Valentine's Day"),
        Holiday(2, _nth_weekday(year, 2, 0, 3), "Presidents' Day"),
        Holiday(3, 17, "St. Patrick's Day"),
        Holiday(5, _nth_weekday(year, 5, 0, -1), "Memorial Day"),
        Holiday(7, 4, "Independence Day"),
        Holiday(9, _nth_weekday(year, 9, 0, 1), "Labor Day"),
        Holiday(10, 31, "Halloween"),
        Holiday(11, 11, "Veterans Day"),
        Holiday(11, _nth_weekday(year, 11, 3, 4), "Thanksgiving"),
        Holiday(12, 25, "Christmas"),
        Holiday(12, 31, "New Year's Eve"),
    )


def holiday_for(year: int, month: int, day: int | None) -> Holiday | None:
    if day is None:
        return None
    for holiday in us_holidays(year):
        if holiday.month == month and holiday.day == day:
            return holiday
    return None


def month_summary(year: int, month: int) -> MonthSummary:
    """Subtotal lines printed under the grid.

    The weekend count is the receipt's own approximation, not an exact count.
    """
    days = days_in_month(year, month)
    weekends = days // 7 * 2 + (1 if days % 7 else 0)
    weeks = math.ceil((days + first_weekday(year, month)) / 7)
    return MonthSummary(days=days, weekends=weekends, weeks=weeks)


def unit_price(day: int) -> float:
    return round(day * 0.99, 2)


def format_price(day: int | None) -> str:
    if not day:
        return ""
    return f"${unit_price(day):.2f}"


def transaction_number(year: int, month: int) -> str:
    return f"TRX #00{month}{year}"


def expense_key(year: int, month: int, day: int) -> str:
    """Storage key for a day's expenses."""
    return f"{year}-{month}-{day}"


def parse_expense_key(key: str) -> date:
    year, month, day = (int(part) for part in key.split("-"))
    return date(year, month, day)


def is_past(year: int, month: int, day: int, today: date | None = None) -> bool:
    today = today or date.today()
    return date(year, month, day) < today


_PLACEHOLDER_ITEMS = (
    "COFFEE",
    "BAGEL",
    "LUNCH SPECIAL",
    "BUS FARE",
    "GROCERIES",
    "PARKING",
    "SNACK",
    "DINNER",
    "PHONE BILL",
    "MOVIE TICKET",
    "PHARMACY",
    "GAS",
)


def placeholder_expenses(day: int, max_items: int = 3) -> list[dict]:
    """Filler expenses for past days without real entries.

    Seeded only by the day of month, so every month shows the same filler
    for the same day and repeated calls agree.
    """
    rng = random.Random(day)
    count = 1 + rng.randrange(max_items)
    return [
        {
            "name": rng.choice(_PLACEHOLDER_ITEMS),
            "price": round(rng.uniform(1.5, 45.0), 2),
        }
        for _ in range(count)
    ]

