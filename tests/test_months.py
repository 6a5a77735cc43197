"""Tests for month arithmetic and receipt-line helpers."""

from datetime import date

from receiptcal import months as cal


class TestMonthMath:
    def test_days_in_month(self):
        assert cal.days_in_month(2024, 2) == 29
        assert cal.days_in_month(2026, 2) == 28
        assert cal.days_in_month(2026, 10) == 31

    def test_first_weekday_sunday_based(self):
        # 2026-02-01 is a Sunday, 2026-10-01 a Thursday
        assert cal.first_weekday(2026, 2) == 0
        assert cal.first_weekday(2026, 10) == 4

    def test_calendar_days(self):
        cells = cal.calendar_days(2026, 10)
        assert cells[:4] == [None] * 4
        assert cells[4] == 1
        assert cells[-1] == 31
        assert len(cells) == 35

    def test_navigation_wraps_years(self):
        assert cal.previous_month(2026, 1) == (2025, 12)
        assert cal.next_month(2026, 12) == (2027, 1)
        assert cal.next_month(2026, 5) == (2026, 6)


class TestHolidays:
    def test_floating_holidays_2026(self):
        names = {(h.month, h.day): h.name for h in cal.us_holidays(2026)}
        assert names[(1, 19)] == "MLK Day"
        assert names[(2, 16)] == "Presidents' Day"
        assert names[(5, 25)] == "Memorial Day"
        assert names[(9, 7)] == "Labor Day"
        assert names[(11, 26)] == "Thanksgiving"

    def test_floating_holidays_move_with_year(self):
        names = {h.name: (h.month, h.day) for h in cal.us_holidays(2025)}
        assert names["Thanksgiving"] == (11, 27)
        assert names["Memorial Day"] == (5, 26)

    def test_holiday_for(self):
        assert cal.holiday_for(2026, 12, 25).name == "Christmas"
        assert cal.holiday_for(2026, 12, 24) is None
        assert cal.holiday_for(2026, 12, None) is None


class TestSummary:
    def test_month_summary(self):
        summary = cal.month_summary(2026, 10)
        assert summary.days == 31
        assert summary.weekends == 9
        assert summary.weeks == 5

    def test_february_without_remainder(self):
        summary = cal.month_summary(2026, 2)
        assert summary.weekends == 8
        assert summary.weeks == 4

    def test_prices(self):
        assert cal.unit_price(10) == 9.9
        assert cal.format_price(31) == "$30.69"
        assert cal.format_price(None) == ""

    def test_transaction_number(self):
        assert cal.transaction_number(2026, 3) == "TRX #0032026"


class TestKeys:
    def test_expense_key_round_trip(self):
        key = cal.expense_key(2026, 3, 7)
        assert key == "2026-3-7"
        assert cal.parse_expense_key(key) == date(2026, 3, 7)

    def test_is_past(self):
        assert cal.is_past(2026, 3, 7, today=date(2026, 3, 8))
        assert not cal.is_past(2026, 3, 8, today=date(2026, 3, 8))


class TestPlaceholderExpenses:
    def test_deterministic_per_day(self):
        assert cal.placeholder_expenses(12) == cal.placeholder_expenses(12)

    def test_shape(self):
        for day in range(1, 32):
            items = cal.placeholder_expenses(day)
            assert 1 <= len(items) <= 3
            for item in items:
                assert isinstance(item["name"], str)
                assert 1.5 <= item["price"] <= 45.0
