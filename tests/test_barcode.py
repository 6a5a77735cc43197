"""Tests for the date-driven barcode generator."""

import re

import pytest

from receiptcal.barcode import (
    END_GUARD,
    PATTERNS,
    START_GUARD,
    BarDescriptor,
    barcode_code,
    base_code,
    generate_barcode,
    render_svg,
)


class TestCodes:
    def test_base_code_pads_month(self):
        assert base_code(2026, 2, 28) == "20260228"
        assert base_code(2026, 10, 31) == "20261031"

    def test_barcode_code_mirrors_and_appends_digits(self):
        assert barcode_code(2026, 2, 28) == "20260228" + "82206202" + "0123456789"


class TestGenerateBarcode:
    def test_deterministic(self):
        assert generate_barcode(2026, 2, 28) == generate_barcode(2026, 2, 28)

    def test_different_months_differ(self):
        assert generate_barcode(2026, 2, 28) != generate_barcode(2026, 3, 31)

    def test_length(self):
        code = barcode_code(2024, 2, 29)
        bars = generate_barcode(2024, 2, 29)
        assert len(code) == 2 * len(base_code(2024, 2, 29)) + 10
        assert len(bars) == 9 + 6 * len(code)
        assert len(bars) == 165

    def test_guards(self):
        bars = generate_barcode(2026, 10, 31)
        assert bars[:4] == START_GUARD
        assert bars[-5:] == END_GUARD
        assert [(b.width_units, b.is_black) for b in bars[:4]] == [
            (2, True), (1, False), (1, True), (1, False),
        ]
        assert [(b.width_units, b.is_black) for b in bars[-5:]] == [
            (2, True), (1, False), (1, True), (2, False), (1, True),
        ]

    def test_widths_in_range(self):
        for bar in generate_barcode(1999, 12, 31):
            assert bar.width_units in (1, 2, 3)

    def test_digit_groups_follow_pattern_table(self):
        bars = generate_barcode(2026, 2, 28)
        code = barcode_code(2026, 2, 28)
        for i, char in enumerate(code):
            group = bars[4 + 6 * i: 10 + 6 * i]
            assert tuple(b.width_units for b in group) == PATTERNS[int(char) % 12]
            assert [b.is_black for b in group] == [True, False] * 3

    def test_zero_digit_uses_first_pattern(self):
        bars = generate_barcode(2000, 1, 31)
        # code starts with "2000": second group is the digit 0
        group = bars[10:16]
        assert tuple(b.width_units for b in group) == (2, 1, 2, 2, 2, 1)

    def test_returns_immutable_sequence(self):
        bars = generate_barcode(2026, 2, 28)
        assert isinstance(bars, tuple)
        with pytest.raises(AttributeError):
            bars[0].width_units = 5  # type: ignore[misc]

    def test_trusts_day_count(self):
        # No calendar validation: an impossible day count still renders
        bars = generate_barcode(2026, 2, 99)
        assert len(bars) == 9 + 6 * len(barcode_code(2026, 2, 99))


class TestRenderSvg:
    def test_draws_only_black_bars(self):
        bars = generate_barcode(2026, 2, 28)
        svg = render_svg(bars)
        assert svg.startswith("<svg")
        assert 'viewBox="0 0 292 50"' in svg
        assert svg.count("<rect") == sum(1 for b in bars if b.is_black)

    def test_bars_span_drawable_width(self):
        bars = [BarDescriptor(1, True), BarDescriptor(1, False), BarDescriptor(2, True)]
        svg = render_svg(bars, width=100, margin=0, ink_ratio=1.0)
        xs = [float(x) for x in re.findall(r'x="([\d.]+)"', svg)]
        widths = [float(w) for w in re.findall(r'width="([\d.]+)"', svg)]
        assert xs == [0.0, 50.0]
        assert widths == [25.0, 50.0]

    def test_empty_sequence(self):
        assert "<rect" not in render_svg([])
