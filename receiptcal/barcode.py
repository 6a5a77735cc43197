"""Date-driven pseudo-barcode for the bottom of the calendar receipt."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BarDescriptor:
    width_units: int
    is_black: bool


# Six bar/space widths per digit, indexed by digit % 12.
PATTERNS: tuple[tuple[int, ...], ...] = (
    (2, 1, 2, 2, 2, 1),
    (2, 2, 2, 1, 2, 1),
    (2, 2, 2, 1, 1, 2),
    (1, 2, 1, 2, 2, 2),
    (1, 2, 2, 2, 2, 1),
    (1, 1, 2, 2, 2, 2),
    (2, 1, 2, 1, 2, 2),
    (2, 1, 2, 2, 1, 2),
    (2, 2, 2, 2, 1, 1),
    (1, 1, 1, 3, 2, 2),
    (1, 1, 2, 3, 1, 2),
    (1, 2, 1, 3, 1, 2),
)

START_GUARD = (
    BarDescriptor(2, True),
    BarDescriptor(1, False),
    BarDescriptor(1, True),
    BarDescriptor(1, False),
)

END_GUARD = (
    BarDescriptor(2, True),
    BarDescriptor(1, False),
    BarDescriptor(1, True),
    BarDescriptor(2, False),
    BarDescriptor(1, True),
)


def base_code(year: int, month: int, days_in_month: int) -> str:
    """Return the number printed under the barcode, e.g. ``20260231``."""
    return f"{year}{month:02d}{days_in_month}"


def barcode_code(year: int, month: int, days_in_month: int) -> str:
    """Return the full digit string encoded by the bars."""
    base = base_code(year, month, days_in_month)
    return base + base[::-1] + "0123456789"


def generate_barcode(
    year: int, month: int, days_in_month: int
) -> tuple[BarDescriptor, ...]:
    """Build the bar sequence for a displayed month.

    ``days_in_month`` is trusted as-is; calendar correctness belongs to
    :mod:`receiptcal.months`.
    """
    bars: list[BarDescriptor] = list(START_GUARD)
    for char in barcode_code(year, month, days_in_month):
        pattern = PATTERNS[int(char) % len(PATTERNS)]
        for idx, width in enumerate(pattern):
            bars.append(BarDescriptor(width, idx % 2 == 0))
    bars.extend(END_GUARD)
    return tuple(bars)


def render_svg(
    bars: tuple[BarDescriptor, ...] | list[BarDescriptor],
    width: int = 292,
    height: int = 50,
    margin: int = 6,
    bar_height: int = 40,
    ink_ratio: float = 0.65,
) -> str:
    """Render black bars as an SVG document scaled to ``width - 2 * margin``."""
    total_units = sum(bar.width_units for bar in bars)
    unit = (width - 2 * margin) / total_units if total_units else 0.0
    y = (height - bar_height) / 2

    rects: list[str] = []
    x = float(margin)
    for bar in bars:
        slot = bar.width_units * unit
        if bar.is_black:
            rects.append(
                f'<rect x="{x:.3f}" y="{y:g}" width="{slot * ink_ratio:.3f}" '
                f'height="{bar_height}" fill="#1a1a1a"/>'
            )
        x += slot

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width} {height}" '
        f'preserveAspectRatio="none">' + "".join(rects) + "</svg>"
    )
