"""Receipt-roll PDF of a calendar month using ReportLab."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from . import months as cal
from .barcode import base_code, generate_barcode

if TYPE_CHECKING:
    from .db import ExpenseStore

# 80 mm thermal roll, tall enough for a six-week month
_ROLL_WIDTH_MM = 80
_ROLL_HEIGHT_MM = 250


def _barcode_drawing(year: int, month: int, width: float, height: float):
    """Draw the month's barcode as a ReportLab Drawing flowable."""
    from reportlab.graphics.shapes import Drawing, Rect
    from reportlab.lib import colors

    bars = generate_barcode(year, month, cal.days_in_month(year, month))
    total_units = sum(bar.width_units for bar in bars)
    unit = width / total_units

    drawing = Drawing(width, height)
    x = 0.0
    for bar in bars:
        slot = bar.width_units * unit
        if bar.is_black:
            drawing.add(
                Rect(x, 0, slot * 0.65, height,
                     fillColor=colors.HexColor("#1a1a1a"), strokeColor=None)
            )
        x += slot
    return drawing


def _day_spend(year: int, month: int, day: int, store: ExpenseStore, today) -> float | None:
    """Spend shown for one day: recorded total, else filler for past days."""
    records = store.get(cal.expense_key(year, month, day))
    if records:
        return round(sum(rec.price for rec in records), 2)
    if cal.is_past(year, month, day, today.date()):
        return round(sum(item["price"] for item in cal.placeholder_expenses(day)), 2)
    return None


def _month_spend(year: int, month: int, store: ExpenseStore, today) -> float:
    """Sum of the per-day figures printed in the grid."""
    return round(sum(
        _day_spend(year, month, day, store, today) or 0.0
        for day in range(1, cal.days_in_month(year, month) + 1)
    ), 2)


def _day_cell(
    year: int,
    month: int,
    day: int | None,
    store: ExpenseStore | None,
    today,
) -> str:
    if day is None:
        return ""
    holiday = cal.holiday_for(year, month, day)
    if store is None:
        return f"{day:02d}\n*" if holiday else f"{day:02d}\n{cal.format_price(day)}"

    label = f"{day:02d}*" if holiday else f"{day:02d}"
    spend = _day_spend(year, month, day, store, today)
    if spend is None:
        return f"{label}\n-"
    return f"{label}\n${spend:.2f}"


def generate_receipt_pdf(
    year: int,
    month: int,
    output_path: str | Path,
    store: ExpenseStore | None = None,
    today: datetime | None = None,
) -> Path:
    """Generate a receipt-styled PDF for one month.

    Args:
        year: Calendar year.
        month: Month, 1-12.
        output_path: Where to save the PDF file.
        store: When given, each day shows its spend instead of the unit price.
        today: Timestamp printed in the header; defaults to now.

    Returns:
        Path to the generated PDF file.

    Raises:
        ImportError: If reportlab is not installed.
    """
    try:
        from reportlab.lib import colors
        from reportlab.lib.enums import TA_CENTER
        from reportlab.lib.styles import ParagraphStyle
        from reportlab.lib.units import mm
        from reportlab.platypus import (
            HRFlowable,
            Paragraph,
            SimpleDocTemplate,
            Spacer,
            Table,
            TableStyle,
        )
    except ImportError:
        raise ImportError(
            "reportlab is required: pip install 'receiptcal[pdf]'"
        )

    today = today or datetime.now()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    page_width = _ROLL_WIDTH_MM * mm
    margin = 4 * mm
    content_width = page_width - 2 * margin

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=(page_width, _ROLL_HEIGHT_MM * mm),
        leftMargin=margin,
        rightMargin=margin,
        topMargin=margin,
        bottomMargin=margin,
        title=f"{cal.MONTH_NAMES[month - 1]} {year}",
    )

    title_style = ParagraphStyle(
        "ReceiptTitle",
        fontName="Courier-Bold",
        fontSize=18,
        leading=22,
        alignment=TA_CENTER,
    )
    center_style = ParagraphStyle(
        "ReceiptCenter",
        fontName="Courier",
        fontSize=7,
        leading=9,
        alignment=TA_CENTER,
        textColor=colors.HexColor("#666666"),
    )
    body_style = ParagraphStyle(
        "ReceiptBody",
        fontName="Courier",
        fontSize=7,
        leading=9,
    )
    month_style = ParagraphStyle(
        "ReceiptMonth",
        fontName="Courier-Bold",
        fontSize=11,
        leading=14,
        alignment=TA_CENTER,
    )

    def divider():
        return HRFlowable(
            width="100%", thickness=1, dash=(3, 2), color=colors.black,
            spaceBefore=2 * mm, spaceAfter=2 * mm,
        )

    elements: list = [
        Paragraph("CALENDAR", title_style),
        Paragraph("* TIME &amp; DATE EMPORIUM *", center_style),
        Paragraph("123 TEMPORAL AVE, CHRONOS CITY", center_style),
        Paragraph("TEL: (555) TIME-FLY", center_style),
        divider(),
        Paragraph(
            f"{cal.transaction_number(year, month)}&nbsp;&nbsp;&nbsp;CASHIER: RECEIPTCAL",
            body_style,
        ),
        Paragraph(f"DATE: {today.strftime('%a, %b %d, %Y').upper()}", body_style),
        Paragraph(f"TIME: {today.strftime('%I:%M %p')}", body_style),
        divider(),
        Paragraph(f"{cal.MONTH_NAMES[month - 1]} '{year % 100:02d}", month_style),
        Spacer(1, 2 * mm),
    ]

    # Month grid
    cells = [_day_cell(year, month, d, store, today) for d in cal.calendar_days(year, month)]
    cells.extend([""] * (-len(cells) % 7))
    grid = [list(cal.DAY_HEADERS)] + [cells[i:i + 7] for i in range(0, len(cells), 7)]

    grid_style = [
        ("FONTNAME", (0, 0), (-1, -1), "Courier"),
        ("FONTNAME", (0, 0), (-1, 0), "Courier-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 6),
        ("LEADING", (0, 0), (-1, -1), 7),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.black),
        ("TOPPADDING", (0, 0), (-1, -1), 2),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
    ]
    for idx, day in enumerate(cal.calendar_days(year, month)):
        if cal.holiday_for(year, month, day):
            pos = (idx % 7, idx // 7 + 1)
            grid_style.append(("BACKGROUND", pos, pos, colors.HexColor("#fff3e0")))
            grid_style.append(("TEXTCOLOR", pos, pos, colors.HexColor("#e65100")))

    grid_table = Table(grid, colWidths=[content_width / 7] * 7)
    grid_table.setStyle(TableStyle(grid_style))
    elements.append(grid_table)
    elements.append(divider())

    # Subtotals
    summary = cal.month_summary(year, month)
    rows = [
        ["DAYS THIS MONTH:", str(summary.days)],
        ["WEEKENDS:", str(summary.weekends)],
        ["WEEKS:", str(summary.weeks)],
    ]
    if store is not None:
        rows.append(["MONTH SPEND:", f"${_month_spend(year, month, store, today):.2f}"])
    rows.append(["TOTAL DAYS:", str(summary.days)])

    summary_table = Table(rows, colWidths=[content_width * 0.7, content_width * 0.3])
    summary_table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), "Courier"),
        ("FONTNAME", (0, -1), (-1, -1), "Courier-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 7),
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEABOVE", (0, -1), (-1, -1), 1, colors.black),
        ("TOPPADDING", (0, 0), (-1, -1), 1),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
    ]))
    elements.append(summary_table)
    elements.append(Spacer(1, 4 * mm))

    # Barcode
    elements.append(_barcode_drawing(year, month, content_width, 12 * mm))
    elements.append(
        Paragraph(base_code(year, month, summary.days), center_style)
    )
    elements.append(divider())

    for line in (
        "THANK YOU FOR YOUR TIME!",
        "PLEASE COME AGAIN",
        "*** NO REFUNDS ON TIME ***",
        "CUSTOMER COPY",
    ):
        elements.append(Paragraph(line, center_style))

    doc.build(elements)
    return output_path
