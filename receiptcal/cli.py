"""CLI entry point for the receipt calendar."""

from __future__ import annotations

import argparse
import asyncio
import base64
import json
import logging
import mimetypes
import sys
from datetime import date, datetime
from pathlib import Path

from dotenv import load_dotenv

from . import months as cal
from .barcode import base_code, generate_barcode, render_svg
from .config import load_config
from .errors import ReceiptCalError
from .extraction import extract_receipt
from .vision import create_backend

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="receiptcal",
        description="Receipt-themed calendar: barcodes, receipt scanning and expenses",
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="Path to a TOML config file"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # barcode
    barcode_parser = sub.add_parser("barcode", help="Show the barcode for a month")
    _add_month_args(barcode_parser)
    barcode_parser.add_argument("--svg", type=str, default=None, metavar="FILE",
                                help="Write the barcode as SVG")
    barcode_parser.add_argument("--json", action="store_true", help="Output bar descriptors as JSON")

    # scan
    scan_parser = sub.add_parser("scan", help="Extract line items from a receipt photo")
    scan_parser.add_argument("image", type=str, help="Receipt image file")
    scan_parser.add_argument("--json", action="store_true", help="Output JSON")
    scan_parser.add_argument("--save", action="store_true",
                             help="Store the items as expenses")
    scan_parser.add_argument("--date", type=str, default=None,
                             help="Day to store under (YYYY-MM-DD); defaults to the receipt date")

    # serve
    serve_parser = sub.add_parser("serve", help="Run the extraction API server")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    # expenses
    exp_parser = sub.add_parser("expenses", help="List expenses for a day")
    exp_parser.add_argument("date", type=str, help="YYYY-MM-DD")

    # add
    add_parser = sub.add_parser("add", help="Record a manual expense")
    add_parser.add_argument("date", type=str, help="YYYY-MM-DD")
    add_parser.add_argument("name", type=str)
    add_parser.add_argument("price", type=float)

    # receipt
    receipt_parser = sub.add_parser("receipt", help="Render the month as a receipt PDF")
    _add_month_args(receipt_parser)
    receipt_parser.add_argument("--pdf", type=str, default=None, metavar="FILE",
                                help="Write the PDF to FILE (default receipt_YYYY_MM.pdf)")
    receipt_parser.add_argument("--expenses", action="store_true",
                                help="Show recorded spend per day instead of unit prices")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s [%(name)s] %(message)s",
    )
    config = load_config(args.config)

    try:
        match args.command:
            case "barcode":
                _cmd_barcode(args)
            case "scan":
                asyncio.run(_cmd_scan(config, args))
            case "serve":
                from .server import run

                run(config, host=args.host, port=args.port)
            case "expenses":
                _cmd_expenses(config, args)
            case "add":
                _cmd_add(config, args)
            case "receipt":
                _cmd_receipt(config, args)
    except (ReceiptCalError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _add_month_args(parser: argparse.ArgumentParser) -> None:
    today = date.today()
    parser.add_argument("--year", type=int, default=today.year)
    parser.add_argument("--month", type=int, default=today.month, choices=range(1, 13),
                        metavar="1-12")


def _day_key(text: str) -> str:
    day = date.fromisoformat(text)
    return cal.expense_key(day.year, day.month, day.day)


def _cmd_barcode(args) -> None:
    days = cal.days_in_month(args.year, args.month)
    bars = generate_barcode(args.year, args.month, days)

    if args.svg:
        Path(args.svg).write_text(render_svg(bars), encoding="utf-8")
        print(f"SVG saved: {args.svg}")
        return

    if args.json:
        data = [{"widthUnits": b.width_units, "isBlack": b.is_black} for b in bars]
        print(json.dumps(data))
        return

    line = "".join(("█" if b.is_black else " ") * b.width_units for b in bars)
    for _ in range(3):
        print(line)
    print(base_code(args.year, args.month, days).center(len(line)))


async def _cmd_scan(config, args) -> None:
    path = Path(args.image)
    media_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    payload = base64.standard_b64encode(path.read_bytes()).decode()
    image = f"data:{media_type};base64,{payload}"

    backend = create_backend(config)
    print("🔍 Reading receipt...", file=sys.stderr)
    extraction = await extract_receipt(image, backend)

    if args.json:
        print(json.dumps(extraction, ensure_ascii=False, indent=2))
    else:
        print(f"\n🧾 {extraction.get('storeName') or 'UNKNOWN STORE'}"
              f"  {extraction.get('date') or ''}")
        items = extraction.get("items")
        for item in items if isinstance(items, list) else []:
            name = str(item.get("name", "")) if isinstance(item, dict) else str(item)
            price = str(item.get("price", "")) if isinstance(item, dict) else ""
            print(f"  {name:<28} {price:>8}")

    if args.save:
        from .db import ExpenseDB, records_from_extraction

        key = _scan_day_key(args.date, extraction.get("date"))
        db = ExpenseDB(config.storage.db_path)
        try:
            records = db.get(key) + records_from_extraction(extraction)
            db.put(key, records)
        finally:
            db.close()
        print(f"Saved {len(records)} expenses under {key}", file=sys.stderr)


def _scan_day_key(explicit: str | None, receipt_date) -> str:
    """Pick the storage day: --date, else the receipt's own date, else today."""
    if explicit:
        return _day_key(explicit)
    if receipt_date:
        try:
            return _day_key(str(receipt_date))
        except ValueError:
            logger.warning("Unreadable receipt date %r, storing under today", receipt_date)
    today = date.today()
    return cal.expense_key(today.year, today.month, today.day)


def _cmd_expenses(config, args) -> None:
    from .db import ExpenseDB

    day = date.fromisoformat(args.date)
    db = ExpenseDB(config.storage.db_path)
    try:
        records = db.get(cal.expense_key(day.year, day.month, day.day))
        month_total = db.month_total(day.year, day.month)
    finally:
        db.close()

    if not records:
        print(f"No expenses recorded for {args.date}.")
        return
    for rec in records:
        store = f"  [{rec.store}]" if rec.store else ""
        print(f"  {rec.name:<28} ${rec.price:>8.2f}{store}")
    print(f"  {'TOTAL':<28} ${sum(r.price for r in records):>8.2f}")
    print(f"  {'MONTH TO DATE':<28} ${month_total:>8.2f}")


def _cmd_add(config, args) -> None:
    from .db import ExpenseDB, ExpenseRecord

    key = _day_key(args.date)
    db = ExpenseDB(config.storage.db_path)
    try:
        db.put(key, db.get(key) + [ExpenseRecord(name=args.name, price=args.price)])
    finally:
        db.close()
    print(f"Added {args.name} (${args.price:.2f}) to {args.date}")


def _cmd_receipt(config, args) -> None:
    from .pdf import generate_receipt_pdf

    pdf_path = Path(args.pdf or f"receipt_{args.year}_{args.month:02d}.pdf")

    store = None
    if args.expenses:
        from .db import ExpenseDB

        store = ExpenseDB(config.storage.db_path)

    print("📄 Printing receipt to PDF...")
    try:
        generate_receipt_pdf(args.year, args.month, pdf_path, store=store,
                             today=datetime.now())
        print(f"   PDF saved: {pdf_path}")
    except ImportError as e:
        print(f"PDF error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        if store is not None:
            store.close()


if __name__ == "__main__":
    main()
