"""CSV export of ledger entries."""

from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Union

from .models import LedgerEntry

__all__ = ["CSV_HEADERS", "encode", "export_filename", "format_amount", "format_signed"]

CSV_HEADERS = ["id", "name", "amount", "type", "date", "category"]


def format_amount(value: Union[Decimal, int, float, str]) -> str:
    """Render a number with exactly two decimals."""
    return f"{Decimal(str(value)):.2f}"


def format_signed(entry: LedgerEntry) -> str:
    sign = "+" if entry.is_income else "-"
    return sign + format_amount(entry.amount)


def encode(entries: Iterable[LedgerEntry]) -> str:
    """Serialise entries to CSV text, one row per entry in input order.

    Every field is quoted and embedded quotes are doubled. Rows are joined
    with ``\\n`` and the text carries no trailing newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, doublequote=True, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for entry in entries:
        writer.writerow([
            entry.id,
            entry.name,
            format_amount(entry.amount),
            entry.type,
            entry.date.isoformat(),
            entry.category,
        ])
    content = buffer.getvalue()
    return content[:-1] if content.endswith("\n") else content


def export_filename(today: Optional[date] = None) -> str:
    """Download name for an export made on ``today``."""
    today = today or date.today()
    return f"transactions_{today.isoformat()}.csv"
