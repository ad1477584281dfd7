"""Balance and monthly totals over an already-filtered entry set."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from .models import LedgerEntry, MonthlySummary, month_key

__all__ = ["balance", "monthly_summary", "totals"]

ZERO = Decimal("0")


def totals(entries: Iterable[LedgerEntry]) -> Tuple[Decimal, Decimal]:
    """Return ``(income, expense)`` sums."""
    income = expense = ZERO
    for entry in entries:
        if entry.is_income:
            income += entry.amount
        else:
            expense += entry.amount
    return income, expense


def balance(entries: Iterable[LedgerEntry]) -> Decimal:
    """Compute income minus expense."""
    income, expense = totals(entries)
    return income - expense


def monthly_summary(entries: Iterable[LedgerEntry]) -> List[MonthlySummary]:
    """Group entries by ``YYYY-MM`` and total each month, most recent first.

    An entry without a usable date is counted in the current month so the
    monthly nets always add up to the overall balance.
    """
    buckets: Dict[str, List[LedgerEntry]] = {}
    for entry in entries:
        month = month_key(getattr(entry, "date", None))
        buckets.setdefault(month, []).append(entry)

    summaries = []
    for month, grouped in buckets.items():
        income, expense = totals(grouped)
        summaries.append(MonthlySummary(month=month, income=income, expense=expense))
    return sorted(summaries, key=lambda summary: summary.month, reverse=True)
