"""Data models for the ledger domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_NAME",
    "EXPENSE",
    "INCOME",
    "TRANSACTION_TYPES",
    "ALL_CATEGORIES",
    "FilterCriteria",
    "LedgerEntry",
    "LedgerView",
    "MonthlySummary",
    "month_key",
    "parse_iso_date",
]

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_NAME = "Unnamed"
ALL_CATEGORIES = "all"

EntryId = Union[int, str]


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string (or the date part of a longer ISO stamp) as a calendar date."""
    value = value.strip()
    if len(value) > 10 and value[10] in "T ":
        value = value[:10]
    if len(value) != 10:
        raise ValueError(f"Invalid date '{value}'. Expected format YYYY-MM-DD.")
    # fromisoformat accepts YYYYMMDD forms on newer interpreters; only the dashed form is stored.
    if value[4] != "-" or value[7] != "-":
        raise ValueError(f"Invalid date '{value}'. Expected format YYYY-MM-DD.")
    return date.fromisoformat(value)


def month_key(value: Optional[date]) -> str:
    """Return the ``YYYY-MM`` bucket for a calendar date, today's month when missing."""
    if value is None:
        value = date.today()
    return value.strftime("%Y-%m")


@dataclass(frozen=True)
class LedgerEntry:
    id: EntryId
    name: str
    amount: Decimal
    type: str
    date: date
    category: str = DEFAULT_CATEGORY

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    @property
    def signed_amount(self) -> Decimal:
        """Effect of the entry on the balance."""
        return self.amount if self.is_income else -self.amount

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the entry to JSON-friendly natives."""
        return {
            "id": self.id,
            "name": self.name,
            "amount": str(self.amount),
            "type": self.type,
            "date": self.date.isoformat(),
            "category": self.category,
        }


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "income": f"{self.income:.2f}",
            "expense": f"{self.expense:.2f}",
            "net": f"{self.net:.2f}",
        }


@dataclass(frozen=True)
class FilterCriteria:
    start: Optional[date] = None
    end: Optional[date] = None
    category: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None and not _selects_category(self.category)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "category": self.category or ALL_CATEGORIES,
        }


def _selects_category(category: Optional[str]) -> bool:
    return bool(category) and category != ALL_CATEGORIES


@dataclass(frozen=True)
class LedgerView:
    """A filtered selection together with everything derived from it."""

    criteria: FilterCriteria
    entries: Tuple[LedgerEntry, ...]
    balance: Decimal
    monthly: List[MonthlySummary] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filters": self.criteria.to_dict(),
            "items": [entry.to_dict() for entry in self.entries],
            "balance": f"{self.balance:.2f}",
            "monthly": [summary.to_dict() for summary in self.monthly],
            "categories": list(self.categories),
        }
