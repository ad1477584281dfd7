"""Date range and category selection over ledger entries."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Union

from .exceptions import ValidationError
from .models import ALL_CATEGORIES, FilterCriteria, LedgerEntry, parse_iso_date

__all__ = ["build_criteria", "coerce_criteria", "select"]

CriteriaLike = Union[FilterCriteria, Mapping[str, Any], None]


def _criteria_date(value: Any, field: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_iso_date(value)
        except ValueError as exc:
            raise ValidationError(f"{field} must be a date in YYYY-MM-DD format") from exc
    raise ValidationError(f"{field} must be a date or YYYY-MM-DD string")


def build_criteria(
    start: Any = None, end: Any = None, category: Optional[str] = None
) -> FilterCriteria:
    """Normalise raw filter values (form fields, query args) into criteria."""
    # Blank selectors mean "no category"; anything else is matched verbatim.
    if not isinstance(category, str) or not category.strip():
        category = None
    return FilterCriteria(
        start=_criteria_date(start, "start"),
        end=_criteria_date(end, "end"),
        category=category,
    )


def coerce_criteria(criteria: CriteriaLike) -> FilterCriteria:
    if criteria is None:
        return FilterCriteria()
    if isinstance(criteria, FilterCriteria):
        return criteria
    return build_criteria(
        start=criteria.get("start") or criteria.get("startDate"),
        end=criteria.get("end") or criteria.get("endDate"),
        category=criteria.get("category"),
    )


def select(entries: Iterable[LedgerEntry], criteria: CriteriaLike = None) -> List[LedgerEntry]:
    """Return the entries matching every given criterion, in their original order.

    Both bounds are inclusive calendar days: an entry dated exactly ``start``
    or exactly ``end`` is kept. A category of ``"all"`` (or none) keeps every
    entry; any other value must match the entry category exactly.
    """
    criteria = coerce_criteria(criteria)
    start, end = criteria.start, criteria.end
    category = criteria.category if criteria.category != ALL_CATEGORIES else None

    def matches(entry: LedgerEntry) -> bool:
        if start and entry.date < start:
            return False
        if end and entry.date > end:
            return False
        if category and entry.category != category:
            return False
        return True

    return list(filter(matches, entries))
