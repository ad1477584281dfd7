"""Validation helpers shared by the presentation layers before they add entries."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from .exceptions import ValidationError
from .models import EntryId, TRANSACTION_TYPES, parse_iso_date

NAME_MAX_LENGTH = 100
CATEGORY_MAX_LENGTH = 50


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a positive, finite Decimal."""
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a numeric value")
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return amount


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_date(value: object, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a valid date in YYYY-MM-DD format") from exc


def validate_type(value: object, field: str = "type") -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    canonical = value.strip().lower()
    if canonical not in TRANSACTION_TYPES:
        raise ValidationError(f"{field} must be one of: {', '.join(TRANSACTION_TYPES)}")
    return canonical


def validate_entry_input(
    name: object,
    amount: object,
    type: object,
    date: object,
    category: object,
) -> Dict[str, object]:
    """Check a new entry field by field, reporting every failure at once.

    Returns the cleaned values ready for ``LedgerStore.add``.
    """
    checks = (
        ("name", lambda: validate_required_str(name, "name", NAME_MAX_LENGTH)),
        ("amount", lambda: parse_amount(amount)),
        ("type", lambda: validate_type(type)),
        ("date", lambda: validate_date(date)),
        ("category", lambda: validate_required_str(category, "category", CATEGORY_MAX_LENGTH)),
    )
    cleaned: Dict[str, object] = {}
    errors: List[str] = []
    for field, check in checks:
        try:
            cleaned[field] = check()
        except ValidationError as exc:
            errors.append(str(exc))
    if errors:
        raise ValidationError("; ".join(errors))
    return cleaned


def parse_entry_id(raw: object) -> Optional[EntryId]:
    """Map an id typed by a user or taken from a URL to its stored form."""
    if raw is None:
        return None
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    if text.lstrip("-").isdecimal():
        return int(text)
    return text
