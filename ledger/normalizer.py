"""Turn loosely-typed persisted records into well-formed ledger entries.

Older snapshots may be missing fields, carry wrong types, or not be a list
at all. Every field is defaulted independently so one bad value never costs
the rest of the record, and nothing here raises.
"""

from __future__ import annotations

import random
import time
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Container, List, Mapping, Optional, Set

from .models import (
    DEFAULT_CATEGORY,
    DEFAULT_NAME,
    EXPENSE,
    INCOME,
    EntryId,
    LedgerEntry,
    parse_iso_date,
)

__all__ = ["generate_id", "normalize", "normalize_record"]


def generate_id(taken: Container[EntryId] = ()) -> int:
    """Current time in milliseconds plus a random offset, skipping ids in ``taken``."""
    while True:
        candidate = int(time.time() * 1000) + random.randrange(1000)
        if candidate not in taken:
            return candidate


def coerce_amount(raw: Any) -> Decimal:
    """Non-negative magnitude of ``raw``; zero when it is not a finite number."""
    if raw is None or isinstance(raw, bool):
        return Decimal("0")
    if isinstance(raw, float):
        raw = repr(raw)
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return abs(amount)


def coerce_type(raw: Any) -> str:
    return EXPENSE if raw == EXPENSE else INCOME


def coerce_date(raw: Any) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return parse_iso_date(raw)
        except ValueError:
            pass
    return date.today()


def coerce_text(raw: Any, default: str) -> str:
    if raw is None:
        return default
    text = raw if isinstance(raw, str) else str(raw)
    return text if text.strip() else default


def coerce_id(raw: Any) -> Optional[EntryId]:
    """Stored id as an int or non-empty string, ``None`` when it has to be regenerated."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and raw.strip():
        return raw
    return None


def normalize_record(record: Mapping[str, Any], taken: Optional[Set[EntryId]] = None) -> LedgerEntry:
    """Build a ledger entry from one raw mapping, defaulting each field on its own."""
    if taken is None:
        taken = set()
    entry_id = coerce_id(record.get("id"))
    if entry_id is None:
        entry_id = generate_id(taken)
    taken.add(entry_id)
    return LedgerEntry(
        id=entry_id,
        name=coerce_text(record.get("name"), DEFAULT_NAME),
        amount=coerce_amount(record.get("amount")),
        type=coerce_type(record.get("type")),
        date=coerce_date(record.get("date")),
        category=coerce_text(record.get("category"), DEFAULT_CATEGORY),
    )


def normalize(raw_records: Any) -> List[LedgerEntry]:
    """Normalise a persisted payload; anything that is not a list yields an empty ledger."""
    if not isinstance(raw_records, (list, tuple)):
        return []
    # Stored ids are reserved first so generated ones never shadow them.
    taken: Set[EntryId] = {
        entry_id
        for entry_id in (
            coerce_id(record.get("id")) for record in raw_records if isinstance(record, Mapping)
        )
        if entry_id is not None
    }
    entries: List[LedgerEntry] = []
    seen: Set[EntryId] = set()
    for record in raw_records:
        if not isinstance(record, Mapping):
            continue
        entry = normalize_record(record, taken)
        if entry.id in seen:
            # A duplicated stored id would make delete-by-id ambiguous.
            entry = replace(entry, id=generate_id(taken))
            taken.add(entry.id)
        seen.add(entry.id)
        entries.append(entry)
    return entries
