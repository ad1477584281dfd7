"""The ledger store: canonical entries plus the views derived from them."""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Protocol, Tuple

from .aggregation import balance, monthly_summary
from .filters import CriteriaLike, coerce_criteria, select
from .models import DEFAULT_CATEGORY, DEFAULT_NAME, EntryId, LedgerEntry, LedgerView
from .normalizer import coerce_amount, coerce_date, coerce_type, generate_id, normalize

logger = logging.getLogger(__name__)


def _same_id(stored: EntryId, wanted: EntryId) -> bool:
    # Legacy snapshots may hold "123" where a user or URL supplies 123.
    return stored == wanted or str(stored) == str(wanted)


class BlobStorage(Protocol):
    def read_blob(self) -> Optional[str]:
        ...

    def write_blob(self, text: str) -> None:
        ...


class LedgerStore:
    """Owns the ordered ledger entries and mediates every write to storage."""

    def __init__(self, storage: BlobStorage, *, autoload: bool = True) -> None:
        self._storage = storage
        self._entries: List[LedgerEntry] = []
        if autoload:
            self.load()  # Hydrate in-memory entries from persistence on construction.

    # Public API -----------------------------------------------------------
    @property
    def entries(self) -> Tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self.entries)

    def load(self) -> None:
        """Load entries from persistence; a corrupted snapshot becomes an empty ledger."""
        raw = self._storage.read_blob()
        if not raw:
            self._entries = []
            return
        try:
            payload: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Could not parse stored transactions, resetting: %s", exc)
            self._entries = []
            return
        if not isinstance(payload, list):
            logger.warning(
                "Stored transactions are a %s, not a list; resetting", type(payload).__name__
            )
            self._entries = []
            return
        self._entries = normalize(payload)

    def save(self) -> None:
        """Overwrite the persisted snapshot with the full entry sequence."""
        # Full rewrite on every mutation; ledgers are personal-scale.
        self._storage.write_blob(json.dumps([entry.to_dict() for entry in self._entries], indent=2))

    def add(
        self,
        name: str,
        amount: object,
        type: str,
        date: Optional[object] = None,
        category: Optional[str] = None,
    ) -> LedgerEntry:
        entry = LedgerEntry(
            id=generate_id({existing.id for existing in self._entries}),
            name=(name or "").strip() or DEFAULT_NAME,
            amount=coerce_amount(amount),
            type=coerce_type(type),
            date=coerce_date(date),
            category=(category or "").strip() or DEFAULT_CATEGORY,
        )
        self._entries.append(entry)
        self.save()
        logger.debug("Added %s entry %s (%s)", entry.type, entry.id, entry.name)
        return entry

    def delete(self, entry_id: EntryId) -> bool:
        """Remove the entry with ``entry_id``; returns whether anything was removed."""
        remaining = [entry for entry in self._entries if not _same_id(entry.id, entry_id)]
        removed = len(remaining) != len(self._entries)
        self._entries = remaining
        self.save()
        if removed:
            logger.debug("Deleted entry %s", entry_id)
        return removed

    def get(self, entry_id: EntryId) -> Optional[LedgerEntry]:
        for entry in self._entries:
            if _same_id(entry.id, entry_id):
                return entry
        return None

    def categories(self) -> List[str]:
        """Unique categories across every stored entry, for category selectors."""
        return sorted(
            {entry.category or DEFAULT_CATEGORY for entry in self._entries},
            key=lambda name: (name.casefold(), name),
        )

    def select(self, criteria: CriteriaLike = None) -> List[LedgerEntry]:
        return select(self._entries, criteria)

    def view(self, criteria: CriteriaLike = None) -> LedgerView:
        """Filtered entries along with their balance and monthly totals."""
        criteria = coerce_criteria(criteria)
        selected = select(self._entries, criteria)
        return LedgerView(
            criteria=criteria,
            entries=tuple(selected),
            balance=balance(selected),
            monthly=monthly_summary(selected),
            categories=self.categories(),
        )
