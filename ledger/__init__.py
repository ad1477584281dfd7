"""Core ledger package for the expense tracker."""

from .aggregation import balance, monthly_summary
from .exceptions import PersistenceError, ValidationError
from .export import encode, export_filename
from .filters import select
from .models import EXPENSE, INCOME, FilterCriteria, LedgerEntry, LedgerView, MonthlySummary
from .normalizer import normalize
from .services import LedgerStore
from .storage import STORAGE_KEY, JSONStorage, MemoryStorage

__all__ = [
    "EXPENSE",
    "INCOME",
    "FilterCriteria",
    "LedgerEntry",
    "LedgerView",
    "MonthlySummary",
    "LedgerStore",
    "JSONStorage",
    "MemoryStorage",
    "STORAGE_KEY",
    "PersistenceError",
    "ValidationError",
    "balance",
    "encode",
    "export_filename",
    "monthly_summary",
    "normalize",
    "select",
]
