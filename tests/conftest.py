from datetime import date
from decimal import Decimal

import pytest

from ledger.models import EXPENSE, INCOME, LedgerEntry


@pytest.fixture()
def sample_entries():
    return [
        LedgerEntry(id=1, name="Paycheck", amount=Decimal("100"), type=INCOME,
                    date=date(2024, 1, 5), category="Salary"),
        LedgerEntry(id=2, name="Groceries", amount=Decimal("30"), type=EXPENSE,
                    date=date(2024, 1, 10), category="Food"),
        LedgerEntry(id=3, name="Bonus", amount=Decimal("50"), type=INCOME,
                    date=date(2024, 2, 1), category="Salary"),
    ]
