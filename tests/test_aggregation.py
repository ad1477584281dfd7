from datetime import date
from decimal import Decimal

from ledger.aggregation import balance, monthly_summary, totals
from ledger.models import EXPENSE, INCOME, LedgerEntry


def test_balance_of_scenario(sample_entries):
    assert balance(sample_entries) == Decimal("120")
    assert f"{balance(sample_entries):.2f}" == "120.00"


def test_balance_of_empty_set_is_zero():
    assert balance([]) == Decimal("0")


def test_balance_is_additive(sample_entries):
    first, rest = sample_entries[:1], sample_entries[1:]
    assert balance(first) + balance(rest) == balance(sample_entries)


def test_totals_split_by_type(sample_entries):
    assert totals(sample_entries) == (Decimal("150"), Decimal("30"))


def test_monthly_summary_latest_first(sample_entries):
    summary = monthly_summary(sample_entries)

    assert [row.month for row in summary] == ["2024-02", "2024-01"]
    assert (summary[0].income, summary[0].expense, summary[0].net) == (50, 0, 50)
    assert (summary[1].income, summary[1].expense, summary[1].net) == (100, 30, 70)


def test_monthly_nets_reconcile_with_balance(sample_entries):
    extra = LedgerEntry(id=4, name="Trip", amount=Decimal("412.37"), type=EXPENSE,
                        date=date(2023, 12, 24), category="Travel")
    entries = sample_entries + [extra]

    summary = monthly_summary(entries)

    assert sum(row.net for row in summary) == balance(entries)
    assert summary[-1].month == "2023-12"


def test_entry_without_date_counts_in_current_month():
    undated = LedgerEntry(id=9, name="Loose", amount=Decimal("5"), type=INCOME,
                          date=None, category="Misc")
    [row] = monthly_summary([undated])
    assert row.month == date.today().strftime("%Y-%m")
    assert row.income == Decimal("5")


def test_summary_to_dict_formats_two_decimals(sample_entries):
    row = monthly_summary(sample_entries)[1]
    assert row.to_dict() == {"month": "2024-01", "income": "100.00", "expense": "30.00", "net": "70.00"}
