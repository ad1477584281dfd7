"""Console interface for the expense tracker."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, List, Optional

from ledger import config
from ledger.exceptions import PersistenceError, ValidationError
from ledger.export import encode, export_filename, format_amount, format_signed
from ledger.filters import build_criteria
from ledger.models import DEFAULT_CATEGORY, LedgerEntry, TRANSACTION_TYPES, parse_iso_date
from ledger.services import LedgerStore
from ledger.storage import JSONStorage
from ledger.validators import parse_entry_id, validate_entry_input


def _parse_date(value: str) -> str:
    try:
        parse_iso_date(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if not amount.is_finite() or amount == 0:
        raise argparse.ArgumentTypeError("Amount must be a non-zero number")
    return value


def _load_store(data_dir: Optional[Path]) -> LedgerStore:
    return LedgerStore(JSONStorage(config.data_dir(data_dir)))


def _format_entry(entry: LedgerEntry) -> str:
    return (
        f"[{entry.id}] {entry.date.isoformat()} {format_signed(entry):>12}  {entry.name}\n"
        f"  Category: {entry.category} | Type: {entry.type}\n"
    )


def _criteria(args: argparse.Namespace):
    return build_criteria(start=args.start, end=args.end, category=args.category)


def handle_add(args: argparse.Namespace, store: LedgerStore) -> None:
    # Amounts are stored as magnitudes; the sign comes from the type.
    amount = abs(Decimal(args.amount))
    cleaned = validate_entry_input(
        args.name,
        amount,
        args.type,
        args.date or date.today().isoformat(),
        args.category or DEFAULT_CATEGORY,
    )
    entry = store.add(**cleaned)
    print("Transaction added:\n" + _format_entry(entry))


def handle_delete(
    args: argparse.Namespace, store: LedgerStore, confirm: Optional[Callable[[str], str]] = None
) -> None:
    entry_id = parse_entry_id(args.id)
    if entry_id is None or store.get(entry_id) is None:
        print(f"No transaction with id {args.id}.")
        return
    if not args.yes:
        answer = (confirm or input)("Delete this transaction? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            print("Aborted.")
            return
    store.delete(entry_id)
    print(f"Transaction {args.id} deleted.")


def handle_list(args: argparse.Namespace, store: LedgerStore) -> None:
    view = store.view(_criteria(args))
    if not view.entries:
        print("No transactions found for applied filters.")
        return
    print(f"Found {len(view.entries)} transactions (balance {view.balance:.2f}):")
    for entry in view.entries:
        print(_format_entry(entry))


def handle_balance(args: argparse.Namespace, store: LedgerStore) -> None:
    view = store.view(_criteria(args))
    print(f"Net balance: {view.balance:.2f}")


def handle_summary(args: argparse.Namespace, store: LedgerStore) -> None:
    view = store.view(_criteria(args))
    if not view.monthly:
        print("No data for monthly summary.")
        return
    print(f"{'Month':<8} {'Income':>12} {'Expense':>12} {'Net':>12}")
    for summary in view.monthly:
        print(
            f"{summary.month:<8} {format_amount(summary.income):>12} "
            f"{format_amount(summary.expense):>12} {format_amount(summary.net):>12}"
        )


def handle_categories(args: argparse.Namespace, store: LedgerStore) -> None:
    categories = store.categories()
    if not categories:
        print("No categories yet.")
        return
    for name in categories:
        print(name)


def handle_export(args: argparse.Namespace, store: LedgerStore) -> None:
    entries = store.select(_criteria(args))
    output = args.output or Path(export_filename())
    try:
        output.write_text(encode(entries), encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Unable to write to {output}") from exc
    print(f"Exported {len(entries)} transactions to {output}")


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--start", type=_parse_date, help="Inclusive start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=_parse_date, help="Inclusive end date (YYYY-MM-DD)")
    parser.add_argument("--category", help="Exact category, or 'all'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default=None,
        type=Path,
        help="Directory to store JSON data (default: $EXPENSE_TRACKER_DATA_DIR or ./data)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Add a new transaction")
    add_parser.add_argument("name")
    add_parser.add_argument("amount", type=_parse_amount)
    add_parser.add_argument("type", choices=TRANSACTION_TYPES)
    add_parser.add_argument("--date", type=_parse_date, help="Defaults to today")
    add_parser.add_argument("--category")
    add_parser.set_defaults(handler=handle_add)

    delete_parser = subparsers.add_parser("delete", help="Delete a transaction")
    delete_parser.add_argument("id")
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt")
    delete_parser.set_defaults(handler=handle_delete)

    list_parser = subparsers.add_parser("list", help="List transactions")
    _add_filter_arguments(list_parser)
    list_parser.set_defaults(handler=handle_list)

    balance_parser = subparsers.add_parser("balance", help="Compute net balance")
    _add_filter_arguments(balance_parser)
    balance_parser.set_defaults(handler=handle_balance)

    summary_parser = subparsers.add_parser("summary", help="Show income/expense/net per month")
    _add_filter_arguments(summary_parser)
    summary_parser.set_defaults(handler=handle_summary)

    categories_parser = subparsers.add_parser("categories", help="List known categories")
    categories_parser.set_defaults(handler=handle_categories)

    export_parser = subparsers.add_parser("export", help="Export transactions as CSV")
    _add_filter_arguments(export_parser)
    export_parser.add_argument(
        "--output", type=Path, help="Target file (default: transactions_<today>.csv)"
    )
    export_parser.set_defaults(handler=handle_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config.configure_logging(args.verbose)

    try:
        store = _load_store(args.data_dir)
        args.handler(args, store)
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
