import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from ledger.exceptions import PersistenceError
from ledger.models import EXPENSE, INCOME
from ledger.services import LedgerStore
from ledger.storage import STORAGE_KEY, JSONStorage, MemoryStorage


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def store(storage):
    return LedgerStore(storage)


def test_missing_snapshot_loads_empty(store):
    assert store.entries == ()


@pytest.mark.parametrize("blob", ["{not json", '{"id": 1}', '"text"', "42", "null"])
def test_corrupted_snapshot_resets_to_empty(blob, caplog):
    with caplog.at_level(logging.WARNING, logger="ledger.services"):
        store = LedgerStore(MemoryStorage(blob))
    assert store.entries == ()
    assert "resetting" in caplog.text


def test_legacy_records_are_normalized_on_load():
    blob = json.dumps([{"id": 5, "name": "Old", "amount": 12}, {"name": "X"}])
    store = LedgerStore(MemoryStorage(blob))

    first, second = store.entries
    assert (first.id, first.amount, first.type, first.category) == (5, Decimal("12"), INCOME, "Uncategorized")
    assert second.name == "X"
    assert second.date == date.today()


def test_add_appends_and_persists(store, storage):
    entry = store.add("  Lunch ", "-12.50", "expense", "2024-04-02", "  ")

    assert entry.name == "Lunch"
    assert entry.amount == Decimal("12.50")
    assert entry.type == EXPENSE
    assert entry.date == date(2024, 4, 2)
    assert entry.category == "Uncategorized"
    assert store.entries == (entry,)

    persisted = json.loads(storage.blob)
    assert persisted == [entry.to_dict()]
    assert storage.writes == 1


def test_add_keeps_insertion_order(store):
    first = store.add("A", 1, "income", "2024-05-01", "X")
    second = store.add("B", 2, "income", "2024-01-01", "Y")
    assert store.entries == (first, second)
    assert first.id != second.id


def test_add_redraws_colliding_ids(store, monkeypatch):
    draws = iter([7, 7, 8])
    monkeypatch.setattr("ledger.normalizer.time.time", lambda: 0.0)
    monkeypatch.setattr("ledger.normalizer.random.randrange", lambda _stop: next(draws))

    first = store.add("A", 1, "income")
    second = store.add("B", 1, "income")

    assert (first.id, second.id) == (7, 8)


def test_delete_removes_and_persists(store, storage):
    kept = store.add("Keep", 1, "income", "2024-01-01", "A")
    dropped = store.add("Drop", 2, "expense", "2024-01-02", "B")

    assert store.delete(dropped.id) is True
    assert store.entries == (kept,)
    assert [row["id"] for row in json.loads(storage.blob)] == [kept.id]


def test_delete_unknown_id_is_noop(store):
    entry = store.add("Keep", 1, "income", "2024-01-01", "A")
    assert store.delete(-1) is False
    assert store.entries == (entry,)


def test_save_then_load_round_trips(storage):
    store = LedgerStore(storage)
    store.add("Salary", "2500", "income", "2024-01-31", "Salary")
    store.add('Coffee "Break"', "4.5", "expense", "2024-02-01", "Food")
    before = store.entries

    resaved = MemoryStorage(storage.blob)
    reloaded = LedgerStore(resaved)
    reloaded.save()
    again = LedgerStore(MemoryStorage(resaved.blob))

    assert reloaded.entries == before
    assert again.entries == before


def test_categories_are_unique_and_sorted(store):
    for category in ["food", "Salary", "Food", "salary", "Bills", "Food"]:
        store.add("x", 1, "expense", "2024-01-01", category)
    assert store.categories() == ["Bills", "Food", "food", "Salary", "salary"]


def test_view_bundles_derived_values(store):
    store.add("Pay", 100, "income", "2024-01-05", "Salary")
    store.add("Food", 30, "expense", "2024-01-10", "Food")
    store.add("Bonus", 50, "income", "2024-02-01", "Salary")

    view = store.view({"category": "Salary"})

    assert [entry.name for entry in view.entries] == ["Pay", "Bonus"]
    assert view.balance == Decimal("150")
    assert [row.month for row in view.monthly] == ["2024-02", "2024-01"]
    assert view.categories == ["Food", "Salary"]
    assert view.to_dict()["balance"] == "150.00"


def test_entries_are_read_only(store):
    store.add("A", 1, "income")
    with pytest.raises(AttributeError):
        store.entries.append("nope")
    with pytest.raises(AttributeError):
        store.entries[0].name = "changed"


def test_json_storage_round_trip(tmp_path):
    storage = JSONStorage(tmp_path / "data")
    store = LedgerStore(storage)
    entry = store.add("Pay", 10, "income", "2024-01-01", "Salary")

    assert storage.path == tmp_path / "data" / f"{STORAGE_KEY}.json"
    assert not (storage.path.parent / (storage.path.name + ".tmp")).exists()
    assert LedgerStore(JSONStorage(tmp_path / "data")).entries == (entry,)


def test_json_storage_missing_file_reads_none(tmp_path):
    assert JSONStorage(tmp_path).read_blob() is None


def test_json_storage_write_failure_raises(tmp_path):
    storage = JSONStorage(tmp_path)
    storage.path.mkdir()
    with pytest.raises(PersistenceError):
        storage.write_blob("[]")


def test_legacy_string_ids_are_found_by_number():
    blob = json.dumps([{"id": "123", "name": "legacy", "amount": 1, "date": "2024-01-01"}])
    store = LedgerStore(MemoryStorage(blob))

    assert store.get(123).name == "legacy"
    assert store.delete(123) is True
    assert store.entries == ()


def test_json_storage_undecodable_snapshot_is_logged(tmp_path, caplog):
    storage = JSONStorage(tmp_path)
    storage.path.write_bytes(b"\xff\xfe\x00garbage")

    with caplog.at_level(logging.WARNING, logger="ledger.storage"):
        store = LedgerStore(storage)

    assert store.entries == ()
    assert "not UTF-8" in caplog.text
