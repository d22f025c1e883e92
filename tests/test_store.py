import json

from shopledger.ledger import Ledger
from shopledger.store import JsonFileStore, MemoryStore


def test_memory_store_returns_default_for_missing_key():
    store = MemoryStore()

    assert store.get("sales", []) == []
    assert store.get("sales") is None


def test_memory_store_copies_values():
    store = MemoryStore()
    value = [{"id": "1"}]
    store.set("products", value)

    value.append({"id": "2"})
    fetched = store.get("products")
    fetched.append({"id": "3"})

    assert store.get("products") == [{"id": "1"}]


def test_json_file_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "store.json"
    store = JsonFileStore(path)

    assert store.get("products", []) == []

    store.set("products", [{"id": "1"}])
    store.set("sales", [])

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "products": [{"id": "1"}],
        "sales": [],
    }
    assert JsonFileStore(path).get("products") == [{"id": "1"}]


def test_ledger_on_json_file_store(tmp_path, clock):
    store = JsonFileStore(tmp_path / "store.json")
    ledger = Ledger(store, clock=clock)
    product = ledger.add_product("Soda", 2, 5, 10)
    ledger.record_sale(product.id, 3)

    reloaded = Ledger(JsonFileStore(tmp_path / "store.json"), clock=clock)

    assert reloaded.get_product(product.id).quantity == 7
    assert reloaded.sales[0].profit == 9.0
    assert reloaded.sales[0].date.isoformat() == "2026-10-19"
