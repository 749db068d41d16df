import threading

import pytest

from storefront.services import JsonStore, StoreError


def test_missing_collection_reads_empty(store):
    assert store.read_all("orders") == []


def test_blank_file_reads_empty(store):
    store.path_for("orders").write_text("  \n", encoding="utf-8")
    assert store.read_all("orders") == []


def test_write_then_read_round_trip(store):
    entities = [
        {"id": 1, "name": "Молоко", "price": 89.9, "tags": ["dairy"]},
        {"id": "slug-2", "nested": {"a": [1, 2, None]}},
    ]
    store.write_all("products", entities)
    assert store.read_all("products") == entities


def test_write_leaves_no_temp_files(store, tmp_path):
    store.write_all("products", [{"id": 1}])
    assert sorted(p.name for p in tmp_path.iterdir()) == ["products.json"]


def test_corrupt_file_raises(store):
    store.path_for("products").write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        store.read_all("products")


def test_non_array_payload_raises(store):
    store.path_for("products").write_text('{"id": 1}', encoding="utf-8")
    with pytest.raises(StoreError):
        store.read_all("products")


def test_invalid_collection_name(store):
    with pytest.raises(ValueError):
        store.read_all("../etc/passwd")


def test_update_writes_back_on_success(store):
    with store.update("orders") as orders:
        orders.append({"id": "ORDER-1"})
    assert store.read_all("orders") == [{"id": "ORDER-1"}]


def test_update_discards_changes_on_error(store):
    store.write_all("orders", [{"id": "ORDER-1"}])
    with pytest.raises(RuntimeError):
        with store.update("orders") as orders:
            orders.append({"id": "ORDER-2"})
            raise RuntimeError("boom")
    assert store.read_all("orders") == [{"id": "ORDER-1"}]


def test_concurrent_updates_do_not_lose_writes(tmp_path):
    store = JsonStore(tmp_path)
    workers = 8
    per_worker = 25

    def append_many(worker):
        for i in range(per_worker):
            with store.update("orders") as orders:
                orders.append({"id": f"{worker}-{i}"})

    threads = [threading.Thread(target=append_many, args=(w,)) for w in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.read_all("orders")) == workers * per_worker
