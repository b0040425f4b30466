import asyncio
import logging
import threading

import pytest

from catalog.database import CatalogStore
from catalog.errors import NotFound, ValidationFailed
from catalog.seed import SEED_PRODUCTS
from conftest import FlakyStorage


def run(coro):
    return asyncio.run(coro)


def test_scenario_create_reject_patch_delete():
    store = CatalogStore()
    product = run(store.create({"name": "Mouse", "price": 999}))
    assert product["id"]
    assert product["stock"] == 0
    assert product["rating"] == 0
    assert product["category"] == "general"

    with pytest.raises(ValidationFailed) as exc:
        run(store.create({"name": "A", "price": 999}))
    assert "name must be at least 2 characters" in exc.value.errors
    assert len(store) == 1

    patched = run(store.patch(product["id"], {"stock": 5}))
    assert patched["stock"] == 5
    assert patched["name"] == "Mouse"

    removed = run(store.delete(product["id"]))
    assert removed["id"] == product["id"]
    with pytest.raises(NotFound):
        store.get(product["id"])


def test_ids_are_unique_and_never_reused():
    store = CatalogStore()
    issued = set()
    for i in range(200):
        p = run(store.create({"name": f"Item {i}", "price": i + 1}))
        assert p["id"] not in issued
        issued.add(p["id"])
        if i % 3 == 0:
            run(store.delete(p["id"]))
    assert len(issued) == 200


def test_create_trims_strings_and_orders_fields():
    store = CatalogStore()
    p = run(store.create({"name": "  Desk Lamp ", "category": " Home ", "price": "19.5", "id": "forged"}))
    assert p["id"] != "forged"
    assert list(p) == ["id", "name", "category", "description", "price", "stock", "rating", "image"]
    assert p["name"] == "Desk Lamp"
    assert p["category"] == "Home"
    assert p["price"] == 19.5


def test_empty_patch_leaves_record_identical_and_skips_save():
    storage = FlakyStorage()
    store = CatalogStore(storage)
    p = run(store.create({"name": "Mouse", "price": 999, "stock": 0}))
    saves = len(storage.saves)
    assert run(store.patch(p["id"], {})) == p
    assert store.get(p["id"]) == p
    assert len(storage.saves) == saves


def test_patch_keeps_falsy_values():
    store = CatalogStore()
    p = run(store.create({"name": "Mouse", "price": 999, "stock": 7, "rating": 3}))
    patched = run(store.patch(p["id"], {"stock": 0, "rating": 0, "description": ""}))
    assert patched["stock"] == 0
    assert patched["rating"] == 0


def test_invalid_patch_changes_nothing():
    store = CatalogStore()
    p = run(store.create({"name": "Mouse", "price": 999}))
    with pytest.raises(ValidationFailed) as exc:
        run(store.patch(p["id"], {"name": "Trackball", "price": -1}))
    assert exc.value.errors == ["price must be greater than 0"]
    assert store.get(p["id"]) == p


def test_replace_overwrites_everything_but_id():
    store = CatalogStore()
    p = run(store.create({"name": "Mouse", "category": "Peripherals", "price": 999, "stock": 4, "rating": 4}))
    payload = {"name": "Trackball", "price": 1999}
    first = run(store.replace(p["id"], payload))
    second = run(store.replace(p["id"], payload))
    assert first == second == store.get(p["id"])
    assert first["id"] == p["id"]
    assert first["category"] == "general"
    assert first["stock"] == 0
    assert first["rating"] == 0


def test_replace_requires_name_and_price():
    store = CatalogStore()
    p = run(store.create({"name": "Mouse", "price": 999}))
    with pytest.raises(ValidationFailed) as exc:
        run(store.replace(p["id"], {"name": "Trackball"}))
    assert exc.value.errors == ["required field missing: price"]
    assert store.get(p["id"])["name"] == "Mouse"


def test_unknown_id_is_not_found_before_validation():
    store = CatalogStore()
    with pytest.raises(NotFound):
        run(store.replace("missing", {}))
    with pytest.raises(NotFound):
        run(store.patch("missing", {"price": -1}))
    with pytest.raises(NotFound):
        run(store.delete("missing"))


def test_reads_return_copies():
    store = CatalogStore()
    p = run(store.create({"name": "Mouse", "price": 999}))
    p["name"] = "changed"
    store.get(p["id"])["name"] = "changed"
    store.list().items[0]["name"] = "changed"
    assert store.get(p["id"])["name"] == "Mouse"


def test_list_delegates_to_query():
    store = CatalogStore()
    for name, price in (("Cheap", 10), ("Pricey", 500), ("Middle", 100)):
        run(store.create({"name": name, "price": price}))
    result = store.list({"sort": "price_desc", "limit": "2"})
    assert [p["name"] for p in result.items] == ["Pricey", "Middle"]
    assert (result.count, result.total) == (2, 3)
    # stored order is untouched by sorting
    assert [p["name"] for p in store.list().items] == ["Cheap", "Pricey", "Middle"]


def test_seed_gets_fresh_unique_ids():
    store = CatalogStore(seed=SEED_PRODUCTS)
    store.load()
    assert len(store) == len(SEED_PRODUCTS)
    assert len({p["id"] for p in store.snapshot()}) == len(SEED_PRODUCTS)
    assert "Peripherals" in store.categories()


def test_failed_save_keeps_change_and_logs_warning(caplog):
    storage = FlakyStorage(fail=True)
    store = CatalogStore(storage)
    with caplog.at_level(logging.WARNING, logger="catalog.database"):
        p = run(store.create({"name": "Mouse", "price": 999}))
    assert store.get(p["id"])["name"] == "Mouse"
    assert not store.durable
    assert "not persisted" in caplog.text

    storage.fail = False
    run(store.patch(p["id"], {"stock": 1}))
    assert store.durable
    assert storage.saves[-1][0]["stock"] == 1


def test_close_flushes_only_when_behind():
    storage = FlakyStorage(fail=True)
    store = CatalogStore(storage)
    run(store.create({"name": "Mouse", "price": 999}))
    storage.fail = False
    store.close()
    assert len(storage.saves) == 1
    store.close()
    assert len(storage.saves) == 1


def test_saves_run_off_the_event_loop_thread():
    storage = FlakyStorage()
    store = CatalogStore(storage)

    async def scenario():
        p = await store.create({"name": "Mouse", "price": 999})
        await store.patch(p["id"], {"stock": 2})
        await store.delete(p["id"])
        return threading.get_ident()

    loop_thread = run(scenario())
    assert len(storage.threads) == 3
    assert loop_thread not in storage.threads
    assert storage.saves[-1] == []


def test_close_saves_on_the_calling_thread():
    storage = FlakyStorage(fail=True)
    store = CatalogStore(storage)
    run(store.create({"name": "Mouse", "price": 999}))
    storage.fail = False
    store.close()
    assert storage.threads[-1] == threading.get_ident()
