import asyncio
import json

import pytest

from catalog.database import CatalogStore
from catalog.errors import CorruptState, IOFailure
from catalog.persistence import JsonFileStorage
from catalog.seed import SEED_PRODUCTS


def make_products():
    return [
        {"id": "k3Yq8Zp1", "name": "Mouse", "category": "general", "description": "",
         "price": 999, "stock": 0, "rating": 0, "image": None},
        {"id": "Ab-9_x2Q", "name": "Наушники", "category": "Аудио", "description": "Wireless",
         "price": 12990.5, "stock": 25, "rating": 4.7, "image": "/images/product-3.jpg"},
    ]


def test_save_then_load_round_trip(tmp_path):
    storage = JsonFileStorage(tmp_path / "products.json")
    products = make_products()
    storage.save(products)
    loaded = storage.load()
    assert loaded == products
    assert [list(p) for p in loaded] == [list(p) for p in products]
    assert isinstance(loaded[0]["price"], int)
    assert isinstance(loaded[1]["price"], float)


def test_missing_file_loads_as_none(tmp_path):
    assert JsonFileStorage(tmp_path / "nope.json").load() is None


def test_save_creates_directory_and_leaves_no_temp_files(tmp_path):
    path = tmp_path / "nested" / "dir" / "products.json"
    JsonFileStorage(path).save(make_products())
    assert path.exists()
    assert [p.name for p in path.parent.iterdir()] == ["products.json"]
    assert json.loads(path.read_text(encoding="utf-8"))[1]["name"] == "Наушники"


def test_failed_save_raises_io_failure(tmp_path):
    target = tmp_path / "products.json"
    target.mkdir()
    with pytest.raises(IOFailure):
        JsonFileStorage(target).save(make_products())
    assert [p.name for p in tmp_path.iterdir()] == ["products.json"]


@pytest.mark.parametrize("content", [
    "{not json",
    '{"products": []}',
    '["just a string"]',
    '[{"name": "Mouse", "price": 999}]',
    '[{"id": "a", "name": "Mouse", "price": -1}]',
    '[{"id": "a", "name": "Mouse", "price": 1}, {"id": "a", "name": "Keyboard", "price": 2}]',
])
def test_corrupt_files_are_rejected(tmp_path, content):
    path = tmp_path / "products.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CorruptState):
        JsonFileStorage(path).load()


def test_store_seed_is_written_on_first_mutation(tmp_path):
    path = tmp_path / "products.json"
    store = CatalogStore(JsonFileStorage(path), seed=SEED_PRODUCTS)
    store.load()
    assert not path.exists()

    asyncio.run(store.create({"name": "Mouse", "price": 999}))
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert len(saved) == len(SEED_PRODUCTS) + 1
    assert saved[-1]["name"] == "Mouse"


def test_store_reloads_saved_state(tmp_path):
    path = tmp_path / "products.json"
    first = CatalogStore(JsonFileStorage(path))
    first.load()
    created = asyncio.run(first.create({"name": "Mouse", "price": 999}))
    asyncio.run(first.patch(created["id"], {"stock": 5}))

    second = CatalogStore(JsonFileStorage(path), seed=SEED_PRODUCTS)
    second.load()
    assert second.snapshot() == first.snapshot()
    assert second.get(created["id"])["stock"] == 5


def test_store_propagates_corrupt_state(tmp_path):
    path = tmp_path / "products.json"
    path.write_text("[", encoding="utf-8")
    store = CatalogStore(JsonFileStorage(path), seed=SEED_PRODUCTS)
    with pytest.raises(CorruptState):
        store.load()
    assert len(store) == 0


def test_loaded_entries_are_normalized_and_sortable(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(json.dumps([
        {"id": "a", "name": " Mouse ", "price": "999"},
        {"id": "b", "name": "Desk", "price": 50},
    ]), encoding="utf-8")

    loaded = JsonFileStorage(path).load()
    assert loaded[0] == {"id": "a", "name": "Mouse", "price": 999}
    assert isinstance(loaded[0]["price"], int)

    store = CatalogStore(JsonFileStorage(path))
    store.load()
    assert store.get("a")["price"] == 999
    assert store.get("a")["category"] == "general"
    assert [p["id"] for p in store.list({"sort": "price_asc"}).items] == ["b", "a"]
    assert [p["id"] for p in store.list({"maxPrice": "100"}).items] == ["b"]
