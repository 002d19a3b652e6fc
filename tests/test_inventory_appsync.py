from datetime import datetime, timedelta, timezone

import pytest

from serp.inventory.appsync import AppSyncHandler
from serp.inventory.models import AppSyncEvent, Item

FIXED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
FIXED_TEXT = "2024-01-02T03:04:05Z"


class FakeStore:
    def __init__(self):
        self.items = {}
        self.calls = []

    def get_item(self, item_id):
        self.calls.append(("get", item_id))
        return self.items.get(item_id)

    def list_items(self):
        self.calls.append(("list",))
        return list(self.items.values())

    def create_item(self, item):
        self.calls.append(("create", item))
        self.items[item.id] = item
        return item

    def update_item(self, item):
        self.calls.append(("update", item))
        self.items[item.id] = item
        return item

    def delete_item(self, item_id):
        self.calls.append(("delete", item_id))
        return self.items.pop(item_id, None)


def make_handler(store, clock_value=FIXED):
    ids = iter(["item-1", "item-2"])
    return AppSyncHandler(store, clock=lambda: clock_value, id_factory=lambda: next(ids))


def test_create_item_fills_id_and_timestamps():
    store = FakeStore()
    handler = make_handler(store)
    event = AppSyncEvent(
        field_name="createItem",
        arguments={"name": "Bolt", "description": "Steel", "quantity": 5.0},
    )
    item = handler.handle_request(event)
    assert item.id == "item-1"
    assert item.name == "Bolt"
    assert item.description == "Steel"
    assert item.quantity == 5
    assert item.created_at == FIXED_TEXT
    assert item.updated_at == item.created_at
    assert store.items["item-1"] is item


def test_create_item_truncates_fractional_quantity():
    store = FakeStore()
    item = make_handler(store).handle_request(
        {"fieldName": "createItem",
         "arguments": {"name": "a", "description": "b", "quantity": 5.9}}
    )
    assert item.quantity == 5


def test_timestamps_drop_fraction_and_convert_to_utc():
    store = FakeStore()
    local = (FIXED + timedelta(microseconds=123456)).astimezone(
        timezone(timedelta(hours=2))
    )
    item = make_handler(store, local).handle_request(
        AppSyncEvent("createItem", {"name": "a", "description": "b", "quantity": 1})
    )
    assert item.created_at == FIXED_TEXT


@pytest.mark.parametrize("missing", ["name", "description", "quantity"])
def test_create_item_requires_arguments(missing):
    args = {"name": "a", "description": "b", "quantity": 1}
    del args[missing]
    store = FakeStore()
    with pytest.raises(ValueError, match=missing):
        make_handler(store).handle_request(AppSyncEvent("createItem", args))
    assert store.items == {}


def test_create_item_rejects_boolean_quantity():
    with pytest.raises(ValueError, match="quantity"):
        make_handler(FakeStore()).handle_request(
            AppSyncEvent("createItem", {"name": "a", "description": "b", "quantity": True})
        )


def test_update_item_leaves_created_at_empty():
    store = FakeStore()
    item = make_handler(store).handle_request(
        AppSyncEvent(
            "updateItem",
            {"id": "abc", "name": "n", "description": "d", "quantity": 3},
        )
    )
    assert item.id == "abc"
    assert item.quantity == 3
    assert item.created_at == ""
    assert item.updated_at == FIXED_TEXT
    assert store.calls == [("update", item)]


def test_update_item_requires_id():
    with pytest.raises(ValueError, match="id"):
        make_handler(FakeStore()).handle_request(
            AppSyncEvent("updateItem", {"name": "n", "description": "d", "quantity": 3})
        )


def test_get_item_passes_id():
    store = FakeStore()
    stored = Item(id="x", name="thing")
    store.items["x"] = stored
    assert make_handler(store).handle_request(AppSyncEvent("getItem", {"id": "x"})) is stored


def test_get_item_with_non_string_id_uses_empty():
    store = FakeStore()
    result = make_handler(store).handle_request(AppSyncEvent("getItem", {"id": 7}))
    assert result is None
    assert store.calls == [("get", "")]


def test_list_items_returns_store_listing():
    store = FakeStore()
    store.items = {"a": Item(id="a"), "b": Item(id="b")}
    result = make_handler(store).handle_request({"fieldName": "listItems"})
    assert [item.id for item in result] == ["a", "b"]


def test_delete_item_returns_removed():
    store = FakeStore()
    stored = Item(id="x")
    store.items["x"] = stored
    handler = make_handler(store)
    assert handler.handle_request(AppSyncEvent("deleteItem", {"id": "x"})) is stored
    assert handler.handle_request(AppSyncEvent("deleteItem", {"id": "x"})) is None


def test_unknown_field_raises():
    with pytest.raises(ValueError, match="unknown field: bogus"):
        make_handler(FakeStore()).handle_request(AppSyncEvent("bogus", {}))