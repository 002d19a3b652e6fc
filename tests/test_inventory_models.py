from datetime import datetime, timezone

import pytest

from serp.inventory.models import AppSyncEvent, Item, OrderEvent

UTC = timezone.utc


def test_item_to_dict_uses_json_names():
    item = Item("id-1", "Widget", "Blue", 4, 2.5, "tools", "c", "u")
    assert item.to_dict() == {
        "id": "id-1",
        "name": "Widget",
        "description": "Blue",
        "quantity": 4,
        "unitPrice": 2.5,
        "category": "tools",
        "createdAt": "c",
        "updatedAt": "u",
    }


def test_order_event_to_json_is_compact_and_ordered():
    event = OrderEvent("INVENTORY_UPDATED", "o1", "i1", 2, datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))
    assert event.to_json() == (
        '{"type":"INVENTORY_UPDATED","orderId":"o1","itemId":"i1",'
        '"quantity":2,"timestamp":"2024-01-02T03:04:05Z"}'
    )


def test_order_event_round_trip():
    event = OrderEvent("INVENTORY_RESTORED", "o", "i", 11, datetime(2022, 2, 3, 4, 5, 6, 789000, tzinfo=UTC))
    assert OrderEvent.from_json(event.to_json()) == event


def test_order_event_escapes_html_characters():
    event = OrderEvent(item_id="a<b&c>")
    text = event.to_json()
    assert "<" not in text and ">" not in text and "&" not in text
    assert "\\u003c" in text
    assert OrderEvent.from_json(text).item_id == "a<b&c>"


def test_order_event_keeps_non_ascii_raw():
    event = OrderEvent(order_id="zürich")
    assert "zürich" in event.to_json()
    assert OrderEvent.from_json(event.to_json()) == event


def test_order_event_from_json_ignores_unknown_and_defaults_missing():
    assert OrderEvent.from_json('{"orderId":"o","extra":1}') == OrderEvent(order_id="o")


def test_order_event_from_json_null_is_default():
    assert OrderEvent.from_json("null") == OrderEvent()


@pytest.mark.parametrize("text", ["not json", "[1]", '{"quantity":"x"}', '{"type":3}'])
def test_order_event_from_json_rejects_bad_input(text):
    with pytest.raises(ValueError):
        OrderEvent.from_json(text)


def test_appsync_event_from_dict():
    event = AppSyncEvent.from_dict(
        {"fieldName": "getItem", "arguments": {"id": "a"}, "prev": {"x": 1}, "identity": "me"}
    )
    assert event.field_name == "getItem"
    assert event.arguments == {"id": "a"}
    assert event.prev == {"x": 1}
    assert event.identity == "me"
    assert event.source is None


def test_appsync_event_missing_arguments_is_empty():
    assert AppSyncEvent.from_dict({"fieldName": "listItems"}).arguments == {}


@pytest.mark.parametrize("data", [{"arguments": [1]}, {"fieldName": 1}, "text"])
def test_appsync_event_rejects_bad_shapes(data):
    with pytest.raises(ValueError):
        AppSyncEvent.from_dict(data)