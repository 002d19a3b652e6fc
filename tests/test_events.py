from datetime import datetime, timedelta, timezone

import pytest

from serp.events import OrderCancelledEvent, OrderCreatedEvent

UTC = timezone.utc


def test_to_dict_uses_json_names_and_rfc3339():
    event = OrderCreatedEvent("o-1", "i-1", 3, datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))
    assert event.to_dict() == {
        "orderId": "o-1",
        "itemId": "i-1",
        "quantity": 3,
        "timestamp": "2024-01-02T03:04:05Z",
    }


@pytest.mark.parametrize("cls", [OrderCreatedEvent, OrderCancelledEvent])
def test_round_trip(cls):
    tz = timezone(timedelta(hours=2))
    event = cls("order", "item", 9, datetime(2023, 6, 7, 8, 9, 10, 120000, tzinfo=tz))
    restored = cls.from_dict(event.to_dict())
    assert restored == event
    assert restored.timestamp.utcoffset() == timedelta(hours=2)


def test_fractional_seconds_are_trimmed():
    event = OrderCancelledEvent(timestamp=datetime(2024, 1, 2, 3, 4, 5, 500000, tzinfo=UTC))
    assert event.to_dict()["timestamp"] == "2024-01-02T03:04:05.5Z"


def test_from_dict_parses_offsets():
    event = OrderCreatedEvent.from_dict({"timestamp": "2024-01-02T03:04:05+02:00"})
    assert event.timestamp == datetime(2024, 1, 2, 1, 4, 5, tzinfo=UTC)


def test_from_dict_missing_fields_are_defaults():
    event = OrderCreatedEvent.from_dict({})
    assert event == OrderCreatedEvent()
    assert OrderCreatedEvent.from_dict(event.to_dict()) == event


def test_from_dict_ignores_unknown_keys():
    event = OrderCancelledEvent.from_dict({"orderId": "x", "extra": [1, 2]})
    assert event == OrderCancelledEvent(order_id="x")


@pytest.mark.parametrize("quantity", [1.5, "3", True])
def test_from_dict_rejects_non_integer_quantity(quantity):
    with pytest.raises(ValueError):
        OrderCreatedEvent.from_dict({"quantity": quantity})


@pytest.mark.parametrize("stamp", ["yesterday", "2024-13-01T00:00:00Z", "2024-01-01 00:00:00Z", 5])
def test_from_dict_rejects_bad_timestamp(stamp):
    with pytest.raises(ValueError):
        OrderCreatedEvent.from_dict({"timestamp": stamp})


def test_from_dict_rejects_non_object():
    with pytest.raises(ValueError):
        OrderCancelledEvent.from_dict(["orderId"])


def test_event_kinds_are_distinct():
    created = OrderCreatedEvent("o", "i", 1)
    cancelled = OrderCancelledEvent("o", "i", 1)
    assert not created == cancelled
    assert created.to_dict() == cancelled.to_dict()