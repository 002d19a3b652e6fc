"""Order events exchanged between the order and inventory services."""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_TIMESTAMP_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)


class EventType(str, enum.Enum):
    """Detail types of the events published by the order service."""

    ORDER_CREATED = "ORDER_CREATED"
    ORDER_CANCELLED = "ORDER_CANCELLED"


def _format_timestamp(value: datetime) -> str:
    """Render a datetime as RFC 3339 with trimmed fractional seconds.

    Naive datetimes are taken to be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += f".{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_timestamp(text: Any) -> datetime:
    """Parse an RFC 3339 timestamp, raising ValueError when it is malformed."""
    if not isinstance(text, str):
        raise ValueError(f"timestamp must be a string, got {type(text).__name__}")
    match = _TIMESTAMP_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid RFC 3339 timestamp: {text!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    microsecond = int((fraction or "").ljust(6, "0")[:6])
    if zone == "Z":
        tz = timezone.utc
    else:
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"invalid time zone offset: {zone!r}")
        delta = timedelta(hours=hours, minutes=minutes)
        tz = timezone(delta if zone[0] == "+" else -delta)
    return datetime(
        int(year), int(month), int(day),
        int(hour), int(minute), int(second),
        microsecond, tzinfo=tz,
    )


def _as_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be an object, got {type(data).__name__}")
    return data


def _field_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _field_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def _field_timestamp(data: Mapping[str, Any], key: str) -> datetime:
    value = data.get(key)
    if value is None:
        return _ZERO_TIME
    return _parse_timestamp(value)


def _event_to_dict(order_id: str, item_id: str, quantity: int, timestamp: datetime) -> dict[str, Any]:
    return {
        "orderId": order_id,
        "itemId": item_id,
        "quantity": quantity,
        "timestamp": _format_timestamp(timestamp),
    }


def _event_fields(data: Any) -> dict[str, Any]:
    body = _as_mapping(data, "event")
    return {
        "order_id": _field_str(body, "orderId"),
        "item_id": _field_str(body, "itemId"),
        "quantity": _field_int(body, "quantity"),
        "timestamp": _field_timestamp(body, "timestamp"),
    }


@dataclass
class OrderCreatedEvent:
    """An order was placed for a quantity of one item."""

    order_id: str = ""
    item_id: str = ""
    quantity: int = 0
    timestamp: datetime = _ZERO_TIME

    def to_dict(self) -> dict[str, Any]:
        """Return the event as its JSON object."""
        return _event_to_dict(self.order_id, self.item_id, self.quantity, self.timestamp)

    @classmethod
    def from_dict(cls, data: Any) -> OrderCreatedEvent:
        """Build an event from its JSON object; missing fields keep their defaults."""
        return cls(**_event_fields(data))


@dataclass
class OrderCancelledEvent:
    """An order for a quantity of one item was cancelled."""

    order_id: str = ""
    item_id: str = ""
    quantity: int = 0
    timestamp: datetime = _ZERO_TIME

    def to_dict(self) -> dict[str, Any]:
        """Return the event as its JSON object."""
        return _event_to_dict(self.order_id, self.item_id, self.quantity, self.timestamp)

    @classmethod
    def from_dict(cls, data: Any) -> OrderCancelledEvent:
        """Build an event from its JSON object; missing fields keep their defaults."""
        return cls(**_event_fields(data))