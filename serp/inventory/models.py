"""Data types of the inventory service."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from serp.events import (
    _ZERO_TIME,
    _as_mapping,
    _field_int,
    _field_str,
    _field_timestamp,
    _format_timestamp,
)

_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@dataclass
class Item:
    """A stock item held in inventory."""

    id: str = ""
    name: str = ""
    description: str = ""
    quantity: int = 0
    unit_price: float = 0.0
    category: str = ""
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the item as its JSON object."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "category": self.category,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class ItemFilterInput:
    """Criteria for narrowing an item listing."""

    category: str = ""


@dataclass
class OrderEvent:
    """An order-related event as carried on the event bus."""

    type: str = ""
    order_id: str = ""
    item_id: str = ""
    quantity: int = 0
    timestamp: datetime = _ZERO_TIME

    def to_json(self) -> str:
        """Serialise to compact JSON with HTML-sensitive characters escaped."""
        text = json.dumps(
            {
                "type": self.type,
                "orderId": self.order_id,
                "itemId": self.item_id,
                "quantity": self.quantity,
                "timestamp": _format_timestamp(self.timestamp),
            },
            separators=(",", ":"),
            ensure_ascii=False,
        )
        for char, escape in _JSON_ESCAPES.items():
            text = text.replace(char, escape)
        return text

    @classmethod
    def from_json(cls, text: str | bytes) -> OrderEvent:
        """Parse an event; raises ValueError on malformed JSON or field types."""
        body = _as_mapping(json.loads(text), "event")
        return cls(
            type=_field_str(body, "type"),
            order_id=_field_str(body, "orderId"),
            item_id=_field_str(body, "itemId"),
            quantity=_field_int(body, "quantity"),
            timestamp=_field_timestamp(body, "timestamp"),
        )


@dataclass
class AppSyncEvent:
    """A resolver invocation delivered by the GraphQL API."""

    field_name: str = ""
    arguments: dict[str, Any] = field(default_factory=dict)
    identity: Any = None
    source: Any = None
    request: Any = None
    prev: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> AppSyncEvent:
        """Build an event from the resolver payload."""
        body = _as_mapping(data, "event")
        arguments = body.get("arguments")
        if arguments is None:
            arguments = {}
        elif not isinstance(arguments, Mapping):
            raise ValueError(
                f"arguments must be an object, got {type(arguments).__name__}"
            )
        return cls(
            field_name=_field_str(body, "fieldName"),
            arguments=dict(arguments),
            identity=body.get("identity"),
            source=body.get("source"),
            request=body.get("request"),
            prev=body.get("prev"),
        )


@dataclass
class CreateItemInput:
    """Fields supplied when creating an item."""

    sku: str = ""
    name: str = ""
    description: str = ""
    quantity: int = 0
    unit_price: float = 0.0
    category: str = ""


@dataclass
class UpdateItemInput:
    """Fields supplied when updating an item."""

    id: str = ""
    sku: str = ""
    name: str = ""
    description: str = ""
    quantity: int = 0
    unit_price: float = 0.0
    category: str = ""