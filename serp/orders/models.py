"""Data types of the order service."""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from serp.events import _as_mapping, _field_str


class OrderStatus(str, enum.Enum):
    """Lifecycle states of an order."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


StatusLike = Union[OrderStatus, str]


def _status_text(status: StatusLike) -> str:
    """Return the wire text of a status, enum member or plain string."""
    if isinstance(status, OrderStatus):
        return status.value
    return str(status)


def _format_amount(value: float) -> str:
    """Render a money amount with exactly two decimals."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:.2f}"


@dataclass
class OrderItem:
    """One line of an order: a quantity of a stock item."""

    id: str = ""
    order_id: str = ""
    item_id: str = ""
    quantity: int = 0
    unit_price: float = 0.0


def _order_item_dict(item: OrderItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "orderId": item.order_id,
        "itemId": item.item_id,
        "quantity": item.quantity,
        "unitPrice": item.unit_price,
    }


@dataclass
class Order:
    """A customer order with its lines."""

    id: str = ""
    customer_id: str = ""
    status: StatusLike = ""
    items: list[OrderItem] = field(default_factory=list)
    total_amount: float = 0.0
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the order as its JSON object."""
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "status": _status_text(self.status),
            "items": [_order_item_dict(item) for item in self.items],
            "totalAmount": self.total_amount,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class OrderFilterInput:
    """Criteria for narrowing an order listing."""

    customer_id: str = ""
    status: StatusLike = ""


@dataclass
class CreateOrderItemInput:
    """One requested line of a new order."""

    item_id: str = ""
    quantity: int = 0


@dataclass
class CreateOrderInput:
    """Fields supplied when placing an order."""

    customer_id: str = ""
    items: list[CreateOrderItemInput] = field(default_factory=list)


@dataclass
class UpdateOrderStatusInput:
    """Fields supplied when changing an order's status."""

    id: str = ""
    status: StatusLike = ""


def _optional_object(body: Mapping[str, Any], key: str) -> dict[str, Any] | None:
    value = body.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f"{key} must be an object, got {type(value).__name__}")
    return dict(value)


@dataclass
class AppSyncEvent:
    """A resolver invocation delivered by the GraphQL API."""

    field_name: str = ""
    arguments: dict[str, Any] = field(default_factory=dict)
    identity: dict[str, Any] | None = None
    source: dict[str, Any] | None = None
    request: dict[str, Any] | None = None
    prev_result: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> AppSyncEvent:
        """Build an event from the resolver payload; raises ValueError on bad shapes."""
        body = _as_mapping(data, "event")
        return cls(
            field_name=_field_str(body, "fieldName"),
            arguments=_optional_object(body, "arguments") or {},
            identity=_optional_object(body, "identity"),
            source=_optional_object(body, "source"),
            request=_optional_object(body, "request"),
            prev_result=_optional_object(body, "prevResult"),
        )


def marshal_order_items(items: list[OrderItem]) -> list[dict[str, Any]]:
    """Encode order lines as table map attributes."""
    return [
        {
            "M": {
                "id": {"S": item.id},
                "orderId": {"S": item.order_id},
                "itemId": {"S": item.item_id},
                "quantity": {"N": str(item.quantity)},
                "unitPrice": {"N": _format_amount(item.unit_price)},
            }
        }
        for item in items
    ]