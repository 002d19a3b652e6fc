"""Order persistence on a single key-value table."""

from __future__ import annotations

import dataclasses
import os
import uuid
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from serp.inventory.appsync import _rfc3339_seconds
from serp.inventory.store import _member, _parse_float
from serp.orders.models import (
    Order,
    OrderStatus,
    StatusLike,
    _format_amount,
    _status_text,
)

_ORDER_PREFIX = "ORDER#"
_ITEM_PREFIX = "ITEM#"

_STRING_FIELDS = {
    "ID": "id",
    "customer_id": "customer_id",
    "created_at": "created_at",
    "updated_at": "updated_at",
}


class StoreError(Exception):
    """Raised when the order table cannot be read or written."""


@contextmanager
def _failure(action: str) -> Iterator[None]:
    try:
        yield
    except Exception as err:
        raise StoreError(f"failed to {action}: {err}") from err


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _order_key(order_id: str) -> dict[str, dict[str, str]]:
    value = f"{_ORDER_PREFIX}{order_id}"
    return {"PK": {"S": value}, "SK": {"S": value}}


def _status_value(text: str) -> StatusLike:
    try:
        return OrderStatus(text)
    except ValueError:
        return text


def unmarshal_order(attributes: Mapping[str, Any]) -> Order:
    """Decode an order header from table attributes, skipping malformed ones."""
    order = Order()
    for attribute, name in _STRING_FIELDS.items():
        value = _member(attributes, attribute, "S")
        if value is not None:
            setattr(order, name, value)
    status = _member(attributes, "status", "S")
    if status is not None:
        order.status = _status_value(status)
    total = _member(attributes, "total_amount", "N")
    if total is not None and (amount := _parse_float(total)) is not None:
        order.total_amount = amount
    return order


class OrderStore:
    """Reads and writes orders through a table client.

    The client takes keyword arguments in the low-level table API shape and
    attribute values as ``{"S": ...}`` or ``{"N": ...}`` mappings. The table
    name comes from ``TABLE_NAME`` in ``environ`` on every call.
    """

    def __init__(
        self,
        client: Any,
        environ: Mapping[str, str] | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._client = client
        self._environ = os.environ if environ is None else environ
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _new_id

    def _table_name(self) -> str:
        name = self._environ.get("TABLE_NAME", "")
        if not name:
            raise StoreError("TABLE_NAME environment variable is not set")
        return name

    def get_order(self, order_id: str) -> Order | None:
        """Fetch one order, or None when it does not exist."""
        table = self._table_name()
        with _failure("get order"):
            result = self._client.get_item(TableName=table, Key=_order_key(order_id))
        attributes = result.get("Item")
        if attributes is None:
            return None
        return unmarshal_order(attributes)

    def list_orders(self) -> list[Order]:
        """Return every record whose key marks it as an order."""
        table = self._table_name()
        with _failure("scan orders"):
            result = self._client.scan(
                TableName=table,
                FilterExpression="begins_with(PK, :prefix)",
                ExpressionAttributeValues={":prefix": {"S": _ORDER_PREFIX}},
            )
        return [unmarshal_order(attributes) for attributes in result.get("Items", [])]

    def create_order(self, order: Order) -> Order:
        """Store an order and its lines; an empty id is replaced by a fresh one."""
        table = self._table_name()
        if not order.id:
            order = dataclasses.replace(order, id=self._id_factory())
        header = {
            **_order_key(order.id),
            "customer_id": {"S": order.customer_id},
            "status": {"S": _status_text(order.status)},
            "total_amount": {"N": _format_amount(order.total_amount)},
            "created_at": {"S": order.created_at},
            "updated_at": {"S": order.updated_at},
        }
        with _failure("create order"):
            self._client.put_item(TableName=table, Item=header)
        for item in order.items:
            line = {
                "PK": {"S": f"{_ORDER_PREFIX}{order.id}"},
                "SK": {"S": f"{_ITEM_PREFIX}{item.id}"},
                "item_id": {"S": item.id},
                "quantity": {"N": str(item.quantity)},
                "unit_price": {"N": _format_amount(item.unit_price)},
                "created_at": {"S": order.created_at},
            }
            with _failure("create order item"):
                self._client.put_item(TableName=table, Item=line)
        return order

    def update_order_status(self, order_id: str, status: StatusLike) -> Order:
        """Set an order's status and return the stored result."""
        table = self._table_name()
        now = _rfc3339_seconds(self._clock())
        with _failure("update order status"):
            result = self._client.update_item(
                TableName=table,
                Key=_order_key(order_id),
                UpdateExpression="SET #status = :status, #updated_at = :updated_at",
                ExpressionAttributeNames={
                    "#status": "status",
                    "#updated_at": "updated_at",
                },
                ExpressionAttributeValues={
                    ":status": {"S": _status_text(status)},
                    ":updated_at": {"S": now},
                },
                ReturnValues="ALL_NEW",
            )
        return unmarshal_order(result.get("Attributes") or {})