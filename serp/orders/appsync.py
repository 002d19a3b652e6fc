"""Resolvers for the order fields of the GraphQL API."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from serp.inventory.appsync import (
    _new_id,
    _optional_str,
    _required_count,
    _required_str,
    _rfc3339_seconds,
    _utc_now,
)
from serp.orders.models import AppSyncEvent, Order, OrderItem, OrderStatus
from serp.orders.store import _status_value


def _input_object(args: Mapping[str, Any]) -> Mapping[str, Any]:
    value = args.get("input")
    if not isinstance(value, Mapping):
        raise ValueError(f"argument 'input' must be an object, got {value!r}")
    return value


def _item_entries(data: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    value = data.get("items")
    if not isinstance(value, list):
        raise ValueError(f"argument 'items' must be a list, got {value!r}")
    for entry in value:
        if not isinstance(entry, Mapping):
            raise ValueError(f"order item must be an object, got {entry!r}")
    return value


class AppSyncHandler:
    """Dispatches order resolver calls to an order store."""

    def __init__(
        self,
        store: Any,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _new_id
        self._resolvers: dict[str, Callable[[dict[str, Any]], Any]] = {
            "getOrder": self._get_order,
            "listOrders": self._list_orders,
            "createOrder": self._create_order,
            "updateOrderStatus": self._update_order_status,
            "cancelOrder": self._cancel_order,
        }

    def handle_request(self, event: AppSyncEvent | Mapping[str, Any]) -> Any:
        """Resolve one field; raises ValueError for unknown fields or bad arguments."""
        if not isinstance(event, AppSyncEvent):
            event = AppSyncEvent.from_dict(event)
        resolver = self._resolvers.get(event.field_name)
        if resolver is None:
            raise ValueError(f"unknown field: {event.field_name}")
        return resolver(event.arguments)

    def _get_order(self, args: dict[str, Any]) -> Order | None:
        return self._store.get_order(_optional_str(args, "id"))

    def _list_orders(self, args: dict[str, Any]) -> list[Order]:
        return self._store.list_orders()

    def _create_order(self, args: dict[str, Any]) -> Order:
        data = _input_object(args)
        now = _rfc3339_seconds(self._clock())
        order = Order(
            id=self._id_factory(),
            customer_id=_required_str(data, "customerId"),
            status=OrderStatus.PENDING,
            items=[],
            created_at=now,
            updated_at=now,
        )
        for entry in _item_entries(data):
            order.items.append(
                OrderItem(
                    id=self._id_factory(),
                    order_id=order.id,
                    item_id=_required_str(entry, "itemId"),
                    quantity=_required_count(entry, "quantity"),
                )
            )
        return self._store.create_order(order)

    def _update_order_status(self, args: dict[str, Any]) -> Order:
        data = _input_object(args)
        order_id = _required_str(data, "orderId")
        status = _status_value(_required_str(data, "status"))
        return self._store.update_order_status(order_id, status)

    def _cancel_order(self, args: dict[str, Any]) -> Order:
        return self._store.update_order_status(
            _optional_str(args, "id"), OrderStatus.CANCELLED
        )