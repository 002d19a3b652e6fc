"""Reaction of the inventory service to order events from the event bus."""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from serp.events import EventType
from serp.inventory.models import OrderEvent

_SOURCE = "inventory.service"
INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
INVENTORY_UPDATED = "INVENTORY_UPDATED"
INVENTORY_RESTORED = "INVENTORY_RESTORED"


class InventoryEventError(Exception):
    """Raised when an order event cannot be applied to the inventory."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _detail_text(event: Mapping[str, Any]) -> str | bytes:
    if "detail" not in event:
        return ""
    detail = event["detail"]
    if isinstance(detail, (str, bytes)):
        return detail
    return json.dumps(detail)


class EventHandler:
    """Adjusts stock levels for created and cancelled orders.

    ``event`` is an event-bus envelope with ``detail-type`` and ``detail``;
    the detail may be raw JSON text or an already decoded object. Outcomes
    are published through ``publisher.put_events(Entries=[...])`` to the
    bus named by ``EVENT_BUS_NAME`` in ``environ``.
    """

    def __init__(
        self,
        store: Any,
        publisher: Any,
        environ: Mapping[str, str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._publisher = publisher
        self._environ = os.environ if environ is None else environ
        self._clock = clock or _utc_now

    def handle_request(self, event: Mapping[str, Any]) -> None:
        """Apply one event; raises InventoryEventError on any failure."""
        try:
            order_event = OrderEvent.from_json(_detail_text(event))
        except ValueError as err:
            raise InventoryEventError(f"invalid event: {err}") from err
        detail_type = event.get("detail-type", "")
        if detail_type == EventType.ORDER_CREATED.value:
            self._order_created(order_event)
        elif detail_type == EventType.ORDER_CANCELLED.value:
            self._order_cancelled(order_event)
        else:
            raise InventoryEventError(f"unknown event type: {detail_type}")

    def _fetch(self, item_id: str) -> Any:
        try:
            item = self._store.get_item(item_id)
        except Exception as err:
            raise InventoryEventError(f"failed to get item: {err}") from err
        if item is None:
            raise InventoryEventError(f"failed to get item: item {item_id} not found")
        return item

    def _save(self, item: Any, action: str) -> None:
        try:
            self._store.update_item(item)
        except Exception as err:
            raise InventoryEventError(f"failed to {action} inventory: {err}") from err

    def _order_created(self, event: OrderEvent) -> None:
        item = self._fetch(event.item_id)
        if item.quantity < event.quantity:
            self._publish(INSUFFICIENT_INVENTORY, event)
            return
        item.quantity -= event.quantity
        self._save(item, "update")
        self._publish(INVENTORY_UPDATED, event)

    def _order_cancelled(self, event: OrderEvent) -> None:
        item = self._fetch(event.item_id)
        item.quantity += event.quantity
        self._save(item, "restore")
        self._publish(INVENTORY_RESTORED, event)

    def _publish(self, event_type: str, source: OrderEvent) -> None:
        outgoing = OrderEvent(
            type=event_type,
            order_id=source.order_id,
            item_id=source.item_id,
            quantity=source.quantity,
            timestamp=self._clock(),
        )
        entry = {
            "Source": _SOURCE,
            "DetailType": event_type,
            "Detail": outgoing.to_json(),
            "EventBusName": self._environ.get("EVENT_BUS_NAME", ""),
        }
        try:
            self._publisher.put_events(Entries=[entry])
        except Exception as err:
            raise InventoryEventError(f"failed to send event: {err}") from err