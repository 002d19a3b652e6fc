"""Reaction of the order service to inventory events from the event bus."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from serp.events import _as_mapping, _field_int, _field_str
from serp.inventory.eventbridge import _detail_text

INVENTORY_UPDATED = "InventoryUpdated"


class OrderEventError(Exception):
    """Raised when an event from the bus cannot be handled."""


@dataclass
class _InventoryUpdatedDetail:
    item_id: str = ""
    quantity: int = 0


def _parse_inventory_updated(text: str | bytes) -> _InventoryUpdatedDetail:
    body = _as_mapping(json.loads(text), "event detail")
    return _InventoryUpdatedDetail(
        item_id=_field_str(body, "itemId"),
        quantity=_field_int(body, "quantity"),
    )


class EventHandler:
    """Accepts inventory events addressed to the order service.

    ``event`` is an event-bus envelope with ``detail-type`` and ``detail``;
    the detail may be raw JSON text or an already decoded object.
    """

    def handle_request(self, event: Mapping[str, Any]) -> None:
        """Handle one event; raises OrderEventError for unknown or malformed events."""
        detail_type = event.get("detail-type", "")
        if detail_type == INVENTORY_UPDATED:
            self._inventory_updated(event)
        else:
            raise OrderEventError(f"unknown event type: {detail_type}")

    def _inventory_updated(self, event: Mapping[str, Any]) -> None:
        try:
            _parse_inventory_updated(_detail_text(event))
        except ValueError as err:
            raise OrderEventError(f"failed to unmarshal event detail: {err}") from err