"""Resolvers for the inventory fields of the GraphQL API."""

from __future__ import annotations

import math
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from serp.inventory.models import AppSyncEvent, Item


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _rfc3339_seconds(value: datetime) -> str:
    """Format as RFC 3339 in UTC with whole seconds; naive values count as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _optional_str(args: Mapping[str, Any], key: str) -> str:
    value = args.get(key)
    return value if isinstance(value, str) else ""


def _required_str(args: Mapping[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str):
        raise ValueError(f"argument {key!r} must be a string, got {value!r}")
    return value


def _required_count(args: Mapping[str, Any], key: str) -> int:
    value = args.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"argument {key!r} must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"argument {key!r} must be finite, got {value!r}")
    return int(value)


class AppSyncHandler:
    """Dispatches inventory resolver calls to an item store."""

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
            "getItem": self._get_item,
            "listItems": self._list_items,
            "createItem": self._create_item,
            "updateItem": self._update_item,
            "deleteItem": self._delete_item,
        }

    def handle_request(self, event: AppSyncEvent | Mapping[str, Any]) -> Any:
        """Resolve one field; raises ValueError for unknown fields or bad arguments."""
        if not isinstance(event, AppSyncEvent):
            event = AppSyncEvent.from_dict(event)
        resolver = self._resolvers.get(event.field_name)
        if resolver is None:
            raise ValueError(f"unknown field: {event.field_name}")
        return resolver(event.arguments)

    def _get_item(self, args: dict[str, Any]) -> Item | None:
        return self._store.get_item(_optional_str(args, "id"))

    def _list_items(self, args: dict[str, Any]) -> list[Item]:
        return self._store.list_items()

    def _create_item(self, args: dict[str, Any]) -> Item:
        now = _rfc3339_seconds(self._clock())
        item = Item(
            id=self._id_factory(),
            name=_required_str(args, "name"),
            description=_required_str(args, "description"),
            quantity=_required_count(args, "quantity"),
            created_at=now,
            updated_at=now,
        )
        return self._store.create_item(item)

    def _update_item(self, args: dict[str, Any]) -> Item:
        now = _rfc3339_seconds(self._clock())
        item = Item(
            id=_required_str(args, "id"),
            name=_required_str(args, "name"),
            description=_required_str(args, "description"),
            quantity=_required_count(args, "quantity"),
            updated_at=now,
        )
        return self._store.update_item(item)

    def _delete_item(self, args: dict[str, Any]) -> Item | None:
        return self._store.delete_item(_optional_str(args, "id"))