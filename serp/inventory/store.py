"""Item persistence on a single key-value table."""

from __future__ import annotations

import math
import os
import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from serp.inventory.models import Item

_PREFIX = "ITEM#"
_UPDATE_EXPRESSION = (
    "SET #name = :name, #description = :description, "
    "#quantity = :quantity, #updated_at = :updated_at"
)
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1

_STRING_FIELDS = {
    "ID": "id",
    "Name": "name",
    "Description": "description",
    "Category": "category",
    "CreatedAt": "created_at",
    "UpdatedAt": "updated_at",
}


class StoreError(Exception):
    """Raised when the item table cannot be read or written."""


@contextmanager
def _failure(action: str) -> Iterator[None]:
    try:
        yield
    except Exception as err:
        raise StoreError(f"failed to {action}: {err}") from err


def _key(item_id: str) -> dict[str, dict[str, str]]:
    value = f"{_PREFIX}{item_id}"
    return {"PK": {"S": value}, "SK": {"S": value}}


def _member(attributes: Mapping[str, Any], name: str, kind: str) -> str | None:
    value = attributes.get(name)
    if isinstance(value, Mapping) and isinstance(value.get(kind), str):
        return value[kind]
    return None


def _parse_int(text: str) -> int | None:
    if not _INT_RE.fullmatch(text):
        return None
    number = int(text)
    return number if _INT64_MIN <= number <= _INT64_MAX else None


def _parse_float(text: str) -> float | None:
    if not text or "_" in text or text != text.strip():
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isinf(number) and "inf" not in text.lower():
        return None
    return number


def unmarshal_item(attributes: Mapping[str, Any]) -> Item:
    """Decode an item from table attributes, skipping absent or malformed ones."""
    item = Item()
    for attribute, name in _STRING_FIELDS.items():
        value = _member(attributes, attribute, "S")
        if value is not None:
            setattr(item, name, value)
    quantity = _member(attributes, "Quantity", "N")
    if quantity is not None and (parsed := _parse_int(quantity)) is not None:
        item.quantity = parsed
    unit_price = _member(attributes, "UnitPrice", "N")
    if unit_price is not None and (price := _parse_float(unit_price)) is not None:
        item.unit_price = price
    return item


class ItemStore:
    """Reads and writes inventory items through a table client.

    The client takes keyword arguments in the low-level table API shape
    (``TableName``, ``Key``, ...) and attribute values as ``{"S": ...}``
    or ``{"N": ...}`` mappings. The table name comes from ``TABLE_NAME``
    in ``environ`` (the process environment by default) on every call.
    """

    def __init__(self, client: Any, environ: Mapping[str, str] | None = None) -> None:
        self._client = client
        self._environ = os.environ if environ is None else environ

    def _table_name(self) -> str:
        name = self._environ.get("TABLE_NAME", "")
        if not name:
            raise StoreError("TABLE_NAME environment variable is not set")
        return name

    def get_item(self, item_id: str) -> Item | None:
        """Fetch one item, or None when it does not exist."""
        table = self._table_name()
        with _failure("get item"):
            result = self._client.get_item(TableName=table, Key=_key(item_id))
        attributes = result.get("Item")
        if attributes is None:
            return None
        return unmarshal_item(attributes)

    def list_items(self) -> list[Item]:
        """Return every item in the table."""
        table = self._table_name()
        with _failure("scan items"):
            result = self._client.scan(
                TableName=table,
                FilterExpression="begins_with(PK, :prefix)",
                ExpressionAttributeValues={":prefix": {"S": _PREFIX}},
            )
        return [unmarshal_item(attributes) for attributes in result.get("Items", [])]

    def create_item(self, item: Item) -> Item:
        """Store a new item and return it."""
        table = self._table_name()
        record = {
            **_key(item.id),
            "name": {"S": item.name},
            "description": {"S": item.description},
            "quantity": {"N": str(item.quantity)},
            "created_at": {"S": item.created_at},
            "updated_at": {"S": item.updated_at},
        }
        with _failure("create item"):
            self._client.put_item(TableName=table, Item=record)
        return item

    def update_item(self, item: Item) -> Item:
        """Overwrite an item's editable fields and return the stored result."""
        table = self._table_name()
        with _failure("update item"):
            result = self._client.update_item(
                TableName=table,
                Key=_key(item.id),
                UpdateExpression=_UPDATE_EXPRESSION,
                ExpressionAttributeNames={
                    "#name": "name",
                    "#description": "description",
                    "#quantity": "quantity",
                    "#updated_at": "updated_at",
                },
                ExpressionAttributeValues={
                    ":name": {"S": item.name},
                    ":description": {"S": item.description},
                    ":quantity": {"N": str(item.quantity)},
                    ":updated_at": {"S": item.updated_at},
                },
                ReturnValues="ALL_NEW",
            )
        return unmarshal_item(result.get("Attributes") or {})

    def delete_item(self, item_id: str) -> Item | None:
        """Remove an item and return it, or None when it did not exist."""
        table = self._table_name()
        item = self.get_item(item_id)
        if item is None:
            return None
        with _failure("delete item"):
            self._client.delete_item(TableName=table, Key=_key(item_id))
        return item