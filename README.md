# serp

Inventory and order services for a small ERP system. The package holds the
data models, the table-backed stores and the request handlers of two
services: inventory and orders.

Everything that talks to the outside world is handed in as an object: the
key-value table client, the event publisher, the environment mapping, the
clock and the id factory. The package has no dependencies beyond the
standard library.

## Install

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Layout

- `serp.events`: the shared order event records `OrderCreatedEvent` and
  `OrderCancelledEvent` (each with `to_dict` and `from_dict`) and the
  `EventType` enum (`ORDER_CREATED`, `ORDER_CANCELLED`).
- `serp.inventory.models`: `Item` (with `to_dict`), `OrderEvent` (with
  `to_json` and `from_json`), `AppSyncEvent` (with `from_dict`), and the
  input records `ItemFilterInput`, `CreateItemInput` and `UpdateItemInput`.
- `serp.inventory.store`: `ItemStore`, which keeps items under `ITEM#<id>`
  keys, `StoreError`, and `unmarshal_item`.
- `serp.inventory.appsync`: `AppSyncHandler`, which answers the fields
  `getItem`, `listItems`, `createItem`, `updateItem` and `deleteItem`.
- `serp.inventory.eventbridge`: `EventHandler`, which takes stock away on
  `ORDER_CREATED` and gives it back on `ORDER_CANCELLED`, publishing
  `INVENTORY_UPDATED`, `INSUFFICIENT_INVENTORY` or `INVENTORY_RESTORED`;
  and `InventoryEventError`.
- `serp.orders.models`: `Order` (with `to_dict`), `OrderItem`, the
  `OrderStatus` enum, the input records `OrderFilterInput`,
  `CreateOrderInput`, `CreateOrderItemInput` and `UpdateOrderStatusInput`,
  `AppSyncEvent` (with `from_dict`) and `marshal_order_items`.
- `serp.orders.store`: `OrderStore`, which keeps orders under `ORDER#<id>`
  keys and their lines under `ITEM#<line id>` sort keys, `StoreError`, and
  `unmarshal_order`.
- `serp.orders.appsync`: `AppSyncHandler`, which answers `getOrder`,
  `listOrders`, `createOrder`, `updateOrderStatus` and `cancelOrder`.
- `serp.orders.eventbridge`: `EventHandler`, which accepts
  `InventoryUpdated` events, and `OrderEventError`.

## The objects you supply

- **Table client**: an object with `get_item`, `scan`, `put_item`,
  `update_item` and `delete_item` methods taking keyword arguments in the
  low-level table API shape (`TableName`, `Key`, `Item`,
  `UpdateExpression`, `ExpressionAttributeNames`,
  `ExpressionAttributeValues`, `ReturnValues`, `FilterExpression`).
  Attribute values are mappings such as `{"S": "text"}` or `{"N": "5"}`.
  Results are mappings with `Item`, `Items` or `Attributes`.
- **Publisher**: an object with `put_events(Entries=[...])`; each entry has
  `Source` (`"inventory.service"`), `DetailType`, `Detail` (JSON text) and
  `EventBusName`.
- **Environment**: a mapping, `os.environ` by default. The stores read
  `TABLE_NAME` on every call; the inventory event handler reads
  `EVENT_BUS_NAME`.
- **Clock and id factory**: callables returning a `datetime` and a string;
  by default the current UTC time and a random UUID.

## Example

```python
from serp.inventory.store import ItemStore
from serp.inventory.appsync import AppSyncHandler
from serp.inventory.models import AppSyncEvent

store = ItemStore(client, {"TABLE_NAME": "inventory"})
handler = AppSyncHandler(store)

event = AppSyncEvent.from_dict({
    "fieldName": "createItem",
    "arguments": {"name": "Widget", "description": "A widget", "quantity": 5},
})
item = handler.handle_request(event)
```

`handle_request` also accepts the plain payload mapping in place of an
`AppSyncEvent`. Created and updated items and orders carry RFC 3339 UTC
timestamps with whole seconds.

The event handlers take an event-bus envelope mapping with `detail-type`
and `detail`; the detail may be JSON text or an already decoded object.

## Errors

- The stores raise `StoreError` when `TABLE_NAME` is missing or empty, or
  when a table call fails.
- The GraphQL handlers raise `ValueError` for unknown field names and for
  arguments of the wrong type.
- The inventory `EventHandler` raises `InventoryEventError` for malformed
  details, unknown event types, items that are not found and failed table
  or publish calls.
- The orders `EventHandler` raises `OrderEventError` for unknown event
  types and malformed details.

## What this package does not do

- It does not create tables, event buses or APIs, and ships no cloud
  deployment definitions.
- It has no command and no function runtime entry point: you construct a
  store and a handler yourself and call `handle_request`.
- It brings no table or bus client of its own; storage and publishing work
  only through the objects you pass in.
- `OrderStore.get_order` and `list_orders` return order headers only; the
  order lines written by `create_order` are not read back.
- The orders `EventHandler` only checks `InventoryUpdated` details; it
  changes no orders.