"""Domain events for the Order aggregate.

Events are immutable facts recorded in the same unit of work as the state
change that produced them and dispatched after commit.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A new order was placed (directly, or as the child of a split)."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of item dicts
    subtotal = Float(required=True)
    tax = Float()
    shipping_cost = Float()
    total = Float(required=True)
    currency = String(default="USD")
    split_from_order_id = Identifier()
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class ItemsSplitOff:
    """Quantities were moved out of this order into a child order."""

    __version__ = 1

    order_id = Identifier(required=True)
    split_order_id = Identifier(required=True)
    moved_items = Text(required=True)  # JSON: [{"item_id": ..., "quantity": ...}]
    moved_tax = Float(required=True)
    new_subtotal = Float(required=True)
    new_tax = Float(required=True)
    new_total = Float(required=True)


@ordering.event(part_of="Order")
class ItemsMergedBack:
    """Quantities from a cancelled split were returned to this order."""

    __version__ = 1

    order_id = Identifier(required=True)
    split_order_id = Identifier(required=True)
    restored_items = Text(required=True)  # JSON: [{"item_id": ..., "quantity": ...}]
    restored_tax = Float(required=True)
    new_subtotal = Float(required=True)
    new_tax = Float(required=True)
    new_total = Float(required=True)


@ordering.event(part_of="Order")
class OrderDiscarded:
    """A child order was withdrawn because its split was cancelled."""

    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(required=True)
    discarded_at = DateTime(required=True)
