"""Domain events for the OrderSplit aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="OrderSplit")
class OrderSplitCreated:
    """Items were carved out of an order into a new child order."""

    __version__ = 1

    split_id = Identifier(required=True)
    original_order_id = Identifier(required=True)
    split_order_id = Identifier(required=True)
    reason = String(required=True)
    new_address_id = Identifier()
    items = Text(required=True)  # JSON: list of moved line dicts
    moved_subtotal = Float(required=True)
    moved_tax = Float(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="OrderSplit")
class OrderSplitCancelled:
    """The split was reversed and its child order withdrawn."""

    __version__ = 1

    split_id = Identifier(required=True)
    original_order_id = Identifier(required=True)
    split_order_id = Identifier(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="OrderSplit")
class OrderSplitCompleted:
    __version__ = 1

    split_id = Identifier(required=True)
    original_order_id = Identifier(required=True)
    split_order_id = Identifier(required=True)
    completed_at = DateTime(required=True)
