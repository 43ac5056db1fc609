"""OrderSplit aggregate — the record linking an order to the child carved out of it.

An OrderSplit remembers exactly which quantities moved from which original
line to which child line, and how much tax followed them. That record is what
makes a split reversible.

State Machine:
    ACTIVE → COMPLETED
    ACTIVE → CANCELLED
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from ordering.domain import ordering
from ordering.errors import ConflictError
from ordering.split.events import OrderSplitCancelled, OrderSplitCompleted, OrderSplitCreated


class SplitStatus(Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@ordering.entity(part_of="OrderSplit")
class OrderSplitItem:
    """One moved line: ``quantity`` units of an original item now live on the child."""

    original_order_item_id = Identifier(required=True)
    split_order_item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)


@ordering.aggregate
class OrderSplit:
    original_order_id = Identifier(required=True)
    split_order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)
    new_address_id = Identifier()
    status = String(choices=SplitStatus, default=SplitStatus.ACTIVE.value)
    moved_subtotal = Float(default=0.0)
    moved_tax = Float(default=0.0)
    items = HasMany(OrderSplitItem)
    is_deleted = Boolean(default=False)
    created_at = DateTime()
    completed_at = DateTime()
    cancelled_at = DateTime()

    @invariant.post
    def split_must_link_two_different_orders(self):
        if self.original_order_id and str(self.original_order_id) == str(self.split_order_id):
            raise ValidationError({"split_order_id": ["An order cannot be split into itself"]})

    @classmethod
    def create(cls, original_order_id, split_order_id, reason, moved_lines, moved_subtotal, moved_tax, new_address_id=None):
        """Record a split.

        Args:
            moved_lines: List of dicts with original_order_item_id,
                split_order_item_id, product_id, unit_price and quantity.
        """
        if not moved_lines:
            raise ValidationError({"items": ["A split must move at least one item"]})

        now = datetime.now(UTC)
        split = cls(
            original_order_id=original_order_id,
            split_order_id=split_order_id,
            reason=reason,
            new_address_id=new_address_id,
            status=SplitStatus.ACTIVE.value,
            moved_subtotal=moved_subtotal,
            moved_tax=moved_tax,
            items=[OrderSplitItem(**line) for line in moved_lines],
            created_at=now,
        )

        split.raise_(
            OrderSplitCreated(
                split_id=str(split.id),
                original_order_id=str(original_order_id),
                split_order_id=str(split_order_id),
                reason=reason,
                new_address_id=str(new_address_id) if new_address_id else None,
                items=json.dumps(
                    [
                        {
                            "original_order_item_id": str(item.original_order_item_id),
                            "split_order_item_id": str(item.split_order_item_id),
                            "product_id": str(item.product_id),
                            "unit_price": item.unit_price,
                            "quantity": item.quantity,
                        }
                        for item in split.items
                    ]
                ),
                moved_subtotal=moved_subtotal,
                moved_tax=moved_tax,
                created_at=now,
            )
        )
        return split

    def _assert_active(self, action):
        if self.status != SplitStatus.ACTIVE.value:
            raise ConflictError(
                {"status": [f"Cannot {action} a split in {self.status} state"]},
                split_id=str(self.id),
            )

    def complete(self):
        """Close the split for good. A completed split can no longer be reversed."""
        self._assert_active("complete")
        now = datetime.now(UTC)
        self.status = SplitStatus.COMPLETED.value
        self.completed_at = now
        self.raise_(
            OrderSplitCompleted(
                split_id=str(self.id),
                original_order_id=str(self.original_order_id),
                split_order_id=str(self.split_order_id),
                completed_at=now,
            )
        )

    def cancel(self):
        self._assert_active("cancel")
        now = datetime.now(UTC)
        self.status = SplitStatus.CANCELLED.value
        self.is_deleted = True
        self.cancelled_at = now
        self.raise_(
            OrderSplitCancelled(
                split_id=str(self.id),
                original_order_id=str(self.original_order_id),
                split_order_id=str(self.split_order_id),
                cancelled_at=now,
            )
        )
