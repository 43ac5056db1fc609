"""Order aggregate (CQRS) — the order whose line items can be split off.

The Order owns its line items and totals. Items are only changed through the
aggregate's methods, which recompute ``subtotal`` and ``total`` every time.
Money is kept at currency precision (two decimal places, half-up) so that a
split followed by its cancellation restores the original figures exactly.

State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    PENDING / PROCESSING → CANCELLED

Every persisted Order carries ``row_version``, the optimistic concurrency
token checked by ``OrderRepository.add_checked``.
"""

import json
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.errors import ConflictError
from ordering.order.events import (
    ItemsMergedBack,
    ItemsSplitOff,
    OrderCancelled,
    OrderConfirmed,
    OrderCreated,
    OrderDelivered,
    OrderDiscarded,
    OrderShipped,
)

_CENT = Decimal("0.01")


def money(value) -> float:
    """Round an amount to currency precision."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# States from which line items may be split off into a child order
SPLITTABLE_STATES = {OrderStatus.PENDING, OrderStatus.PROCESSING}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Delivery address captured when the order was placed.

    Once recorded on an Order, the address is immutable: later changes in the
    customer's address book do not affect orders already placed.
    """

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item. Quantity may drop to zero when all units are split off."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=0)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(default=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(max_length=30)
    customer_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    address_id = Identifier(required=True)
    shipping_address = ValueObject(ShippingAddress)
    subtotal = Float(default=0.0)
    tax = Float(default=0.0, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0)
    currency = String(max_length=3, default="USD")
    split_from_order_id = Identifier()
    row_version = Integer(default=0)
    is_deleted = Boolean(default=False)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        customer_id,
        address_id,
        shipping_address,
        items_data,
        shipping_cost=0.0,
        tax=0.0,
        currency="USD",
        split_from_order_id=None,
    ):
        """Place a new order in Pending status.

        Args:
            customer_id: The customer placing the order.
            address_id: Reference to the customer's address book entry.
            shipping_address: Dict with street, city, state, postal_code, country.
            items_data: List of dicts with product_id, product_name, quantity,
                        unit_price and optionally a pre-generated id.
            shipping_cost: Flat shipping charge.
            tax: Tax amount charged on the order.
            split_from_order_id: Parent order when this order is a split child.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=f"ORD-{now:%Y%m%d}-{uuid4().hex[:8].upper()}",
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            address_id=address_id,
            shipping_address=ShippingAddress(**shipping_address),
            items=[OrderItem(**item) for item in items_data],
            shipping_cost=money(shipping_cost or 0.0),
            tax=money(tax or 0.0),
            currency=currency or "USD",
            split_from_order_id=split_from_order_id,
            created_at=now,
            updated_at=now,
        )
        order._recalculate_totals()

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                address_id=str(address_id),
                items=json.dumps([order._item_snapshot(item) for item in order.items]),
                subtotal=order.subtotal,
                tax=order.tax,
                shipping_cost=order.shipping_cost,
                total=order.total,
                currency=order.currency,
                split_from_order_id=str(split_from_order_id) if split_from_order_id else None,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ConflictError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]},
                order_id=str(self.id),
            )

    def _recalculate_totals(self):
        """Recompute line totals, subtotal and grand total from the items."""
        for item in self.items:
            item.total_price = money(item.unit_price * item.quantity)
        self.subtotal = money(sum(item.total_price for item in self.items))
        self.total = money(self.subtotal + self.tax + self.shipping_cost)

    @staticmethod
    def _item_snapshot(item):
        return {
            "id": str(item.id),
            "product_id": str(item.product_id),
            "product_name": item.product_name,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
        }

    def find_item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def is_splittable(self):
        return not self.is_deleted and OrderStatus(self.status) in SPLITTABLE_STATES

    @property
    def unit_count(self):
        return sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------
    # Splitting
    # -------------------------------------------------------------------
    def split_off(self, split_order_id, moves, moved_tax):
        """Move quantities out of this order into the child ``split_order_id``.

        Args:
            split_order_id: The child order receiving the quantities.
            moves: List of ``(item_id, quantity)`` pairs.
            moved_tax: Tax share that follows the moved subtotal.
        """
        if not self.is_splittable():
            raise ConflictError(
                {"status": [f"Order in {self.status} state cannot be split"]},
                order_id=str(self.id),
            )

        for item_id, quantity in moves:
            item = self.find_item(item_id)
            if item is None:
                raise ValidationError({"item_id": [f"Item {item_id} does not belong to this order"]})
            if quantity < 1 or quantity > item.quantity:
                raise ValidationError(
                    {"quantity": [f"Cannot split {quantity} units from item {item_id} holding {item.quantity}"]}
                )
            item.quantity -= quantity

        self.tax = money(self.tax - moved_tax)
        self._recalculate_totals()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ItemsSplitOff(
                order_id=str(self.id),
                split_order_id=str(split_order_id),
                moved_items=json.dumps([{"item_id": str(i), "quantity": q} for i, q in moves]),
                moved_tax=moved_tax,
                new_subtotal=self.subtotal,
                new_tax=self.tax,
                new_total=self.total,
            )
        )

    def merge_back(self, split_order_id, restores, restored_tax):
        """Return quantities from a cancelled split. Exact inverse of ``split_off``.

        Only orders that could still be split take units back.
        """
        if not self.is_splittable():
            raise ConflictError(
                {"status": [f"Order in {self.status} state cannot take back split items"]},
                order_id=str(self.id),
            )

        targets = []
        for item_id, quantity in restores:
            item = self.find_item(item_id)
            if item is None:
                raise ValidationError({"item_id": [f"Item {item_id} does not belong to this order"]})
            targets.append((item, quantity))

        for item, quantity in targets:
            item.quantity += quantity

        self.tax = money(self.tax + restored_tax)
        self._recalculate_totals()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ItemsMergedBack(
                order_id=str(self.id),
                split_order_id=str(split_order_id),
                restored_items=json.dumps([{"item_id": str(i), "quantity": q} for i, q in restores]),
                restored_tax=restored_tax,
                new_subtotal=self.subtotal,
                new_tax=self.tax,
                new_total=self.total,
            )
        )

    def discard(self, reason):
        """Soft-delete a Pending order whose reason to exist was withdrawn."""
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ConflictError(
                {"status": [f"Only Pending orders can be discarded, order is {self.status}"]},
                order_id=str(self.id),
            )

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.is_deleted = True
        self.updated_at = now

        self.raise_(
            OrderDiscarded(
                order_id=str(self.id),
                reason=reason,
                discarded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def confirm(self):
        """Start processing the order."""
        self._assert_can_transition(OrderStatus.PROCESSING)
        now = datetime.now(UTC)
        self.status = OrderStatus.PROCESSING.value
        self.updated_at = now
        self.raise_(OrderConfirmed(order_id=str(self.id), confirmed_at=now))

    def ship(self):
        self._assert_can_transition(OrderStatus.SHIPPED)
        now = datetime.now(UTC)
        self.status = OrderStatus.SHIPPED.value
        self.updated_at = now
        self.raise_(OrderShipped(order_id=str(self.id), shipped_at=now))

    def deliver(self):
        self._assert_can_transition(OrderStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.updated_at = now
        self.raise_(OrderDelivered(order_id=str(self.id), delivered_at=now))

    def cancel(self, reason):
        self._assert_can_transition(OrderStatus.CANCELLED)
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now
        self.raise_(OrderCancelled(order_id=str(self.id), reason=reason, cancelled_at=now))
