"""Read side for orders and splits.

Queries return flat, frozen snapshots rather than aggregates so callers cannot
mutate domain state through a read. Soft-deleted splits are never returned.
"""

from dataclasses import dataclass
from datetime import datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.order.order import Order
from ordering.split.split import OrderSplit


@dataclass(frozen=True)
class OrderLine:
    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float


@dataclass(frozen=True)
class OrderSnapshot:
    order_id: str
    order_number: str
    customer_id: str
    status: str
    address_id: str
    shipping_address: dict
    items: tuple[OrderLine, ...]
    subtotal: float
    tax: float
    shipping_cost: float
    total: float
    currency: str
    split_from_order_id: str | None
    row_version: int
    is_deleted: bool
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class SplitItemResult:
    original_order_item_id: str
    split_order_item_id: str
    product_id: str
    unit_price: float
    quantity: int


@dataclass(frozen=True)
class SplitResult:
    """A split with both sides of it: the original order and its child."""

    split_id: str
    status: str
    reason: str
    new_address_id: str | None
    moved_subtotal: float
    moved_tax: float
    items: tuple[SplitItemResult, ...]
    original_order: OrderSnapshot
    split_order: OrderSnapshot
    created_at: datetime | None
    completed_at: datetime | None
    cancelled_at: datetime | None


def snapshot_order(order: Order) -> OrderSnapshot:
    return OrderSnapshot(
        order_id=str(order.id),
        order_number=order.order_number,
        customer_id=str(order.customer_id),
        status=order.status,
        address_id=str(order.address_id),
        shipping_address=order.shipping_address.to_dict() if order.shipping_address else {},
        items=tuple(
            OrderLine(
                item_id=str(item.id),
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in order.items
        ),
        subtotal=order.subtotal,
        tax=order.tax,
        shipping_cost=order.shipping_cost,
        total=order.total,
        currency=order.currency,
        split_from_order_id=str(order.split_from_order_id) if order.split_from_order_id else None,
        row_version=order.row_version,
        is_deleted=order.is_deleted,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def _split_result(split: OrderSplit, orders: dict) -> SplitResult:
    repo = current_domain.repository_for(Order)
    for order_id in (str(split.original_order_id), str(split.split_order_id)):
        if order_id not in orders:
            orders[order_id] = snapshot_order(repo.get(order_id))

    return SplitResult(
        split_id=str(split.id),
        status=split.status,
        reason=split.reason,
        new_address_id=str(split.new_address_id) if split.new_address_id else None,
        moved_subtotal=split.moved_subtotal,
        moved_tax=split.moved_tax,
        items=tuple(
            SplitItemResult(
                original_order_item_id=str(item.original_order_item_id),
                split_order_item_id=str(item.split_order_item_id),
                product_id=str(item.product_id),
                unit_price=item.unit_price,
                quantity=item.quantity,
            )
            for item in split.items
        ),
        original_order=orders[str(split.original_order_id)],
        split_order=orders[str(split.split_order_id)],
        created_at=split.created_at,
        completed_at=split.completed_at,
        cancelled_at=split.cancelled_at,
    )


def get_order(order_id) -> OrderSnapshot | None:
    """Current state of an order, or None if it does not exist or was withdrawn."""
    try:
        order = current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        return None
    if order.is_deleted:
        return None
    return snapshot_order(order)


def get_split(split_id) -> SplitResult | None:
    split = current_domain.repository_for(OrderSplit).find_active_by_id(split_id)
    if split is None:
        return None
    return _split_result(split, {})


def list_splits_for_order(order_id) -> list[SplitResult]:
    """Splits that carved items out of ``order_id``."""
    splits = current_domain.repository_for(OrderSplit).find_by_original_order(order_id)
    orders: dict[str, OrderSnapshot] = {}
    return [_split_result(split, orders) for split in splits]


def list_splits_for_child_order(child_order_id) -> list[SplitResult]:
    """Splits that produced ``child_order_id``."""
    splits = current_domain.repository_for(OrderSplit).find_by_split_order(child_order_id)
    orders: dict[str, OrderSnapshot] = {}
    return [_split_result(split, orders) for split in splits]
