"""Split planning — validation, quantity moves and tax proration.

The planner works on loaded aggregates and never touches a repository. A plan
is fully validated before anything is mutated, so a rejected request leaves
every aggregate exactly as it was loaded.

Tax follows the moved subtotal::

    moved_tax = round(order.tax * moved_subtotal / order.subtotal, 2)

Shipping is copied to the child order as-is.
"""

from dataclasses import dataclass
from uuid import uuid4

from protean.exceptions import ObjectNotFoundError, ValidationError

from ordering.errors import ConflictError
from ordering.lookups.port import AddressSnapshot, ProductCatalog
from ordering.order.order import Order, OrderStatus, money
from ordering.split.split import OrderSplit, SplitStatus


@dataclass(frozen=True)
class SplitLine:
    """One requested move, resolved against the order and the catalog."""

    original_item_id: str
    split_item_id: str
    product_id: str
    product_name: str
    unit_price: float
    quantity: int


@dataclass(frozen=True)
class SplitPlan:
    lines: tuple[SplitLine, ...]
    moved_subtotal: float
    moved_tax: float

    @property
    def moves(self) -> list[tuple[str, int]]:
        return [(line.original_item_id, line.quantity) for line in self.lines]


def prorate_tax(order_tax: float, order_subtotal: float, moved_subtotal: float) -> float:
    """Share of ``order_tax`` that follows ``moved_subtotal``."""
    if not order_subtotal:
        return 0.0
    return money(order_tax * moved_subtotal / order_subtotal)


def check_request(order: Order, requested: list[dict]) -> list[tuple]:
    """Validate a split request against ``order``.

    Returns ``(order_item, quantity)`` pairs in request order.
    """
    if not order.is_splittable():
        raise ConflictError(
            {"status": [f"Order in {order.status} state cannot be split"]},
            order_id=str(order.id),
        )

    if not requested:
        raise ValidationError({"items": ["At least one item must be selected for splitting"]})

    pairs = []
    seen = set()
    for entry in requested:
        item_id = str(entry.get("order_item_id", ""))
        quantity = entry.get("quantity")

        item = order.find_item(item_id)
        if item is None:
            raise ObjectNotFoundError({"order_item_id": [f"Order item {item_id} does not exist on order {order.id}"]})
        if item_id in seen:
            raise ValidationError({"order_item_id": [f"Order item {item_id} is listed more than once"]})
        seen.add(item_id)

        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"quantity": [f"Quantity for item {item_id} must be a positive whole number"]})
        if quantity > item.quantity:
            raise ValidationError(
                {"quantity": [f"Cannot split {quantity} units of item {item_id}: only {item.quantity} available"]}
            )
        pairs.append((item, quantity))

    if sum(quantity for _, quantity in pairs) <= 0:
        raise ValidationError({"items": ["Total quantity to split must be greater than zero"]})

    return pairs


def plan_split(order: Order, pairs: list[tuple], catalog: ProductCatalog) -> SplitPlan:
    """Resolve checked ``(order_item, quantity)`` pairs against the catalog."""
    lines = []
    for item, quantity in pairs:
        product = catalog.get_product(str(item.product_id))
        if product is None:
            raise ObjectNotFoundError({"product_id": [f"Product {item.product_id} does not exist"]})
        lines.append(
            SplitLine(
                original_item_id=str(item.id),
                split_item_id=str(uuid4()),
                product_id=str(item.product_id),
                product_name=product.name,
                unit_price=item.unit_price,
                quantity=quantity,
            )
        )

    moved_subtotal = money(sum(money(line.unit_price * line.quantity) for line in lines))
    return SplitPlan(
        lines=tuple(lines),
        moved_subtotal=moved_subtotal,
        moved_tax=prorate_tax(order.tax, order.subtotal, moved_subtotal),
    )


def carry_out(
    order: Order,
    plan: SplitPlan,
    address_id: str,
    address: AddressSnapshot,
    reason: str,
    new_address_id: str | None = None,
) -> tuple[Order, OrderSplit]:
    """Build the child order and split record, then move quantities off ``order``."""
    child = Order.create(
        customer_id=order.customer_id,
        address_id=address_id,
        shipping_address=address.as_dict(),
        items_data=[
            {
                "id": line.split_item_id,
                "product_id": line.product_id,
                "product_name": line.product_name,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
            }
            for line in plan.lines
        ],
        shipping_cost=order.shipping_cost,
        tax=plan.moved_tax,
        currency=order.currency,
        split_from_order_id=order.id,
    )
    for line in plan.lines:
        child_line = child.find_item(line.split_item_id)
        if child_line is None or child_line.quantity != line.quantity:
            raise ValidationError({"items": [f"Split order line for item {line.original_item_id} does not match"]})
    if child.subtotal != plan.moved_subtotal:
        raise ValidationError({"subtotal": ["Split order subtotal does not match the moved items"]})

    split = OrderSplit.create(
        original_order_id=order.id,
        split_order_id=child.id,
        reason=reason,
        new_address_id=new_address_id,
        moved_lines=[
            {
                "original_order_item_id": line.original_item_id,
                "split_order_item_id": line.split_item_id,
                "product_id": line.product_id,
                "unit_price": line.unit_price,
                "quantity": line.quantity,
            }
            for line in plan.lines
        ],
        moved_subtotal=plan.moved_subtotal,
        moved_tax=plan.moved_tax,
    )

    order.split_off(child.id, plan.moves, plan.moved_tax)
    return child, split


def reverse(order: Order, child: Order, split: OrderSplit) -> None:
    """Undo ``split``: quantities and tax go back to ``order``, the child is discarded."""
    if split.status != SplitStatus.ACTIVE.value:
        raise ConflictError(
            {"status": [f"Cannot cancel a split in {split.status} state"]},
            split_id=str(split.id),
        )
    if child.status != OrderStatus.PENDING.value or child.is_deleted:
        raise ConflictError(
            {"split_order": [f"Split order {child.id} is {child.status} and can no longer be cancelled"]},
            split_id=str(split.id),
        )

    moved_units = sum(item.quantity for item in split.items)
    if child.unit_count != moved_units:
        raise ConflictError(
            {"split_order": [f"Split order {child.id} no longer holds the {moved_units} units moved to it"]},
            split_id=str(split.id),
        )

    order.merge_back(
        child.id,
        [(item.original_order_item_id, item.quantity) for item in split.items],
        split.moved_tax,
    )
    child.discard(reason=f"Split {split.id} cancelled")
    split.cancel()
