"""Order splitting — command and handler.

All writes happen in the handler's unit of work. The original order is saved
first so a version conflict aborts before the child order or the split record
is written.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import ConflictError
from ordering.lookups import get_address_book, get_catalog
from ordering.order.order import Order
from ordering.split.queries import SplitResult, get_split
from ordering.split.split import OrderSplit
from ordering.split.splitter import carry_out, check_request, plan_split

logger = structlog.get_logger(__name__)


@ordering.command(part_of="OrderSplit")
class SplitOrder:
    order_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{"order_item_id": ..., "quantity": ...}]
    reason = String(required=True, max_length=500)
    new_address_id = Identifier()


@ordering.command_handler(part_of=OrderSplit)
class SplitOrderHandler:
    @handle(SplitOrder)
    def split_order(self, command):
        log = logger.bind(order_id=str(command.order_id))
        requested = json.loads(command.items) if isinstance(command.items, str) else command.items

        try:
            order_repo = current_domain.repository_for(Order)
            order = order_repo.get_active(command.order_id)
            pairs = check_request(order, requested)

            address_id = command.new_address_id or order.address_id
            address = get_address_book().get_address(str(address_id))
            if address is None:
                raise ObjectNotFoundError({"address_id": [f"Address {address_id} does not exist"]})

            plan = plan_split(order, pairs, get_catalog())
            child, split = carry_out(
                order,
                plan,
                address_id=address_id,
                address=address,
                reason=command.reason,
                new_address_id=command.new_address_id,
            )

            order_repo.add_checked(order)
            order_repo.add_checked(child)
            current_domain.repository_for(OrderSplit).add(split)
        except (ValidationError, ObjectNotFoundError, ConflictError) as exc:
            log.warning("Split request rejected", error=type(exc).__name__, messages=getattr(exc, "messages", None))
            raise

        log.info(
            "Order split created",
            split_id=str(split.id),
            split_order_id=str(child.id),
            moved_subtotal=plan.moved_subtotal,
            moved_tax=plan.moved_tax,
        )
        return str(split.id)


def split_order(order_id, items: list[dict], reason: str, new_address_id=None) -> SplitResult:
    """Split ``items`` off ``order_id`` and return the committed result."""
    split_id = current_domain.process(
        SplitOrder(
            order_id=order_id,
            items=json.dumps(items),
            reason=reason,
            new_address_id=new_address_id,
        ),
        asynchronous=False,
    )
    return get_split(split_id)
