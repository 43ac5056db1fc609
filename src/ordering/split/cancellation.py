"""Split cancellation — command and handler.

Cancelling is the exact inverse of splitting: moved quantities and their tax
share return to the original order and the child order is withdrawn.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import ConflictError
from ordering.order.order import Order
from ordering.split.split import OrderSplit
from ordering.split.splitter import reverse

logger = structlog.get_logger(__name__)


@ordering.command(part_of="OrderSplit")
class CancelSplit:
    split_id = Identifier(required=True)


@ordering.command_handler(part_of=OrderSplit)
class CancelSplitHandler:
    @handle(CancelSplit)
    def cancel_split(self, command):
        log = logger.bind(split_id=str(command.split_id))
        split_repo = current_domain.repository_for(OrderSplit)
        split = split_repo.find_active_by_id(command.split_id)
        if split is None:
            log.info("Split not found")
            return False

        try:
            order_repo = current_domain.repository_for(Order)
            order = order_repo.get(str(split.original_order_id))
            child = order_repo.get(str(split.split_order_id))

            reverse(order, child, split)

            order_repo.add_checked(order)
            order_repo.add_checked(child)
            split_repo.add(split)
        except (ConflictError, ObjectNotFoundError) as exc:
            log.warning(
                "Split cancellation rejected",
                order_id=str(split.original_order_id),
                error=type(exc).__name__,
                messages=getattr(exc, "messages", None),
            )
            raise

        log.info("Split cancelled", order_id=str(order.id), split_order_id=str(child.id))
        return True


def cancel_split(split_id) -> bool:
    return current_domain.process(CancelSplit(split_id=split_id), asynchronous=False)
