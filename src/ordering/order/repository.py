"""Repository for the Order aggregate."""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.query import Q

from ordering.domain import ordering
from ordering.errors import ConcurrentModificationError
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order persistence with a row-version check on writes.

    ``row_version`` on the aggregate is the version it was loaded at. A write
    succeeds only if the stored row still carries that version. The check and
    the version bump are one conditional UPDATE, so two writers that loaded the
    same version cannot both pass it.
    """

    def get_active(self, order_id) -> Order:
        """Fetch an order, treating soft-deleted orders as missing."""
        order = self.get(order_id)
        if order.is_deleted:
            raise ObjectNotFoundError({"_entity": [f"Order {order_id} does not exist"]})
        return order

    def add_checked(self, order: Order) -> Order:
        """Persist ``order`` if nobody else wrote it since it was loaded."""
        expected = order.row_version or 0
        if self._dao.query.filter(id=str(order.id)).all().items:
            claimed = self._dao._update_all(Q(id=str(order.id), row_version=expected), row_version=expected + 1)
            if not claimed:
                logger.warning("Order version conflict", order_id=str(order.id), expected_version=expected)
                raise ConcurrentModificationError(
                    {"order": [f"Order {order.id} was modified by another request"]},
                    order_id=str(order.id),
                )

        order.row_version = expected + 1
        return self.add(order)
