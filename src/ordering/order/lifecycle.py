"""Order lifecycle — confirm, ship, deliver and cancel commands with their handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class ShipOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class DeliverOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@ordering.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        self._transition(command.order_id, "confirm")

    @handle(ShipOrder)
    def ship_order(self, command):
        self._transition(command.order_id, "ship")

    @handle(DeliverOrder)
    def deliver_order(self, command):
        self._transition(command.order_id, "deliver")

    @handle(CancelOrder)
    def cancel_order(self, command):
        self._transition(command.order_id, "cancel", reason=command.reason)

    def _transition(self, order_id, action, **kwargs):
        repo = current_domain.repository_for(Order)
        order = repo.get_active(order_id)
        getattr(order, action)(**kwargs)
        repo.add_checked(order)
        logger.info("Order status changed", order_id=str(order_id), action=action, status=order.status)
