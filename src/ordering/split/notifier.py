"""Split notifier — forwards committed split events to the publisher port.

Runs after the split's unit of work has committed. A failing publisher is
logged and otherwise ignored: the split already happened and stays.
"""

import structlog
from protean.utils.mixins import handle

from ordering.domain import ordering
from ordering.publisher import get_publisher
from ordering.split.events import OrderSplitCancelled, OrderSplitCompleted, OrderSplitCreated
from ordering.split.split import OrderSplit

logger = structlog.get_logger(__name__)


@ordering.event_handler(part_of=OrderSplit)
class SplitNotifier:
    @handle(OrderSplitCreated)
    def on_split_created(self, event: OrderSplitCreated) -> None:
        self._publish("OrderSplitCreated", event)

    @handle(OrderSplitCancelled)
    def on_split_cancelled(self, event: OrderSplitCancelled) -> None:
        self._publish("OrderSplitCancelled", event)

    @handle(OrderSplitCompleted)
    def on_split_completed(self, event: OrderSplitCompleted) -> None:
        self._publish("OrderSplitCompleted", event)

    def _publish(self, event_type: str, event) -> None:
        payload = {key: value for key, value in event.to_dict().items() if key != "_metadata"}
        try:
            get_publisher().publish(event_type, payload)
        except Exception as exc:
            logger.error(
                "Failed to publish split event",
                event_type=event_type,
                split_id=str(event.split_id),
                order_id=str(event.original_order_id),
                error=str(exc),
            )
            return

        logger.info(
            "Published split event",
            event_type=event_type,
            split_id=str(event.split_id),
            order_id=str(event.original_order_id),
        )
