"""Split event publisher port (abstract interface).

Downstream notification and analytics services consume split lifecycle
events through this contract. Publishing happens after the unit of work has
committed, so an adapter failure never affects the stored split.
"""

from abc import ABC, abstractmethod


class SplitEventPublisher(ABC):
    """Fire-and-forget sink for split lifecycle events."""

    @abstractmethod
    def publish(self, event_type: str, payload: dict) -> None:
        """Publish one event.

        Args:
            event_type: Event class name, e.g. ``"OrderSplitCreated"``.
            payload: JSON-serializable event body.
        """
        ...
