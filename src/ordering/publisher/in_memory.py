"""Configurable in-memory publisher for development and testing.

Records every published event and can be told to fail, which lets tests
prove that a broken downstream channel does not undo a committed split.
"""

from ordering.publisher.port import SplitEventPublisher


class InMemorySplitPublisher(SplitEventPublisher):
    def __init__(self) -> None:
        self.should_fail: bool = False
        self.failure_reason: str = "Publisher unavailable"
        self.published: list[tuple[str, dict]] = []

    def configure(self, should_fail: bool, failure_reason: str = "Publisher unavailable") -> None:
        self.should_fail = should_fail
        self.failure_reason = failure_reason

    def publish(self, event_type: str, payload: dict) -> None:
        if self.should_fail:
            raise ConnectionError(self.failure_reason)
        self.published.append((event_type, payload))

    def event_types(self) -> list[str]:
        return [event_type for event_type, _ in self.published]
