"""Split event publisher factory.

Provides get_publisher() / set_publisher() to swap implementations:
- NullSplitPublisher when nothing downstream is wired (default)
- InMemorySplitPublisher for development and tests
"""

from ordering.publisher.null import NullSplitPublisher
from ordering.publisher.port import SplitEventPublisher

_current_publisher: SplitEventPublisher | None = None


def get_publisher() -> SplitEventPublisher:
    """Return the current publisher. Defaults to NullSplitPublisher."""
    global _current_publisher
    if _current_publisher is None:
        _current_publisher = NullSplitPublisher()
    return _current_publisher


def set_publisher(publisher: SplitEventPublisher) -> None:
    """Override the active publisher (useful for tests)."""
    global _current_publisher
    _current_publisher = publisher


def reset_publisher() -> None:
    """Reset to the default publisher."""
    global _current_publisher
    _current_publisher = None
