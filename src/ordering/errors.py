"""Conflict errors for the Ordering domain.

Validation failures use ``protean.exceptions.ValidationError`` and missing
records use ``protean.exceptions.ObjectNotFoundError``. The errors here cover
requests that were well-formed but can no longer be honoured because of the
current state of an order or split.
"""

from typing import Any


class ConflictError(Exception):
    """The target is in a state that does not allow the requested change.

    ``messages`` follows the same ``{field: [message, ...]}`` shape as
    Protean's ``ValidationError`` so API adapters can render both uniformly.
    """

    code = "ordering.conflict"
    retryable = False

    def __init__(self, messages: dict[str, list[str]], **context: Any) -> None:
        self.messages = messages
        self.context = context
        super().__init__(messages)


class ConcurrentModificationError(ConflictError):
    """Another writer changed the aggregate after it was loaded.

    The caller may reload and retry the request.
    """

    code = "ordering.concurrent_modification"
    retryable = True
