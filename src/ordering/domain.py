"""Ordering bounded context — orders and order splitting.

Handles the order lifecycle (CQRS aggregates) and the split/consolidation
workflow that carves line items out of an order into an independent child
order and can merge them back.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
