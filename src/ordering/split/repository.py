"""Repository for the OrderSplit aggregate."""

from ordering.domain import ordering
from ordering.split.split import OrderSplit


@ordering.repository(part_of=OrderSplit)
class OrderSplitRepository:
    """Split lookups. Soft-deleted splits are invisible to every finder."""

    def find_active_by_id(self, split_id) -> OrderSplit | None:
        results = self._dao.query.filter(id=str(split_id), is_deleted=False).all().items
        return results[0] if results else None

    def find_by_original_order(self, order_id) -> list[OrderSplit]:
        """Splits that carved items out of ``order_id``, oldest first."""
        return (
            self._dao.query.filter(original_order_id=str(order_id), is_deleted=False)
            .order_by("created_at")
            .all()
            .items
        )

    def find_by_split_order(self, child_order_id) -> list[OrderSplit]:
        """Splits that produced ``child_order_id``."""
        return (
            self._dao.query.filter(split_order_id=str(child_order_id), is_deleted=False)
            .order_by("created_at")
            .all()
            .items
        )
