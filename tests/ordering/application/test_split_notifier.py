"""Split notifier — events reach the publisher after commit, failures stay contained."""

import pytest
from ordering.errors import ConflictError
from ordering.order.lifecycle import CancelOrder, ConfirmOrder
from ordering.order.order import Order
from ordering.publisher import get_publisher, reset_publisher
from ordering.publisher.null import NullSplitPublisher
from ordering.split.cancellation import cancel_split
from ordering.split.completion import complete_split
from ordering.split.queries import get_split
from ordering.split.split import OrderSplit
from ordering.split.splitting import split_order
from protean import current_domain
from protean.exceptions import ValidationError


def _split(order_id, quantity=4):
    item_id = str(current_domain.repository_for(Order).get(order_id).items[0].id)
    return split_order(order_id, [{"order_item_id": item_id, "quantity": quantity}], "Separate delivery")


class TestSplitNotifier:
    def test_split_created_is_published(self, place_order, publisher):
        result = _split(place_order())
        assert publisher.event_types() == ["OrderSplitCreated"]
        _, payload = publisher.published[0]
        assert payload["split_id"] == result.split_id
        assert payload["moved_tax"] == 20.0

    def test_cancellation_is_published(self, place_order, publisher):
        result = _split(place_order())
        cancel_split(result.split_id)
        assert publisher.event_types() == ["OrderSplitCreated", "OrderSplitCancelled"]

    def test_completion_is_published(self, place_order, publisher):
        result = _split(place_order())
        complete_split(result.split_id)
        assert publisher.event_types()[-1] == "OrderSplitCompleted"

    def test_publisher_failure_does_not_undo_the_split(self, place_order, publisher):
        publisher.configure(should_fail=True, failure_reason="Broker down")
        order_id = place_order()

        result = _split(order_id)

        assert publisher.published == []
        assert get_split(result.split_id) is not None
        assert current_domain.repository_for(Order).get(order_id).items[0].quantity == 6

    def test_null_publisher_is_the_default(self):
        reset_publisher()
        assert isinstance(get_publisher(), NullSplitPublisher)


class TestRejectedSplitsPublishNothing:
    def test_conflict_publishes_nothing(self, place_order, publisher):
        order_id = place_order()
        current_domain.process(CancelOrder(order_id=order_id, reason="Changed mind"), asynchronous=False)
        with pytest.raises(ConflictError):
            _split(order_id)
        assert publisher.published == []

    def test_validation_failure_publishes_nothing(self, place_order, publisher):
        with pytest.raises(ValidationError):
            _split(place_order(), quantity=11)
        assert publisher.published == []

    def test_storage_failure_publishes_nothing(self, place_order, publisher, monkeypatch):
        order_id = place_order()

        def _storage_down(self, split):
            raise RuntimeError("Split storage unavailable")

        monkeypatch.setattr(type(current_domain.repository_for(OrderSplit)), "add", _storage_down)

        with pytest.raises(RuntimeError):
            _split(order_id)
        assert publisher.published == []

    def test_rejected_cancellation_publishes_nothing_more(self, place_order, publisher):
        result = _split(place_order())
        current_domain.process(ConfirmOrder(order_id=result.split_order.order_id), asynchronous=False)
        with pytest.raises(ConflictError):
            cancel_split(result.split_id)
        assert publisher.event_types() == ["OrderSplitCreated"]
