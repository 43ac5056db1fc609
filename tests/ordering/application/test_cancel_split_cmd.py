"""Application tests for CancelSplit — exact reversal and its preconditions."""

import pytest
from ordering.errors import ConflictError
from ordering.order.lifecycle import ConfirmOrder, ShipOrder
from ordering.order.order import Order, OrderStatus
from ordering.split.cancellation import CancelSplit, cancel_split
from ordering.split.completion import complete_split
from ordering.split.split import OrderSplit, SplitStatus
from ordering.split.splitting import split_order
from protean import current_domain


def _snapshot(order_id):
    order = current_domain.repository_for(Order).get(order_id)
    return (
        sorted((str(i.id), i.quantity, i.total_price) for i in order.items),
        order.subtotal,
        order.tax,
        order.shipping_cost,
        order.total,
    )


def _split_all_products(order_id, quantities):
    order = current_domain.repository_for(Order).get(order_id)
    items = [
        {"order_item_id": str(item.id), "quantity": quantities[str(item.product_id)]}
        for item in order.items
        if str(item.product_id) in quantities
    ]
    return split_order(order_id, items, "Separate delivery")


class TestCancelSplit:
    def test_split_then_cancel_restores_original(self, place_order):
        order_id = place_order(
            items=[
                {"product_id": "prod-widget", "quantity": 10, "unit_price": 50.0},
                {"product_id": "prod-gizmo", "quantity": 3, "unit_price": 7.5},
            ],
            tax=41.27,
        )
        before = _snapshot(order_id)

        result = _split_all_products(order_id, {"prod-widget": 4, "prod-gizmo": 1})
        assert _snapshot(order_id) != before

        assert cancel_split(result.split_id) is True
        assert _snapshot(order_id) == before

    def test_reference_scenario_restores_totals(self, place_order):
        order_id = place_order()
        result = _split_all_products(order_id, {"prod-widget": 4})
        cancel_split(result.split_id)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].quantity == 10
        assert order.subtotal == 500.0
        assert order.tax == 50.0

    def test_child_order_is_withdrawn(self, place_order):
        order_id = place_order()
        result = _split_all_products(order_id, {"prod-widget": 4})
        cancel_split(result.split_id)

        child = current_domain.repository_for(Order).get(result.split_order.order_id)
        assert child.is_deleted is True
        assert child.status == OrderStatus.CANCELLED.value

    def test_split_is_cancelled_and_soft_deleted(self, place_order):
        order_id = place_order()
        result = _split_all_products(order_id, {"prod-widget": 4})
        cancel_split(result.split_id)

        split = current_domain.repository_for(OrderSplit).get(result.split_id)
        assert split.status == SplitStatus.CANCELLED.value
        assert split.is_deleted is True
        assert split.cancelled_at is not None

    def test_unknown_split_returns_false(self):
        assert current_domain.process(CancelSplit(split_id="split-missing"), asynchronous=False) is False

    def test_cancelling_twice_returns_false(self, place_order):
        result = _split_all_products(place_order(), {"prod-widget": 4})
        assert cancel_split(result.split_id) is True
        assert cancel_split(result.split_id) is False

    def test_child_no_longer_pending_is_a_conflict(self, place_order):
        order_id = place_order()
        result = _split_all_products(order_id, {"prod-widget": 4})
        current_domain.process(ConfirmOrder(order_id=result.split_order.order_id), asynchronous=False)
        before = _snapshot(order_id)

        with pytest.raises(ConflictError):
            cancel_split(result.split_id)

        assert _snapshot(order_id) == before
        split = current_domain.repository_for(OrderSplit).get(result.split_id)
        assert split.status == SplitStatus.ACTIVE.value
        child = current_domain.repository_for(Order).get(result.split_order.order_id)
        assert child.is_deleted is False

    def test_original_no_longer_splittable_is_a_conflict(self, place_order):
        order_id = place_order()
        result = _split_all_products(order_id, {"prod-widget": 4})
        current_domain.process(ConfirmOrder(order_id=order_id), asynchronous=False)
        current_domain.process(ShipOrder(order_id=order_id), asynchronous=False)
        before = _snapshot(order_id)

        with pytest.raises(ConflictError):
            cancel_split(result.split_id)

        assert _snapshot(order_id) == before
        split = current_domain.repository_for(OrderSplit).get(result.split_id)
        assert split.status == SplitStatus.ACTIVE.value
        child = current_domain.repository_for(Order).get(result.split_order.order_id)
        assert child.is_deleted is False

    def test_completed_split_is_a_conflict(self, place_order):
        order_id = place_order()
        result = _split_all_products(order_id, {"prod-widget": 4})
        complete_split(result.split_id)

        with pytest.raises(ConflictError):
            cancel_split(result.split_id)

        assert current_domain.repository_for(Order).get(order_id).items[0].quantity == 6

    def test_cancel_one_of_two_splits(self, place_order):
        order_id = place_order()
        first = _split_all_products(order_id, {"prod-widget": 2})
        _split_all_products(order_id, {"prod-widget": 3})

        cancel_split(first.split_id)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].quantity == 7
