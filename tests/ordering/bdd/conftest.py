"""Shared BDD fixtures and step definitions for order splitting."""

import json

import pytest
from ordering.errors import ConflictError
from ordering.order.creation import CreateOrder
from ordering.order.lifecycle import ConfirmOrder, ShipOrder
from ordering.order.order import Order
from ordering.split.split import OrderSplit
from ordering.split.splitting import SplitOrder
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def scenario_state():
    """Mutable bag shared by the steps of one scenario."""
    return {"order_id": None, "split_id": None, "error": None}


def _original(state):
    return current_domain.repository_for(Order).get(state["order_id"])


def _attempt(state, fn):
    try:
        return fn()
    except (ValidationError, ConflictError) as exc:
        state["error"] = exc
        return None


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('a pending order for {quantity:d} "{product_id}" at {price:f} with tax {tax:f}'))
def _(scenario_state, quantity, product_id, price, tax):
    scenario_state["order_id"] = current_domain.process(
        CreateOrder(
            customer_id="cust-bdd-001",
            address_id="addr-home",
            items=json.dumps([{"product_id": product_id, "quantity": quantity, "unit_price": price}]),
            shipping_cost=10.0,
            tax=tax,
        ),
        asynchronous=False,
    )


@given("the order has shipped")
def _(scenario_state):
    order_id = scenario_state["order_id"]
    current_domain.process(ConfirmOrder(order_id=order_id), asynchronous=False)
    current_domain.process(ShipOrder(order_id=order_id), asynchronous=False)


# ---------------------------------------------------------------------------
# Split steps (usable as Given or When)
# ---------------------------------------------------------------------------
def _split_off(state, quantity, address_id=None):
    order = _original(state)

    def _run():
        return current_domain.process(
            SplitOrder(
                order_id=state["order_id"],
                items=json.dumps([{"order_item_id": str(order.items[0].id), "quantity": quantity}]),
                reason="Deliver separately",
                new_address_id=address_id,
            ),
            asynchronous=False,
        )

    state["split_id"] = _attempt(state, _run)


@given(parsers.parse("{quantity:d} units are split off"))
@when(parsers.parse("{quantity:d} units are split off"))
def _(scenario_state, quantity):
    _split_off(scenario_state, quantity)


@when(parsers.parse('{quantity:d} units are split off to "{address_id}"'))
def _(scenario_state, quantity, address_id):
    _split_off(scenario_state, quantity, address_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse("the original order holds {quantity:d} units with subtotal {subtotal:f} and tax {tax:f}"))
def _(scenario_state, quantity, subtotal, tax):
    order = _original(scenario_state)
    assert order.items[0].quantity == quantity
    assert order.subtotal == subtotal
    assert order.tax == tax


@then("the split order is withdrawn")
def _(scenario_state):
    split = current_domain.repository_for(OrderSplit).get(scenario_state["split_id"])
    child = current_domain.repository_for(Order).get(str(split.split_order_id))
    assert child.is_deleted is True
    assert child.status == "Cancelled"


@then("the request is rejected as invalid")
def _(scenario_state):
    assert isinstance(scenario_state["error"], ValidationError)


@then("the request is rejected as a conflict")
def _(scenario_state):
    assert isinstance(scenario_state["error"], ConflictError)
