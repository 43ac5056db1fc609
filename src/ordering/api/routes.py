"""FastAPI routes for the Ordering domain — orders and order splits."""

import json

from fastapi import APIRouter
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    CancelOrderRequest,
    CreateOrderRequest,
    OrderIdResponse,
    OrderResponse,
    SplitOrderRequest,
    SplitResponse,
    StatusResponse,
)
from ordering.order.creation import CreateOrder
from ordering.order.lifecycle import CancelOrder, ConfirmOrder, DeliverOrder, ShipOrder
from ordering.split.cancellation import CancelSplit
from ordering.split.completion import CompleteSplit
from ordering.split.queries import (
    get_order,
    get_split,
    list_splits_for_child_order,
    list_splits_for_order,
)
from ordering.split.splitting import SplitOrder


def _split_not_found(split_id: str) -> ObjectNotFoundError:
    return ObjectNotFoundError({"split_id": [f"Split {split_id} does not exist"]})


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def create_order(body: CreateOrderRequest) -> OrderIdResponse:
    command = CreateOrder(
        customer_id=body.customer_id,
        address_id=body.address_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_cost=body.shipping_cost,
        tax=body.tax,
        currency=body.currency,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def read_order(order_id: str) -> OrderResponse:
    order = get_order(order_id)
    if order is None:
        raise ObjectNotFoundError({"order_id": [f"Order {order_id} does not exist"]})
    return OrderResponse.model_validate(order, from_attributes=True)


@order_router.put("/{order_id}/confirm", response_model=StatusResponse)
async def confirm_order(order_id: str) -> StatusResponse:
    current_domain.process(ConfirmOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/ship", response_model=StatusResponse)
async def ship_order(order_id: str) -> StatusResponse:
    current_domain.process(ShipOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/deliver", response_model=StatusResponse)
async def deliver_order(order_id: str) -> StatusResponse:
    current_domain.process(DeliverOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id, reason=body.reason), asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/splits", status_code=201, response_model=SplitResponse)
async def split_order(order_id: str, body: SplitOrderRequest) -> SplitResponse:
    command = SplitOrder(
        order_id=order_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        reason=body.reason,
        new_address_id=body.new_address_id,
    )
    split_id = current_domain.process(command, asynchronous=False)
    return SplitResponse.model_validate(get_split(split_id), from_attributes=True)


@order_router.get("/{order_id}/splits", response_model=list[SplitResponse])
async def read_order_splits(order_id: str) -> list[SplitResponse]:
    return [SplitResponse.model_validate(split, from_attributes=True) for split in list_splits_for_order(order_id)]


@order_router.get("/{order_id}/parent-splits", response_model=list[SplitResponse])
async def read_parent_splits(order_id: str) -> list[SplitResponse]:
    return [
        SplitResponse.model_validate(split, from_attributes=True) for split in list_splits_for_child_order(order_id)
    ]


# ---------------------------------------------------------------------------
# Split Router
# ---------------------------------------------------------------------------
split_router = APIRouter(prefix="/splits", tags=["splits"])


@split_router.get("/{split_id}", response_model=SplitResponse)
async def read_split(split_id: str) -> SplitResponse:
    split = get_split(split_id)
    if split is None:
        raise _split_not_found(split_id)
    return SplitResponse.model_validate(split, from_attributes=True)


@split_router.put("/{split_id}/cancel", response_model=StatusResponse)
async def cancel_split(split_id: str) -> StatusResponse:
    if not current_domain.process(CancelSplit(split_id=split_id), asynchronous=False):
        raise _split_not_found(split_id)
    return StatusResponse()


@split_router.put("/{split_id}/complete", response_model=StatusResponse)
async def complete_split(split_id: str) -> StatusResponse:
    if not current_domain.process(CompleteSplit(split_id=split_id), asynchronous=False):
        raise _split_not_found(split_id)
    return StatusResponse()
