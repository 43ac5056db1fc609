"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands and the read snapshots in ``ordering.split.queries``.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderItemSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)
    unit_price: float | None = Field(default=None, ge=0)


class CreateOrderRequest(BaseModel):
    customer_id: str
    address_id: str
    items: list[CreateOrderItemSchema]
    shipping_cost: float = Field(default=0.0, ge=0)
    tax: float = Field(default=0.0, ge=0)
    currency: str = "USD"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "address_id": "addr-001",
                    "items": [{"product_id": "prod-001", "quantity": 10, "unit_price": 50.0}],
                    "shipping_cost": 10.0,
                    "tax": 50.0,
                    "currency": "USD",
                }
            ]
        }
    }


class CancelOrderRequest(BaseModel):
    reason: str


# ---------------------------------------------------------------------------
# Split Request Schemas
# ---------------------------------------------------------------------------
class SplitItemSchema(BaseModel):
    order_item_id: str
    # Range checks happen in the domain so they surface as 400s
    quantity: int


class SplitOrderRequest(BaseModel):
    items: list[SplitItemSchema]
    reason: str
    new_address_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"order_item_id": "item-001", "quantity": 4}],
                    "reason": "Ship part of the order to the office",
                    "new_address_id": "addr-002",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderLineResponse(BaseModel):
    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float


class OrderResponse(BaseModel):
    order_id: str
    order_number: str | None = None
    customer_id: str
    status: str
    address_id: str
    shipping_address: dict
    items: list[OrderLineResponse]
    subtotal: float
    tax: float
    shipping_cost: float
    total: float
    currency: str
    split_from_order_id: str | None = None
    row_version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SplitItemResponse(BaseModel):
    original_order_item_id: str
    split_order_item_id: str
    product_id: str
    unit_price: float
    quantity: int


class SplitResponse(BaseModel):
    split_id: str
    status: str
    reason: str
    new_address_id: str | None = None
    moved_subtotal: float
    moved_tax: float
    items: list[SplitItemResponse]
    original_order: OrderResponse
    split_order: OrderResponse
    created_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
