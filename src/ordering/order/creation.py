"""Order creation — command and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.lookups import get_address_book, get_catalog
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CreateOrder:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{"product_id", "quantity", "unit_price"?}]
    shipping_cost = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    currency = String(max_length=3, default="USD")


@ordering.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        requested = json.loads(command.items) if isinstance(command.items, str) else command.items

        address = get_address_book().get_address(str(command.address_id))
        if address is None:
            raise ObjectNotFoundError({"address_id": [f"Address {command.address_id} does not exist"]})

        catalog = get_catalog()
        items_data = []
        for line in requested:
            quantity = int(line.get("quantity", 0))
            if quantity < 1:
                raise ValidationError({"quantity": ["Quantity must be at least 1"]})

            product = catalog.get_product(str(line["product_id"]))
            if product is None:
                raise ObjectNotFoundError({"product_id": [f"Product {line['product_id']} does not exist"]})

            unit_price = line.get("unit_price")
            items_data.append(
                {
                    "product_id": product.product_id,
                    "product_name": product.name,
                    "quantity": quantity,
                    "unit_price": product.price if unit_price is None else unit_price,
                }
            )

        order = Order.create(
            customer_id=command.customer_id,
            address_id=command.address_id,
            shipping_address=address.as_dict(),
            items_data=items_data,
            shipping_cost=command.shipping_cost,
            tax=command.tax,
            currency=command.currency,
        )
        current_domain.repository_for(Order).add_checked(order)

        logger.info(
            "Order created",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            item_count=len(items_data),
            total=order.total,
        )
        return str(order.id)
