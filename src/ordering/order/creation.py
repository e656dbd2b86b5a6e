"""Placing orders.

Stock is reserved in the catalogue first, then the order is recorded. If the
order cannot be recorded the reservation is handed back, so a failed
placement never leaves stock taken.
"""

import json
from collections.abc import Iterable

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.product.stock import release_stock, reserve_stock
from ordering.coupon.management import validate_coupon_code
from ordering.domain import ordering
from ordering.order.listing import get_order
from ordering.order.order import Order, next_order_number

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_id, quantity, price}
    discount_percentage = Integer(default=0)
    coupon_code = String(max_length=40)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            number=next_order_number(),
            user_id=command.user_id,
            lines=[(line["product_id"], line["quantity"], line["price"]) for line in json.loads(command.lines)],
            discount_percentage=command.discount_percentage or 0,
            coupon_code=command.coupon_code,
        )
        current_domain.repository_for(Order).add(order)
        return order.number


def combine_quantities(items: Iterable[tuple[str, int]]) -> dict[str, int]:
    """Sum quantities per product, keeping first-seen order."""
    combined: dict[str, int] = {}
    for product_id, quantity in items:
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        combined[str(product_id)] = combined.get(str(product_id), 0) + quantity
    return combined


def place_order(user_id: str, items: Iterable[tuple[str, int]], coupon_code: str | None = None) -> Order:
    """Create a pending order with catalogue prices and reserved stock.

    Prices always come from the catalogue; whatever the client believes an
    item costs is ignored.
    """
    quantities = combine_quantities(items)
    if not quantities:
        raise ValidationError({"products": ["An order needs at least one product"]})

    discount = 0
    if coupon_code:
        coupon = validate_coupon_code(coupon_code)
        discount = coupon.discount_percentage
        coupon_code = coupon.code

    reserved = reserve_stock(quantities)
    lines = json.dumps(
        [{"product_id": line.product_id, "quantity": line.quantity, "price": line.price} for line in reserved]
    )
    try:
        number = current_domain.process(
            PlaceOrder(user_id=str(user_id), lines=lines, discount_percentage=discount, coupon_code=coupon_code),
            asynchronous=False,
        )
    except Exception:
        release_stock(quantities)
        raise

    order = get_order(number)
    logger.info(
        "Order placed",
        order_id=order.number,
        user_id=str(user_id),
        amount=f"{order.amount:.2f}",
        lines=len(reserved),
        coupon_code=coupon_code,
    )
    return order
