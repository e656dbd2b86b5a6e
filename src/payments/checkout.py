"""Checkout: turn a basket into a pending order and a hosted payment page.

The order is placed (stock reserved) before the gateway is asked for a
preference. When the gateway refuses, the order is cancelled and its stock
handed back, so nothing stays reserved for an order nobody can pay.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

import structlog

from ordering.cart.items import clear_cart
from ordering.order.creation import place_order
from ordering.order.listing import OrderDetails
from ordering.order.order import to_cents
from ordering.order.payment import cancel_unpaid_order, order_details, set_preference
from payments.gateway.port import GatewayError, PaymentGateway, PreferenceItem
from shared.config import get_settings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order_id: int
    preference_id: str
    init_point: str


def notification_url() -> str:
    return f"{get_settings().public_base_url}/mercadopago/webhook"


def preference_items(details: OrderDetails) -> list[PreferenceItem]:
    """Gateway line items for an order, with the coupon discount folded into unit prices."""
    factor = (Decimal(100) - Decimal(details.order.discount_percentage)) / Decimal(100)
    return [
        PreferenceItem(
            id=line.product_id,
            title=line.name,
            quantity=line.quantity,
            unit_price=to_cents(to_cents(line.price) * factor),
        )
        for line in details.lines
    ]


def create_checkout(
    gateway: PaymentGateway,
    user_id: str,
    payer_email: str,
    items: Iterable[tuple[str, int]],
    coupon_code: str | None = None,
) -> CheckoutResult:
    order = place_order(user_id, items, coupon_code=coupon_code)
    details = order_details(order.number)

    try:
        preference = gateway.create_preference(
            preference_items(details),
            payer_email=payer_email,
            external_reference=str(order.number),
            notification_url=notification_url(),
        )
    except GatewayError:
        cancel_unpaid_order(order.number)
        raise

    set_preference(order.number, preference.preference_id)
    clear_cart(user_id, [line.product_id for line in details.lines])

    logger.info(
        "Checkout created",
        order_id=order.number,
        user_id=str(user_id),
        preference_id=preference.preference_id,
        amount=f"{order.amount:.2f}",
    )
    return CheckoutResult(
        order_id=order.number,
        preference_id=preference.preference_id,
        init_point=preference.init_point,
    )
