"""Payment notifications from Mercado Pago.

Notifications only say *which* payment changed. The authoritative status is
always fetched back from the gateway, and the order is found through the
external reference set at checkout.
"""

from enum import Enum

import structlog
from protean.exceptions import ValidationError

from notifications.dispatch import Mailer
from ordering.order.order import OrderStatus
from ordering.order.payment import apply_payment_update, find_order
from payments.gateway.port import PaymentGateway

logger = structlog.get_logger(__name__)

PAYMENT_TOPICS = {"payment"}

_STATUS_MAP = {
    "approved": OrderStatus.PAID,
    "rejected": OrderStatus.REJECTED,
    "cancelled": OrderStatus.CANCELLED,
    "refunded": OrderStatus.CANCELLED,
    "charged_back": OrderStatus.CANCELLED,
}


class WebhookOutcome(Enum):
    IGNORED = "ignored"
    REJECTED = "rejected"
    UNKNOWN_ORDER = "unknown_order"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def map_payment_status(status: str) -> OrderStatus:
    """Gateway payment status to order status. Anything unsettled stays pending."""
    return _STATUS_MAP.get((status or "").lower(), OrderStatus.PENDING)


def process_webhook(
    gateway: PaymentGateway,
    mailer: Mailer,
    topic: str | None,
    data_id: str | None,
    request_id: str | None = None,
    signature: str | None = None,
) -> WebhookOutcome:
    if topic not in PAYMENT_TOPICS or not data_id:
        logger.info("Webhook ignored", topic=topic, data_id=data_id)
        return WebhookOutcome.IGNORED

    if not gateway.verify_webhook_signature(data_id, request_id, signature):
        logger.warning("Webhook signature rejected", data_id=data_id, request_id=request_id)
        return WebhookOutcome.REJECTED

    payment = gateway.get_payment(data_id)

    reference = (payment.external_reference or "").strip()
    order = find_order(int(reference)) if reference.isdigit() else None
    if order is None:
        logger.warning("Webhook for unknown order", payment_id=payment.payment_id, reference=reference)
        return WebhookOutcome.UNKNOWN_ORDER

    status = map_payment_status(payment.status)
    try:
        changed = apply_payment_update(
            mailer,
            order.number,
            status,
            payment_id=payment.payment_id,
            merchant_order_id=payment.merchant_order_id,
        )
    except ValidationError as exc:
        logger.warning(
            "Payment status not applicable to order",
            order_id=order.number,
            order_status=order.status,
            payment_status=payment.status,
            error=str(exc.messages),
        )
        return WebhookOutcome.UNCHANGED

    return WebhookOutcome.UPDATED if changed else WebhookOutcome.UNCHANGED
