"""Order emails: the order-details summary and its signed delivery link."""

import hashlib
import hmac

from identity.user.directory import find_contact
from notifications.dispatch import Mailer
from notifications.types import NotificationType
from ordering.order.listing import OrderDetails, get_order_details
from shared.config import get_settings


def delivery_token(order_id: int) -> str:
    """Token proving a delivery link came from an order email."""
    secret = get_settings().jwt_secret.encode("utf-8")
    return hmac.new(secret, f"deliver:{order_id}".encode(), hashlib.sha256).hexdigest()[:32]


def is_valid_delivery_token(order_id: int, token: str | None) -> bool:
    if not token:
        return False
    # compare_digest only accepts ASCII str, so compare the encoded bytes
    return hmac.compare_digest(delivery_token(order_id).encode("utf-8"), token.encode("utf-8"))


def delivery_url(order_id: int) -> str:
    base = get_settings().public_base_url
    return f"{base}/orders/deliver/{order_id}?token={delivery_token(order_id)}&redirect=true"


def order_details_context(details: OrderDetails) -> dict:
    order = details.order
    return {
        "order_id": order.number,
        "amount": f"{order.amount:.2f}",
        "discount_percentage": order.discount_percentage,
        "lines": [
            {"name": line.name, "quantity": line.quantity, "price": f"{line.price:.2f}"} for line in details.lines
        ],
        "delivery_url": delivery_url(order.number) if details.has_physical_products else None,
    }


def send_order_details_email(mailer: Mailer, order_id: int) -> bool:
    details = get_order_details(order_id)
    contact = find_contact(details.order.user_id)
    if contact is None:
        return False
    return mailer.send(NotificationType.ORDER_DETAILS, contact.email, order_details_context(details))


def send_delivery_email(mailer: Mailer, order_id: int, user_id: str) -> bool:
    contact = find_contact(user_id)
    if contact is None:
        return False
    return mailer.send(NotificationType.DELIVERY_CONFIRMATION, contact.email, {"order_id": order_id})
