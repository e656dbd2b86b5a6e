"""Shipping transitions: ship and mark delivered."""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Integer
from protean.utils.globals import current_domain

from notifications.dispatch import Mailer
from ordering.domain import ordering
from ordering.order.emails import send_delivery_email
from ordering.order.listing import get_order
from ordering.order.order import Order, ShippingStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ShipOrder:
    order_number = Integer(required=True)


@ordering.command(part_of="Order")
class MarkDelivered:
    order_number = Integer(required=True)


@ordering.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(ShipOrder)
    def ship_order(self, command):
        order = get_order(command.order_number)
        order.ship()
        current_domain.repository_for(Order).add(order)

    @handle(MarkDelivered)
    def mark_delivered(self, command):
        """Returns True only for the call that actually moved the order.

        The transition is a conditional update, so of two concurrent calls
        only one sees a changed row.
        """
        order = get_order(command.order_number)
        if order.is_delivered:
            return False

        undelivered = [ShippingStatus.PENDING.value, ShippingStatus.SHIPPED.value]
        updated = (
            current_domain.repository_for(Order)
            ._dao.query.filter(id=order.id, shipping_status__in=undelivered)
            .update_all(shipping_status=ShippingStatus.DELIVERED.value)
        )
        return updated == 1


@dataclass(frozen=True)
class DeliveryResult:
    order: Order
    already_delivered: bool

    @property
    def message(self) -> str:
        if self.already_delivered:
            return "Order already delivered"
        return "Order marked as delivered"


def mark_delivered(mailer: Mailer, order_id: int) -> DeliveryResult:
    """Mark an order delivered and notify the buyer, exactly once."""
    delivered_now = current_domain.process(MarkDelivered(order_number=order_id), asynchronous=False)
    order = get_order(order_id)
    if not delivered_now:
        return DeliveryResult(order=order, already_delivered=True)

    send_delivery_email(mailer, order.number, order.user_id)
    logger.info("Order delivered", order_id=order.number, user_id=str(order.user_id))
    return DeliveryResult(order=order, already_delivered=False)


def ship_order(order_id: int) -> Order:
    current_domain.process(ShipOrder(order_number=order_id), asynchronous=False)
    logger.info("Order shipped", order_id=order_id)
    return get_order(order_id)
