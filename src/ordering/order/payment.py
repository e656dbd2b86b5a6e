"""Applying payment outcomes reported by the gateway to orders.

These functions are called from the payments context, so each one enters
the ordering domain context itself.
"""

import structlog
from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from catalogue.product.stock import release_stock
from notifications.dispatch import Mailer
from ordering.domain import ordering
from ordering.order.emails import send_order_details_email
from ordering.order.listing import OrderDetails, get_order, get_order_details
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class RecordPreference:
    order_number = Integer(required=True)
    preference_id = String(required=True, max_length=255)


@ordering.command(part_of="Order")
class RecordPayment:
    order_number = Integer(required=True)
    status = String(required=True, choices=OrderStatus)
    payment_id = String(max_length=255)
    merchant_order_id = String(max_length=255)


@ordering.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(RecordPreference)
    def record_preference(self, command):
        order = get_order(command.order_number)
        order.mp_preference_id = command.preference_id
        current_domain.repository_for(Order).add(order)

    @handle(RecordPayment)
    def record_payment(self, command):
        """Returns ``{"changed", "paid_now"}``.

        A status move is claimed with a conditional update on the previous
        status, so of two concurrent notifications only one moves the order
        and only that one reports ``paid_now``.
        """
        order = get_order(command.order_number)
        previous = order.status

        changed = order.record_payment(
            command.status,
            payment_id=command.payment_id,
            merchant_order_id=command.merchant_order_id,
        )
        if not changed:
            return {"changed": False, "paid_now": False}

        moved = order.status != previous
        if moved:
            claimed = (
                current_domain.repository_for(Order)
                ._dao.query.filter(id=order.id, status=previous)
                .update_all(status=order.status, is_paid=order.is_paid)
            )
            if claimed != 1:
                return {"changed": False, "paid_now": False}

        current_domain.repository_for(Order).add(order)
        return {"changed": True, "paid_now": moved and order.status == OrderStatus.PAID.value}


def order_details(order_id: int) -> OrderDetails:
    with ordering.domain_context():
        return get_order_details(order_id)


def find_order(order_id: int) -> Order | None:
    with ordering.domain_context():
        return current_domain.repository_for(Order)._dao.query.filter(number=int(order_id)).all().first


def set_preference(order_id: int, preference_id: str) -> None:
    with ordering.domain_context():
        current_domain.process(
            RecordPreference(order_number=order_id, preference_id=preference_id), asynchronous=False
        )


def apply_payment_update(
    mailer: Mailer,
    order_id: int,
    status: OrderStatus,
    payment_id: str | None = None,
    merchant_order_id: str | None = None,
) -> bool:
    """Record a payment status on an order. Safe to call repeatedly.

    The order-details email is sent only on the transition into PAID, so a
    redelivered notification never sends it twice.
    """
    status = OrderStatus(status)
    with ordering.domain_context():
        outcome = current_domain.process(
            RecordPayment(
                order_number=order_id,
                status=status.value,
                payment_id=payment_id,
                merchant_order_id=merchant_order_id,
            ),
            asynchronous=False,
        )
        if not outcome["changed"]:
            logger.info("Payment update already applied", order_id=order_id, status=status.value)
            return False

        if outcome["paid_now"]:
            send_order_details_email(mailer, order_id)

    logger.info("Payment update applied", order_id=order_id, status=status.value, payment_id=payment_id)
    return True


def cancel_unpaid_order(order_id: int) -> None:
    """Cancel an order nobody can pay for and hand its stock back."""
    with ordering.domain_context():
        current_domain.process(
            RecordPayment(order_number=order_id, status=OrderStatus.CANCELLED.value), asynchronous=False
        )
        quantities = {str(line.product_id): line.quantity for line in get_order(order_id).lines}
    release_stock(quantities)
    logger.info("Unpaid order cancelled", order_id=order_id)
