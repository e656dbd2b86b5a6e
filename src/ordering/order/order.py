"""Order aggregate: the purchase header and its line items.

Payment status (driven by the payment gateway) and shipping status (driven by
the buyer confirming delivery, or an admin) move independently.

Payment state machine:
    PENDING → PAID | REJECTED | CANCELLED
    REJECTED → PAID | CANCELLED    (the buyer retried with another card)
    PAID, CANCELLED                (terminal)

Line prices are copied from the catalogue when the order is placed and are
never rewritten afterwards. Buyers and the payment gateway know an order by
its sequential ``number``.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String
from protean.utils.globals import current_domain
from sqlalchemy import literal_column

from ordering.domain import ordering

CENTS = Decimal("0.01")


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class ShippingStatus(Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.REJECTED, OrderStatus.CANCELLED},
    OrderStatus.REJECTED: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: set(),
    OrderStatus.CANCELLED: set(),
}


def to_cents(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@ordering.entity(part_of="Order")
class OrderLine:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    price = Float(required=True)

    @property
    def subtotal(self) -> Decimal:
        return to_cents(self.price) * self.quantity


@ordering.aggregate(schema_name="orders")
class Order:
    number = Integer(required=True, unique=True)
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    shipping_status = String(choices=ShippingStatus, default=ShippingStatus.PENDING.value)
    is_paid = Boolean(default=False)
    lines = HasMany(OrderLine)
    amount = Float(required=True)
    discount_percentage = Integer(default=0)
    coupon_code = String(max_length=40)
    mp_preference_id = String(max_length=255)
    mp_order_id = String(max_length=255)
    mp_payment_id = String(max_length=255)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def place(
        cls,
        number: int,
        user_id: str,
        lines: list[tuple[str, int, float]],
        discount_percentage: int = 0,
        coupon_code: str | None = None,
    ) -> "Order":
        """Build a pending order from ``(product_id, quantity, unit_price)`` tuples."""
        if not lines:
            raise ValidationError({"products": ["An order needs at least one product"]})
        if not 0 <= discount_percentage <= 100:
            raise ValidationError({"discountPercentage": ["Discount must be between 0 and 100 percent"]})

        order_lines = []
        for product_id, quantity, price in lines:
            if quantity < 1:
                raise ValidationError({"quantity": ["Quantity must be at least 1"]})
            order_lines.append(OrderLine(product_id=str(product_id), quantity=quantity, price=float(price)))

        order = cls(
            number=number,
            user_id=str(user_id),
            status=OrderStatus.PENDING.value,
            shipping_status=ShippingStatus.PENDING.value,
            is_paid=False,
            amount=float(compute_amount(order_lines, discount_percentage)),
            discount_percentage=discount_percentage,
            coupon_code=coupon_code,
        )
        for line in order_lines:
            order.add_lines(line)
        return order

    @property
    def is_delivered(self) -> bool:
        return self.shipping_status == ShippingStatus.DELIVERED.value

    def record_payment(
        self,
        status: OrderStatus,
        payment_id: str | None = None,
        merchant_order_id: str | None = None,
    ) -> bool:
        """Apply a payment status reported by the gateway.

        Returns True when the order changed. Repeated notifications for the
        state the order is already in are no-ops.
        """
        status = OrderStatus(status)
        current = OrderStatus(self.status)
        moves = status not in (current, OrderStatus.PENDING)
        if moves and status not in _VALID_TRANSITIONS[current]:
            raise ValidationError(
                {"status": [f"Cannot move order {self.number} from {current.value} to {status.value}"]}
            )

        changed = moves
        if payment_id and self.mp_payment_id != payment_id and status != OrderStatus.PENDING:
            self.mp_payment_id = payment_id
            changed = True
        if merchant_order_id and self.mp_order_id != merchant_order_id:
            self.mp_order_id = merchant_order_id
            changed = True

        if moves:
            self.status = status.value
            self.is_paid = status == OrderStatus.PAID
        return changed

    def ship(self) -> None:
        if self.shipping_status != ShippingStatus.PENDING.value:
            raise ValidationError({"shippingStatus": [f"Order is already {self.shipping_status}"]})
        self.shipping_status = ShippingStatus.SHIPPED.value


def compute_amount(lines, discount_percentage: int) -> Decimal:
    subtotal = sum((line.subtotal for line in lines), Decimal("0.00"))
    discounted = subtotal * (Decimal(100) - Decimal(discount_percentage)) / Decimal(100)
    return discounted.quantize(CENTS, rounding=ROUND_HALF_UP)


@ordering.aggregate(schema_name="order_counters")
class OrderCounter:
    """Last order number handed out. Incremented in place so concurrent placements never share a number."""

    name = String(required=True, max_length=40, unique=True)
    value = Integer(default=0)


ORDER_NUMBERS = "orders"


def next_order_number() -> int:
    """Allocate the next order number inside the current unit of work."""
    dao = current_domain.repository_for(OrderCounter)._dao
    bumped = dao.query.filter(name=ORDER_NUMBERS).update_all(value=literal_column("value") + 1)
    if bumped == 0:
        current_domain.repository_for(OrderCounter).add(OrderCounter(name=ORDER_NUMBERS, value=1))
        return 1
    return dao.query.filter(name=ORDER_NUMBERS).all().first.value
