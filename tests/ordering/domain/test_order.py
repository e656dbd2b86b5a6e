"""Tests for the Order aggregate: amounts and status transitions."""

import uuid

import pytest
from ordering.order.order import Order, OrderStatus, ShippingStatus, compute_amount
from protean.exceptions import ValidationError


def _order(lines=None, discount=0):
    lines = lines or [(uuid.uuid4(), 2, 15.99), (uuid.uuid4(), 1, 9.99)]
    return Order.place(number=1, user_id=uuid.uuid4(), lines=lines, discount_percentage=discount)


class TestPlaceOrder:
    def test_new_order_is_pending_and_unpaid(self):
        order = _order()
        assert order.number == 1
        assert order.status == OrderStatus.PENDING.value
        assert order.shipping_status == ShippingStatus.PENDING.value
        assert order.is_paid is False
        assert len(order.lines) == 2

    def test_amount_is_sum_of_lines(self):
        assert _order().amount == 41.97

    def test_discount_applied_and_rounded_to_cents(self):
        assert _order(discount=10).amount == 37.77

    def test_half_cent_rounds_up(self):
        order = _order(lines=[(uuid.uuid4(), 1, 0.05)], discount=50)
        assert order.amount == 0.03

    def test_full_discount(self):
        assert _order(discount=100).amount == 0.0

    def test_amount_has_no_float_drift(self):
        lines = _order(lines=[(uuid.uuid4(), 3, 0.1)]).lines
        assert str(compute_amount(lines, 0)) == "0.30"

    def test_needs_lines(self):
        with pytest.raises(ValidationError):
            Order.place(number=1, user_id=uuid.uuid4(), lines=[])

    def test_rejects_non_positive_quantity(self):
        with pytest.raises(ValidationError):
            _order(lines=[(uuid.uuid4(), 0, 5.00)])

    def test_rejects_out_of_range_discount(self):
        with pytest.raises(ValidationError):
            _order(discount=101)


class TestRecordPayment:
    def test_approval_marks_paid(self):
        order = _order()
        assert order.record_payment(OrderStatus.PAID, payment_id="pay-1") is True
        assert order.status == OrderStatus.PAID.value
        assert order.is_paid is True
        assert order.mp_payment_id == "pay-1"

    def test_same_notification_twice_is_a_no_op(self):
        order = _order()
        order.record_payment(OrderStatus.PAID, payment_id="pay-1", merchant_order_id="mo-1")
        assert order.record_payment(OrderStatus.PAID, payment_id="pay-1", merchant_order_id="mo-1") is False

    def test_rejected_then_paid_with_another_card(self):
        order = _order()
        order.record_payment(OrderStatus.REJECTED, payment_id="pay-1")
        assert order.is_paid is False

        order.record_payment(OrderStatus.PAID, payment_id="pay-2")
        assert order.status == OrderStatus.PAID.value
        assert order.mp_payment_id == "pay-2"

    def test_pending_never_moves_status(self):
        order = _order()
        order.record_payment(OrderStatus.PAID, payment_id="pay-1")
        order.record_payment(OrderStatus.PENDING, payment_id="pay-1")
        assert order.status == OrderStatus.PAID.value

    def test_paid_is_terminal(self):
        order = _order()
        order.record_payment(OrderStatus.PAID, payment_id="pay-1")
        with pytest.raises(ValidationError) as exc:
            order.record_payment(OrderStatus.REJECTED, payment_id="pay-1")
        assert exc.value.messages["status"] == ["Cannot move order 1 from paid to rejected"]


class TestShipping:
    def test_ship_once(self):
        order = _order()
        order.ship()
        assert order.shipping_status == ShippingStatus.SHIPPED.value
        with pytest.raises(ValidationError):
            order.ship()

    def test_is_delivered(self):
        order = _order()
        assert not order.is_delivered
        order.shipping_status = ShippingStatus.DELIVERED.value
        assert order.is_delivered
