"""Application tests for coupon management."""

import uuid
from datetime import date, timedelta

import pytest
from ordering.coupon.management import (
    create_coupon,
    delete_coupon,
    get_coupon,
    get_coupon_by_code,
    list_coupons,
    send_coupons,
    set_coupon_status,
    toggle_coupon_status,
    update_discount,
    validate_coupon,
    validate_coupon_code,
)
from protean.exceptions import ObjectNotFoundError, ValidationError

NEXT_MONTH = date.today() + timedelta(days=30)


class TestCreateCoupon:
    def test_create_with_generated_code(self):
        coupon = create_coupon(20, NEXT_MONTH)

        stored = get_coupon_by_code(coupon.code.lower())
        assert stored.id == coupon.id
        assert stored.is_active is True

    def test_past_expiration_rejected(self):
        with pytest.raises(ValidationError) as exc:
            create_coupon(20, date.today() - timedelta(days=2))
        assert exc.value.messages["expirationDate"] == ["Expiration date cannot be in the past"]

    def test_duplicate_code_rejected(self):
        create_coupon(20, NEXT_MONTH, code="SAVE20")
        with pytest.raises(ValidationError) as exc:
            create_coupon(30, NEXT_MONTH, code="save20")
        assert exc.value.messages["code"] == ["Coupon code SAVE20 already exists"]


class TestValidateCoupon:
    def test_valid(self, create_coupon):
        coupon = create_coupon()
        assert validate_coupon(coupon.id).id == coupon.id

    def test_unknown(self):
        with pytest.raises(ObjectNotFoundError):
            validate_coupon(str(uuid.uuid4()))

    def test_expired(self, create_coupon):
        coupon = create_coupon(expiration_date=date.today() - timedelta(days=2))
        with pytest.raises(ValidationError) as exc:
            validate_coupon_code(coupon.code)
        assert exc.value.messages["coupon"] == ["Coupon is expired"]

    def test_inactive(self, create_coupon):
        coupon = create_coupon(is_active=False)
        with pytest.raises(ValidationError) as exc:
            validate_coupon(coupon.id)
        assert exc.value.messages["coupon"] == ["Coupon is inactive"]


class TestCouponMaintenance:
    def test_toggle_and_discount(self, create_coupon):
        coupon = create_coupon(discount_percentage=10)
        toggle_coupon_status(coupon.id)
        update_discount(coupon.id, 35)

        stored = get_coupon(coupon.id)
        assert stored.is_active is False
        assert stored.discount_percentage == 35

    def test_set_status_is_idempotent(self, create_coupon):
        coupon = create_coupon()
        set_coupon_status(coupon.id, True)
        assert get_coupon(coupon.id).is_active is True

    def test_invalid_discount(self, create_coupon):
        coupon = create_coupon()
        with pytest.raises(ValidationError):
            update_discount(coupon.id, 0)

    def test_delete(self, create_coupon):
        coupon = create_coupon()
        delete_coupon(coupon.id)
        with pytest.raises(ObjectNotFoundError):
            get_coupon(coupon.id)

    def test_list_pages(self, create_coupon):
        for _ in range(3):
            create_coupon()
        first = list_coupons(limit=2)
        rest = list_coupons(limit=2, cursor=first.next_cursor)

        assert len(first.items) == 2
        assert len(rest.items) == 1
        assert rest.next_cursor is None


class TestSendCoupons:
    def test_one_coupon_per_recipient(self, mailer, email_channel):
        coupons = send_coupons(mailer, ["a@example.com", "b@example.com"], 15, NEXT_MONTH)

        assert len({coupon.code for coupon in coupons}) == 2
        sent = email_channel.sent_to("b@example.com")
        assert sent[0]["subject"] == "A 15% discount from GameVault"
        assert coupons[1].code in sent[0]["body"]

    def test_nothing_sent_when_creation_fails(self, mailer, email_channel):
        with pytest.raises(ValidationError):
            send_coupons(mailer, ["a@example.com"], 15, date.today() - timedelta(days=2))
        assert email_channel.sent_emails == []

    def test_needs_recipients(self, mailer):
        with pytest.raises(ValidationError):
            send_coupons(mailer, [], 15, NEXT_MONTH)

    def test_one_failing_recipient_does_not_stop_the_others(self, mailer, email_channel):
        email_channel.configure(failing_recipients={"a@example.com"})

        coupons = send_coupons(mailer, ["a@example.com", "b@example.com"], 15, NEXT_MONTH)

        assert len(coupons) == 2
        assert email_channel.sent_to("a@example.com") == []
        assert len(email_channel.sent_to("b@example.com")) == 1
