"""Integration tests for the mail endpoints."""

from datetime import date, timedelta

import pytest


@pytest.fixture()
def admin_headers(create_admin, auth_headers):
    return auth_headers(create_admin())


class TestSendCoupon:
    def test_sends_each_coupon_to_its_address(self, client, admin_headers, create_coupon, email_channel):
        first = create_coupon(discount_percentage=10)
        second = create_coupon(discount_percentage=20)

        response = client.post(
            "/mail/send-coupon",
            json={"emails": ["a@example.com", "b@example.com"], "coupons": [first.code, second.code]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Coupons sent", "queued": 2}
        assert first.code in email_channel.sent_to("a@example.com")[0]["body"]
        assert second.code in email_channel.sent_to("b@example.com")[0]["body"]

    def test_lengths_must_match(self, client, admin_headers, create_coupon):
        response = client.post(
            "/mail/send-coupon",
            json={"emails": ["a@example.com", "b@example.com"], "coupons": [create_coupon().code]},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_expired_coupon_not_sent(self, client, admin_headers, create_coupon, email_channel):
        coupon = create_coupon(expiration_date=date.today() - timedelta(days=2))
        response = client.post(
            "/mail/send-coupon",
            json={"emails": ["a@example.com"], "coupons": [coupon.code]},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert email_channel.sent_emails == []

    def test_admin_only(self, client, create_user, auth_headers, create_coupon):
        response = client.post(
            "/mail/send-coupon",
            json={"emails": ["a@example.com"], "coupons": [create_coupon().code]},
            headers=auth_headers(create_user()),
        )
        assert response.status_code == 403


class TestSendOrder:
    def test_resends_order_details(self, client, admin_headers, create_user, auth_headers, create_product, email_channel):
        buyer = create_user(email="buyer@example.com")
        order = client.post(
            "/orders",
            json={"products": [{"productId": str(create_product().id), "quantity": 1}]},
            headers=auth_headers(buyer),
        ).json()

        response = client.post("/mail/send-order", json={"orderId": order["id"]}, headers=admin_headers)

        assert response.json() == {"message": "Order email sent", "queued": 1}
        assert email_channel.sent_to("buyer@example.com")[0]["subject"] == f"GameVault order #{order['id']}"

    def test_unknown_order(self, client, admin_headers):
        response = client.post("/mail/send-order", json={"orderId": 424242}, headers=admin_headers)
        assert response.status_code == 404
