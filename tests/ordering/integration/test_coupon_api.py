"""Integration tests for the coupon endpoints."""

from datetime import date, timedelta

import pytest

NEXT_MONTH = (date.today() + timedelta(days=30)).isoformat()


@pytest.fixture()
def admin_headers(create_admin, auth_headers):
    return auth_headers(create_admin())


class TestCouponAdministration:
    def test_create_and_fetch(self, client, admin_headers):
        response = client.post(
            "/coupons",
            json={"discountPercentage": 15, "expirationDate": NEXT_MONTH, "code": "launch15"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        coupon = response.json()
        assert coupon["code"] == "LAUNCH15"
        assert coupon["isActive"] is True

        assert client.get(f"/coupons/{coupon['id']}", headers=admin_headers).json()["discountPercentage"] == 15

    def test_clients_cannot_create(self, client, create_user, auth_headers):
        response = client.post(
            "/coupons",
            json={"discountPercentage": 15, "expirationDate": NEXT_MONTH},
            headers=auth_headers(create_user()),
        )
        assert response.status_code == 403

    def test_discount_out_of_range(self, client, admin_headers):
        response = client.post(
            "/coupons", json={"discountPercentage": 150, "expirationDate": NEXT_MONTH}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_list(self, client, admin_headers, create_coupon):
        create_coupon()
        create_coupon()
        response = client.get("/coupons", params={"limit": 10}, headers=admin_headers)
        assert len(response.json()["data"]) == 2

    def test_update_toggle_and_delete(self, client, admin_headers, create_coupon):
        coupon = create_coupon()

        response = client.patch(f"/coupons/{coupon.id}/discount", json={"discountPercentage": 40}, headers=admin_headers)
        assert response.json()["discountPercentage"] == 40

        response = client.patch(f"/coupons/{coupon.id}/toggle-status", headers=admin_headers)
        assert response.json()["isActive"] is False

        response = client.patch(f"/coupons/{coupon.id}/status", json={"isActive": True}, headers=admin_headers)
        assert response.json()["isActive"] is True

        response = client.delete(f"/coupons/{coupon.id}", headers=admin_headers)
        assert response.json() == {"message": "Coupon deleted successfully"}
        assert client.get(f"/coupons/{coupon.id}", headers=admin_headers).status_code == 404

    def test_send_coupons(self, client, admin_headers, email_channel):
        response = client.post(
            "/coupons/send",
            json={"emails": ["a@example.com", "b@example.com"], "discountPercentage": 20, "expirationDate": NEXT_MONTH},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert len(response.json()) == 2
        assert len(email_channel.sent_emails) == 2


class TestCouponLookup:
    def test_by_code(self, client, create_user, auth_headers, create_coupon):
        create_coupon(code="SUMMER")
        response = client.get("/coupons/code/summer", headers=auth_headers(create_user()))
        assert response.json()["code"] == "SUMMER"

    def test_validate(self, client, create_user, auth_headers, create_coupon):
        coupon = create_coupon()
        response = client.get(f"/coupons/validate/{coupon.id}", headers=auth_headers(create_user()))
        assert response.json()["valid"] is True

    def test_validate_expired(self, client, create_user, auth_headers, create_coupon):
        coupon = create_coupon(expiration_date=date.today() - timedelta(days=2))
        response = client.get(f"/coupons/validate/{coupon.id}", headers=auth_headers(create_user()))
        assert response.status_code == 400
        assert response.json()["message"] == "Coupon is expired"
