"""Integration tests for the order endpoints, including the emailed delivery link."""

import pytest
from catalogue.product.product import ProductType
from ordering.order.emails import delivery_token


@pytest.fixture()
def player(create_user):
    return create_user(email="buyer@example.com")


def _create_order(client, headers, product, quantity=1, coupon_code=None):
    payload = {"products": [{"productId": str(product.id), "quantity": quantity}]}
    if coupon_code:
        payload["couponCode"] = coupon_code
    return client.post("/orders", json=payload, headers=headers)


class TestCreateOrder:
    def test_create(self, client, player, auth_headers, create_product):
        game = create_product(price=15.99)
        response = _create_order(client, auth_headers(player), game, quantity=2)

        assert response.status_code == 201
        body = response.json()
        assert body["amount"] == 31.98
        assert body["status"] == "pending"
        assert body["isPaid"] is False
        assert body["lines"][0]["price"] == 15.99

    def test_with_coupon(self, client, player, auth_headers, create_product, create_coupon):
        create_coupon(discount_percentage=50, code="HALF")
        response = _create_order(client, auth_headers(player), create_product(price=9.99), coupon_code="half")
        assert response.json()["amount"] == 5.0
        assert response.json()["couponCode"] == "HALF"

    def test_with_unknown_coupon(self, client, player, auth_headers, create_product):
        response = _create_order(client, auth_headers(player), create_product(), coupon_code="NOPE")
        assert response.status_code == 404

    def test_empty_order_rejected(self, client, player, auth_headers):
        response = client.post("/orders", json={"products": []}, headers=auth_headers(player))
        assert response.status_code == 400

    def test_out_of_stock(self, client, player, auth_headers, create_product):
        response = _create_order(client, auth_headers(player), create_product(stock=1), quantity=2)
        assert response.status_code == 400


class TestReadOrders:
    def test_my_orders(self, client, player, auth_headers, create_product):
        headers = auth_headers(player)
        game = create_product()
        _create_order(client, headers, game)
        _create_order(client, headers, game)

        response = client.get("/orders/me", params={"limit": 1}, headers=headers)
        body = response.json()
        assert len(body["data"]) == 1
        assert body["nextCursor"] is not None

        rest = client.get("/orders/me", params={"limit": 1, "cursor": body["nextCursor"]}, headers=headers)
        assert rest.json()["nextCursor"] is None

    def test_all_orders_admin_only(self, client, player, create_admin, auth_headers, create_product):
        _create_order(client, auth_headers(player), create_product())

        assert client.get("/orders", params={"limit": 10}, headers=auth_headers(player)).status_code == 403
        response = client.get("/orders", params={"limit": 10}, headers=auth_headers(create_admin()))
        assert len(response.json()["data"]) == 1

    def test_order_details_owner_only(self, client, player, create_user, auth_headers, create_product):
        order_id = _create_order(client, auth_headers(player), create_product(name="Hades")).json()["id"]

        response = client.get(f"/orders/{order_id}", headers=auth_headers(player))
        assert response.status_code == 200
        assert response.json()["lines"][0]["name"] == "Hades"

        assert client.get(f"/orders/{order_id}", headers=auth_headers(create_user())).status_code == 403

    def test_missing_order(self, client, player, auth_headers):
        assert client.get("/orders/999999", headers=auth_headers(player)).status_code == 404


class TestDeliveryLink:
    @pytest.fixture()
    def order_id(self, client, player, auth_headers, create_product):
        console = create_product(name="Console", type=ProductType.PHYSICAL)
        return _create_order(client, auth_headers(player), console).json()["id"]

    def test_bad_token_forbidden(self, client, order_id):
        response = client.get(f"/orders/deliver/{order_id}", params={"token": "forged"})
        assert response.status_code == 403

    def test_non_ascii_token_forbidden(self, client, order_id):
        response = client.get(f"/orders/deliver/{order_id}", params={"token": "é" * 32})
        assert response.status_code == 403
        assert response.json()["message"] == "Invalid delivery link"

    def test_marks_delivered_once(self, client, order_id, email_channel):
        token = delivery_token(order_id)

        first = client.get(f"/orders/deliver/{order_id}", params={"token": token})
        second = client.get(f"/orders/deliver/{order_id}", params={"token": token})

        assert first.json() == {"message": "Order marked as delivered", "orderId": order_id, "alreadyDelivered": False}
        assert second.json()["message"] == "Order already delivered"
        assert len(email_channel.sent_to("buyer@example.com")) == 1

    def test_redirects_to_frontend(self, client, order_id):
        response = client.get(
            f"/orders/deliver/{order_id}",
            params={"token": delivery_token(order_id), "redirect": "true"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == f"http://shop.gamevault.test/orders/{order_id}/delivered"


class TestAdminShipping:
    def test_ship_then_deliver(self, client, player, create_admin, auth_headers, create_product):
        order_id = _create_order(client, auth_headers(player), create_product()).json()["id"]
        admin = auth_headers(create_admin())

        assert client.patch(f"/orders/{order_id}/ship", headers=auth_headers(player)).status_code == 403

        response = client.patch(f"/orders/{order_id}/ship", headers=admin)
        assert response.json()["shippingStatus"] == "shipped"
        assert client.patch(f"/orders/{order_id}/ship", headers=admin).status_code == 400

        response = client.patch(f"/orders/{order_id}/deliver", headers=admin)
        assert response.json()["alreadyDelivered"] is False
