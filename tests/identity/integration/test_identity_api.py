"""Integration tests for the auth and user endpoints."""

import uuid

import pytest


def _register(client, **overrides):
    payload = {"email": "ada@example.com", "password": "s3cret-pass", "name": "Ada Lovelace"}
    payload.update(overrides)
    return client.post("/auth/register", json=payload)


class TestRegisterEndpoint:
    def test_register(self, client, email_channel):
        response = _register(client)
        assert response.status_code == 201
        assert response.json() == {"message": "User registration was successful"}
        assert len(email_channel.sent_to("ada@example.com")) == 2

    def test_register_duplicate(self, client):
        _register(client)
        response = _register(client)
        assert response.status_code == 400
        assert response.json()["message"] == "Email already exists"

    def test_register_short_password(self, client):
        response = _register(client, password="short")
        assert response.status_code == 400


class TestLoginEndpoint:
    def test_login_returns_token_and_user(self, client):
        _register(client)
        response = client.post("/auth/login", json={"email": "ada@example.com", "password": "s3cret-pass"})
        assert response.status_code == 200
        body = response.json()
        assert body["tokenType"] == "bearer"
        assert body["user"]["email"] == "ada@example.com"
        assert "password" not in body["user"]

        me = client.get("/users/me", headers={"Authorization": f"Bearer {body['accessToken']}"})
        assert me.status_code == 200
        assert me.json()["name"] == "Ada Lovelace"

    def test_login_unknown_user(self, client):
        response = client.post("/auth/login", json={"email": "nobody@example.com", "password": "s3cret-pass"})
        assert response.status_code == 404
        assert response.json()["message"] == "User not exists"

    def test_login_wrong_password(self, client):
        _register(client)
        response = client.post("/auth/login", json={"email": "ada@example.com", "password": "bad-password"})
        assert response.status_code == 401


class TestVerifyEmail:
    def test_verified_email_link(self, client):
        from identity.user.authentication import find_user_by_email

        _register(client)
        token = find_user_by_email("ada@example.com").token_confirmation

        response = client.get(f"/mail/verified-email/{token}")
        assert response.status_code == 200
        assert response.json() == {"message": "Email verified successfully"}

        assert client.get(f"/mail/verified-email/{token}").status_code == 404


class TestUserEndpoints:
    @pytest.fixture()
    def ada(self, create_user):
        return create_user(email="ada@example.com")

    def test_user_can_read_self(self, client, ada, auth_headers):
        response = client.get(f"/users/{ada.id}", headers=auth_headers(ada))
        assert response.status_code == 200
        assert response.json()["status"] == "active"
        assert response.json()["role"] == "client"

    def test_user_cannot_read_others(self, client, ada, create_user, auth_headers):
        other = create_user()
        assert client.get(f"/users/{other.id}", headers=auth_headers(ada)).status_code == 403

    def test_admin_can_read_others(self, client, ada, create_admin, auth_headers):
        assert client.get(f"/users/{ada.id}", headers=auth_headers(create_admin())).status_code == 200

    def test_missing_user_for_admin(self, client, create_admin, auth_headers):
        response = client.get(f"/users/{uuid.uuid4()}", headers=auth_headers(create_admin()))
        assert response.status_code == 404

    def test_update_profile(self, client, ada, auth_headers):
        response = client.patch(f"/users/{ada.id}", json={"username": "countess"}, headers=auth_headers(ada))
        assert response.json()["username"] == "countess"

    def test_change_password(self, client, ada, auth_headers):
        response = client.patch(
            f"/users/{ada.id}/password",
            json={"oldPassword": "s3cret-pass", "newPassword": "an0ther-pass"},
            headers=auth_headers(ada),
        )
        assert response.status_code == 200
        assert response.json() == {"message": "User password updated."}

        login = client.post("/auth/login", json={"email": "ada@example.com", "password": "an0ther-pass"})
        assert login.status_code == 200

    def test_delete_self_revokes_access(self, client, ada, auth_headers):
        headers = auth_headers(ada)
        response = client.delete(f"/users/{ada.id}", headers=headers)
        assert response.json() == {"message": "User deleted successfully"}
        assert client.get("/users/me", headers=headers).status_code == 401

    def test_ban_is_admin_only_and_takes_effect(self, client, ada, create_admin, auth_headers):
        assert client.patch(f"/users/{ada.id}/ban", json={"reason": "x"}, headers=auth_headers(ada)).status_code == 403

        response = client.patch(
            f"/users/{ada.id}/ban", json={"reason": "fraud"}, headers=auth_headers(create_admin())
        )
        assert response.status_code == 200
        assert response.json()["status"] == "banned"
        assert client.get("/users/me", headers=auth_headers(ada)).status_code == 401

    def test_admin_can_delete_a_banned_user(self, client, ada, create_admin, auth_headers):
        admin_headers = auth_headers(create_admin())
        client.patch(f"/users/{ada.id}/ban", json={"reason": "fraud"}, headers=admin_headers)

        response = client.delete(f"/users/{ada.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        assert client.get(f"/users/{ada.id}", headers=admin_headers).json()["status"] == "inactive"

    def test_list_users_admin_only(self, client, ada, create_admin, auth_headers):
        assert client.get("/users", params={"limit": 10}, headers=auth_headers(ada)).status_code == 403

        response = client.get("/users", params={"limit": 10}, headers=auth_headers(create_admin()))
        assert len(response.json()["data"]) == 2

    def test_profile_image_upload(self, client, ada, auth_headers):
        response = client.post(
            f"/users/{ada.id}/profile-image",
            files={"file": ("me.jpg", b"jpeg-bytes", "image/jpeg")},
            headers=auth_headers(ada),
        )
        assert response.status_code == 200
        assert response.json()["profileImage"].startswith("https://storage.test/gamevault/users/")

        response = client.delete(f"/users/{ada.id}/profile-image", headers=auth_headers(ada))
        assert response.json()["profileImage"] == "default_profile_picture.png"

    def test_banner_image_rejects_bad_type(self, client, ada, auth_headers):
        response = client.post(
            f"/users/{ada.id}/banner-image",
            files={"file": ("banner.gif", b"GIF89a", "image/gif")},
            headers=auth_headers(ada),
        )
        assert response.status_code == 400
