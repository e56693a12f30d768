"""
Tests for login, the current-user endpoint and first-run setup.
"""

from conftest import PASSWORD, auth_headers


class TestLogin:
    def test_login_returns_token(self, client, server):
        response = client.post("/api/v1/auth/login", json={"email": server.email, "password": PASSWORD})
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["role"] == "server"

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.status_code == 200
        assert me.json()["email"] == server.email

    def test_login_is_case_insensitive_on_email(self, client, server):
        response = client.post("/api/v1/auth/login", json={"email": server.email.upper(), "password": PASSWORD})
        assert response.status_code == 200

    def test_wrong_password(self, client, server):
        response = client.post("/api/v1/auth/login", json={"email": server.email, "password": "nope-nope"})
        assert response.status_code == 401

    def test_disabled_account(self, client, make_staff, restaurant):
        member = make_staff("cashier", restaurant=restaurant, is_active=False)
        response = client.post("/api/v1/auth/login", json={"email": member.email, "password": PASSWORD})
        assert response.status_code == 403

    def test_me_requires_token(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_me_rejects_garbage_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestProfile:
    """Staff editing their own account."""

    def test_get_profile(self, client, server, restaurant):
        response = client.get("/api/v1/auth/profile", headers=auth_headers(server))
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == server.email
        assert body["restaurant_id"] == restaurant.id
        assert "hire_date" in body

    def test_update_name_and_phone(self, client, server):
        response = client.put(
            "/api/v1/auth/profile",
            json={"full_name": "Sam Server", "phone": "+1 555 0199"},
            headers=auth_headers(server),
        )
        assert response.status_code == 200
        assert response.json()["full_name"] == "Sam Server"
        assert response.json()["phone"] == "+1 555 0199"
        assert response.json()["role"] == "server"

    def test_role_is_not_self_editable(self, client, server):
        response = client.put("/api/v1/auth/profile", json={"role": "manager"}, headers=auth_headers(server))
        assert response.status_code == 200
        assert response.json()["role"] == "server"

    def test_change_email_then_login(self, client, server):
        response = client.put("/api/v1/auth/profile", json={"email": "Sam@Harbor.com"}, headers=auth_headers(server))
        assert response.json()["email"] == "sam@harbor.com"
        login = client.post("/api/v1/auth/login", json={"email": "sam@harbor.com", "password": PASSWORD})
        assert login.status_code == 200

    def test_email_taken(self, client, server, manager):
        response = client.put("/api/v1/auth/profile", json={"email": manager.email}, headers=auth_headers(server))
        assert response.status_code == 409

    def test_null_name_rejected(self, client, server):
        response = client.put("/api/v1/auth/profile", json={"full_name": None}, headers=auth_headers(server))
        assert response.status_code == 422

    def test_requires_token(self, client):
        assert client.put("/api/v1/auth/profile", json={"phone": "1"}).status_code == 401


class TestSetup:
    """First super admin bootstrap."""

    def test_check_before_setup(self, client):
        response = client.get("/api/v1/setup/check")
        assert response.json() == {"has_super_admin": False, "needs_setup": True}

    def test_create_super_admin(self, client):
        payload = {"email": "Admin@Harbor.com", "password": "longenough", "full_name": "Site Admin"}
        response = client.post("/api/v1/setup/create", json=payload)
        assert response.status_code == 201
        assert response.json()["role"] == "super_admin"
        assert response.json()["email"] == "admin@harbor.com"

        assert client.get("/api/v1/setup/check").json()["has_super_admin"] is True
        login = client.post("/api/v1/auth/login", json={"email": "admin@harbor.com", "password": "longenough"})
        assert login.status_code == 200

    def test_second_super_admin_conflicts(self, client, super_admin):
        payload = {"email": "other@harbor.com", "password": "longenough", "full_name": "Other"}
        assert client.post("/api/v1/setup/create", json=payload).status_code == 409

    def test_bad_email(self, client):
        payload = {"email": "not-an-email", "password": "longenough", "full_name": "Admin"}
        response = client.post("/api/v1/setup/create", json=payload)
        assert response.status_code == 400
        assert "email" in response.json()["detail"].lower()

    def test_malformed_domain(self, client):
        payload = {"email": "admin@harbor..com", "password": "longenough", "full_name": "Admin"}
        response = client.post("/api/v1/setup/create", json=payload)
        assert response.status_code == 400
        assert client.get("/api/v1/setup/check").json()["needs_setup"] is True

    def test_short_password(self, client):
        payload = {"email": "admin@harbor.com", "password": "short", "full_name": "Admin"}
        response = client.post("/api/v1/setup/create", json=payload)
        assert response.status_code == 400
        assert "8" in response.json()["detail"]


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"


def test_auth_headers_helper_matches_login(client, manager):
    assert client.get("/api/v1/auth/me", headers=auth_headers(manager)).json()["role"] == "manager"
