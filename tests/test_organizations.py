"""
Tests for organization CRUD and organization settings.
"""

from conftest import auth_headers


class TestOrganizations:
    def test_super_admin_creates_and_lists(self, client, super_admin, organization):
        response = client.post(
            "/api/v1/organizations",
            json={"name": "New Group", "subscription_plan": "premium"},
            headers=auth_headers(super_admin),
        )
        assert response.status_code == 201
        assert response.json()["subscription_plan"] == "premium"

        names = [o["name"] for o in client.get("/api/v1/organizations", headers=auth_headers(super_admin)).json()]
        assert names == ["Harbor Group", "New Group"]

    def test_org_admin_sees_only_own(self, client, org_admin, other_restaurant):
        response = client.get("/api/v1/organizations", headers=auth_headers(org_admin))
        assert [o["id"] for o in response.json()] == [org_admin.organization_id]

        other = client.get(f"/api/v1/organizations/{other_restaurant.organization_id}", headers=auth_headers(org_admin))
        assert other.status_code == 403

    def test_org_admin_cannot_create(self, client, org_admin):
        response = client.post("/api/v1/organizations", json={"name": "Nope"}, headers=auth_headers(org_admin))
        assert response.status_code == 403

    def test_org_admin_update_ignores_plan(self, client, org_admin, organization):
        response = client.put(
            f"/api/v1/organizations/{organization.id}",
            json={"name": "Harbor Holdings", "subscription_plan": "enterprise"},
            headers=auth_headers(org_admin),
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Harbor Holdings"
        assert response.json()["subscription_plan"] == "basic"

    def test_server_forbidden(self, client, server):
        assert client.get("/api/v1/organizations", headers=auth_headers(server)).status_code == 403

    def test_delete(self, client, super_admin, other_restaurant):
        org_id = other_restaurant.organization_id
        response = client.delete(f"/api/v1/organizations/{org_id}", headers=auth_headers(super_admin))
        assert response.status_code == 200
        assert client.get(f"/api/v1/organizations/{org_id}", headers=auth_headers(super_admin)).status_code == 404


class TestOrganizationSettings:
    def url(self, organization):
        return f"/api/v1/organizations/{organization.id}/settings"

    def test_empty_settings(self, client, org_admin, organization):
        assert client.get(self.url(organization), headers=auth_headers(org_admin)).json() == {}

    def test_upsert_single_key(self, client, org_admin, organization):
        headers = auth_headers(org_admin)
        client.put(self.url(organization), json={"setting_key": "theme", "setting_value": "dark"}, headers=headers)
        response = client.put(self.url(organization), json={"setting_key": "theme", "setting_value": "light"}, headers=headers)
        assert response.status_code == 200
        assert response.json() == {"theme": "light"}

    def test_upsert_many(self, client, org_admin, organization):
        payload = {"settings": {"tips": {"enabled": True, "options": [10, 15]}, "locale": "en-US"}}
        response = client.put(self.url(organization), json=payload, headers=auth_headers(org_admin))
        assert response.json() == {"locale": "en-US", "tips": {"enabled": True, "options": [10, 15]}}

    def test_get_single_key(self, client, org_admin, organization):
        headers = auth_headers(org_admin)
        client.put(self.url(organization), json={"settings": {"a": 1, "b": 2}}, headers=headers)
        assert client.get(self.url(organization), params={"key": "b"}, headers=headers).json() == {"b": 2}
        assert client.get(self.url(organization), params={"key": "zzz"}, headers=headers).status_code == 404

    def test_delete_key(self, client, org_admin, organization):
        headers = auth_headers(org_admin)
        client.put(self.url(organization), json={"settings": {"a": 1, "b": 2}}, headers=headers)
        assert client.delete(f"{self.url(organization)}/a", headers=headers).status_code == 200
        assert client.get(self.url(organization), headers=headers).json() == {"b": 2}
        assert client.delete(f"{self.url(organization)}/a", headers=headers).status_code == 404

    def test_nothing_to_update(self, client, org_admin, organization):
        assert client.put(self.url(organization), json={}, headers=auth_headers(org_admin)).status_code == 400
