"""
Tests for menu editing and table management.
"""

from conftest import auth_headers


class TestMenuCategories:
    def test_create_and_list_sorted(self, client, manager, restaurant):
        headers = auth_headers(manager)
        client.post("/api/v1/menu/categories", json={"restaurant_id": restaurant.id, "name": "Drinks", "sort_order": 2}, headers=headers)
        client.post("/api/v1/menu/categories", json={"restaurant_id": restaurant.id, "name": "Starters", "sort_order": 1}, headers=headers)

        response = client.get("/api/v1/menu/categories", params={"restaurant_id": restaurant.id}, headers=headers)
        assert [c["name"] for c in response.json()] == ["Starters", "Drinks"]

    def test_duplicate_name(self, client, manager, restaurant, category):
        response = client.post(
            "/api/v1/menu/categories",
            json={"restaurant_id": restaurant.id, "name": category.name},
            headers=auth_headers(manager),
        )
        assert response.status_code == 409

    def test_server_cannot_create(self, client, server, restaurant):
        response = client.post("/api/v1/menu/categories", json={"restaurant_id": restaurant.id, "name": "X"}, headers=auth_headers(server))
        assert response.status_code == 403

    def test_delete_uncategorizes_items(self, client, manager, category, menu_items):
        headers = auth_headers(manager)
        assert client.delete(f"/api/v1/menu/categories/{category.id}", headers=headers).status_code == 200
        item = client.get(f"/api/v1/menu/items/{menu_items['burger'].id}", headers=headers).json()
        assert item["category_id"] is None

    def test_other_restaurant_hidden(self, client, manager, other_restaurant):
        response = client.get("/api/v1/menu/categories", params={"restaurant_id": other_restaurant.id}, headers=auth_headers(manager))
        assert response.status_code == 403


class TestMenuItems:
    def test_list_filters(self, client, server, restaurant, category, menu_items):
        headers = auth_headers(server)
        everything = client.get("/api/v1/menu/items", params={"restaurant_id": restaurant.id}, headers=headers).json()
        assert len(everything) == 4

        available = client.get("/api/v1/menu/items", params={"restaurant_id": restaurant.id, "available": True}, headers=headers).json()
        assert "Chef Special" not in {i["name"] for i in available}

        mains = client.get("/api/v1/menu/items", params={"restaurant_id": restaurant.id, "category_id": category.id}, headers=headers).json()
        assert {i["name"] for i in mains} == {"Burger", "Fries"}

    def test_create(self, client, manager, restaurant, category):
        response = client.post(
            "/api/v1/menu/items",
            json={"restaurant_id": restaurant.id, "category_id": category.id, "name": "Fish Tacos", "price": 11.75, "allergens": ["fish"]},
            headers=auth_headers(manager),
        )
        assert response.status_code == 201
        assert response.json()["price"] == 11.75
        assert response.json()["allergens"] == ["fish"]

    def test_category_must_belong_to_restaurant(self, client, super_admin, other_restaurant, category):
        response = client.post(
            "/api/v1/menu/items",
            json={"restaurant_id": other_restaurant.id, "category_id": category.id, "name": "X", "price": 1},
            headers=auth_headers(super_admin),
        )
        assert response.status_code == 400

    def test_negative_price_rejected(self, client, manager, restaurant):
        response = client.post(
            "/api/v1/menu/items",
            json={"restaurant_id": restaurant.id, "name": "X", "price": -1},
            headers=auth_headers(manager),
        )
        assert response.status_code == 422

    def test_server_may_toggle_availability(self, client, server, menu_items):
        item_id = menu_items["burger"].id
        response = client.put(f"/api/v1/menu/items/{item_id}", json={"is_available": False}, headers=auth_headers(server))
        assert response.status_code == 200
        assert response.json()["is_available"] is False

    def test_server_may_not_change_price(self, client, server, menu_items):
        item_id = menu_items["burger"].id
        response = client.put(f"/api/v1/menu/items/{item_id}", json={"price": 1, "is_available": True}, headers=auth_headers(server))
        assert response.status_code == 403

    def test_manager_updates_price(self, client, manager, menu_items):
        item_id = menu_items["burger"].id
        response = client.put(f"/api/v1/menu/items/{item_id}", json={"price": 13.25}, headers=auth_headers(manager))
        assert response.json()["price"] == 13.25

    def test_null_availability_rejected(self, client, server, menu_items):
        item_id = menu_items["burger"].id
        response = client.put(f"/api/v1/menu/items/{item_id}", json={"is_available": None}, headers=auth_headers(server))
        assert response.status_code == 422

    def test_null_price_rejected(self, client, manager, menu_items):
        item_id = menu_items["burger"].id
        response = client.put(f"/api/v1/menu/items/{item_id}", json={"price": None}, headers=auth_headers(manager))
        assert response.status_code == 422
        assert client.get(f"/api/v1/menu/items/{item_id}", headers=auth_headers(manager)).json()["price"] == 12.5

    def test_null_description_clears_it(self, client, manager, menu_items):
        item_id = menu_items["burger"].id
        response = client.put(f"/api/v1/menu/items/{item_id}", json={"description": None}, headers=auth_headers(manager))
        assert response.status_code == 200
        assert response.json()["description"] is None

    def test_delete(self, client, manager, menu_items):
        headers = auth_headers(manager)
        item_id = menu_items["soda"].id
        assert client.delete(f"/api/v1/menu/items/{item_id}", headers=headers).status_code == 200
        assert client.get(f"/api/v1/menu/items/{item_id}", headers=headers).status_code == 404


class TestTables:
    def test_create_and_list_ordered(self, client, manager, restaurant):
        headers = auth_headers(manager)
        for number in (3, 1, 2):
            response = client.post("/api/v1/tables", json={"restaurant_id": restaurant.id, "table_number": number}, headers=headers)
            assert response.status_code == 201

        tables = client.get("/api/v1/tables", params={"restaurant_id": restaurant.id}, headers=headers).json()
        assert [t["table_number"] for t in tables] == [1, 2, 3]
        assert all(t["status"] == "available" for t in tables)

    def test_duplicate_number(self, client, manager, restaurant, table):
        response = client.post("/api/v1/tables", json={"restaurant_id": restaurant.id, "table_number": table.table_number}, headers=auth_headers(manager))
        assert response.status_code == 409

    def test_same_number_in_other_restaurant(self, client, super_admin, other_restaurant, table):
        response = client.post(
            "/api/v1/tables",
            json={"restaurant_id": other_restaurant.id, "table_number": table.table_number},
            headers=auth_headers(super_admin),
        )
        assert response.status_code == 201

    def test_renumber_conflict(self, client, manager, restaurant, table):
        headers = auth_headers(manager)
        other = client.post("/api/v1/tables", json={"restaurant_id": restaurant.id, "table_number": 9}, headers=headers).json()
        response = client.put(f"/api/v1/tables/{other['id']}", json={"table_number": table.table_number}, headers=headers)
        assert response.status_code == 409

    def test_status_update_by_server(self, client, server, table):
        response = client.put(f"/api/v1/tables/{table.id}/status", json={"status": "reserved"}, headers=auth_headers(server))
        assert response.status_code == 200
        assert response.json()["status"] == "reserved"

    def test_null_seats_rejected(self, client, manager, table):
        response = client.put(f"/api/v1/tables/{table.id}", json={"seats": None}, headers=auth_headers(manager))
        assert response.status_code == 422

    def test_invalid_status(self, client, server, table):
        response = client.put(f"/api/v1/tables/{table.id}/status", json={"status": "on_fire"}, headers=auth_headers(server))
        assert response.status_code == 422

    def test_delete(self, client, manager, restaurant, table):
        headers = auth_headers(manager)
        assert client.delete(f"/api/v1/tables/{table.id}", headers=headers).status_code == 200
        assert client.get("/api/v1/tables", params={"restaurant_id": restaurant.id}, headers=headers).json() == []
