"""
Tests for line-level order edits and total recomputation.
"""

from conftest import auth_headers


def line(order, name):
    return next(i for i in order["items"] if i["name_snapshot"] == name)


class TestOrderItems:
    def test_list(self, client, create_order, server):
        order = create_order()
        response = client.get("/api/v1/order-items", params={"order_id": order["id"]}, headers=auth_headers(server))
        assert [i["name_snapshot"] for i in response.json()] == ["Burger", "Fries"]

    def test_add_new_line(self, client, create_order, server, menu_items):
        order = create_order()
        response = client.post(
            "/api/v1/order-items",
            json={"order_id": order["id"], "menu_item_id": menu_items["soda"].id, "quantity": 2, "special_instructions": "no ice"},
            headers=auth_headers(server),
        )
        assert response.status_code == 201
        body = response.json()
        assert line(body, "Soda")["quantity"] == 2
        assert line(body, "Soda")["special_instructions"] == "no ice"
        assert body["subtotal"] == 33.5
        assert body["tax_amount"] == 3.35
        assert body["total_amount"] == 36.85

    def test_add_existing_item_increments(self, client, create_order, server, menu_items):
        order = create_order()
        response = client.post(
            "/api/v1/order-items",
            json={"order_id": order["id"], "menu_item_id": menu_items["burger"].id},
            headers=auth_headers(server),
        )
        body = response.json()
        assert len(body["items"]) == 2
        assert line(body, "Burger")["quantity"] == 3
        assert line(body, "Burger")["id"] == line(order, "Burger")["id"]
        assert body["subtotal"] == 41.5

    def test_add_unavailable_item(self, client, create_order, server, menu_items):
        order = create_order()
        response = client.post(
            "/api/v1/order-items",
            json={"order_id": order["id"], "menu_item_id": menu_items["special"].id},
            headers=auth_headers(server),
        )
        assert response.status_code == 400

    def test_update_quantity(self, client, create_order, server):
        order = create_order()
        fries = line(order, "Fries")
        response = client.put(f"/api/v1/order-items/{fries['id']}", json={"quantity": 3}, headers=auth_headers(server))
        body = response.json()
        assert line(body, "Fries")["quantity"] == 3
        assert line(body, "Fries")["total_price"] == 12.0
        assert body["subtotal"] == 37.0

    def test_zero_quantity_removes_line(self, client, create_order, server):
        order = create_order()
        fries = line(order, "Fries")
        response = client.put(f"/api/v1/order-items/{fries['id']}", json={"quantity": 0}, headers=auth_headers(server))
        body = response.json()
        assert [i["name_snapshot"] for i in body["items"]] == ["Burger"]
        assert body["subtotal"] == 25.0
        assert body["total_amount"] == 27.5

    def test_kitchen_status(self, client, create_order, kitchen):
        order = create_order()
        burger = line(order, "Burger")
        response = client.put(f"/api/v1/order-items/{burger['id']}", json={"status": "preparing"}, headers=auth_headers(kitchen))
        assert line(response.json(), "Burger")["status"] == "preparing"

    def test_delete_line(self, client, create_order, server):
        order = create_order()
        burger = line(order, "Burger")
        response = client.delete(f"/api/v1/order-items/{burger['id']}", headers=auth_headers(server))
        body = response.json()
        assert [i["name_snapshot"] for i in body["items"]] == ["Fries"]
        assert body["subtotal"] == 4.0
        assert body["total_amount"] == 4.4

    def test_locked_after_completion(self, client, create_order, server, menu_items):
        order = create_order()
        headers = auth_headers(server)
        client.put(f"/api/v1/orders/{order['id']}/status", json={"status": "cancelled"}, headers=headers)

        add = client.post(
            "/api/v1/order-items",
            json={"order_id": order["id"], "menu_item_id": menu_items["soda"].id},
            headers=headers,
        )
        assert add.status_code == 400
        remove = client.delete(f"/api/v1/order-items/{line(order, 'Fries')['id']}", headers=headers)
        assert remove.status_code == 400

    def test_edit_line_of_deleted_menu_item(self, client, create_order, server, manager, menu_items):
        order = create_order()
        fries = line(order, "Fries")
        deleted = client.delete(f"/api/v1/menu/items/{menu_items['fries'].id}", headers=auth_headers(manager))
        assert deleted.status_code == 200

        headers = auth_headers(server)
        response = client.put(f"/api/v1/order-items/{fries['id']}", json={"quantity": 3}, headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert line(body, "Fries")["id"] == fries["id"]
        assert line(body, "Fries")["menu_item_id"] is None
        assert line(body, "Fries")["total_price"] == 12.0
        assert body["subtotal"] == 37.0

        # the orphaned line survives edits to other lines
        burger = line(body, "Burger")
        response = client.put(f"/api/v1/order-items/{burger['id']}", json={"quantity": 1}, headers=headers)
        assert [i["name_snapshot"] for i in response.json()["items"]] == ["Burger", "Fries"]
        assert response.json()["subtotal"] == 24.5

        response = client.delete(f"/api/v1/order-items/{fries['id']}", headers=headers)
        assert [i["name_snapshot"] for i in response.json()["items"]] == ["Burger"]

    def test_missing_item(self, client, server):
        assert client.put("/api/v1/order-items/999", json={"quantity": 1}, headers=auth_headers(server)).status_code == 404
