"""Integration tests for the shopper, product and basket endpoints."""

from datetime import UTC, datetime, timedelta


class TestShopperEndpoints:
    def test_register_and_fetch(self, client, shopper_id):
        response = client.get(f"/api/shoppers/{shopper_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["full_name"] == "Dana Hops"
        assert data["email"] == "dana@example.com"

    def test_duplicate_email_is_a_bad_request(self, client, shopper_id):
        response = client.post(
            "/api/shoppers",
            json={"first_name": "Other", "last_name": "Person", "email": "DANA@example.com"},
        )
        assert response.status_code == 400

    def test_lookup_by_email(self, client, shopper_id):
        assert client.get("/api/shoppers/by-email", params={"email": "dana@example.com"}).json()["shopper_id"] == (
            shopper_id
        )
        assert client.get("/api/shoppers/by-email", params={"email": "nobody@example.com"}).status_code == 404

    def test_update_profile(self, client, shopper_id):
        response = client.put(f"/api/shoppers/{shopper_id}", json={"city": "Norfolk"})
        assert response.status_code == 200
        assert client.get(f"/api/shoppers/{shopper_id}").json()["city"] == "Norfolk"

    def test_unknown_shopper_is_not_found(self, client):
        assert client.get("/api/shoppers/missing").status_code == 404

    def test_active_basket_and_total_purchases(self, client, shopper_id, basket_id):
        assert client.get(f"/api/shoppers/{shopper_id}/basket").json()["basket_id"] == basket_id
        assert client.get(f"/api/shoppers/{shopper_id}/total-purchases").json()["total"] == 0.0

    def test_total_purchases_counts_finalized_orders(self, client, shopper_id, basket_id, product_id):
        client.post(f"/api/baskets/{basket_id}/items", json={"product_id": product_id, "quantity": 2})
        client.post(f"/api/baskets/{basket_id}/checkout")
        client.post(f"/api/baskets/{basket_id}/finalize")

        response = client.get(f"/api/shoppers/{shopper_id}/total-purchases")
        assert response.status_code == 200
        assert response.json()["total"] == 25.00
        assert client.get("/api/shoppers/missing/total-purchases").status_code == 404


class TestProductEndpoints:
    def test_create_and_fetch(self, client, product_id):
        data = client.get(f"/api/products/{product_id}").json()
        assert data["name"] == "Pale Ale Kit"
        assert data["type"] == "E"
        assert data["current_price"] == 12.50
        assert data["active"] is True

    def test_invalid_payload_is_rejected(self, client):
        response = client.post("/api/products", json={"name": "Free Beer", "price": 0})
        assert response.status_code == 422

    def test_list_filters_by_category(self, client, product_id):
        client.post("/api/products", json={"name": "Cascade Hops", "price": 4.0, "category": "Hops"})
        names = [p["name"] for p in client.get("/api/products", params={"category": "hops"}).json()]
        assert names == ["Cascade Hops"]

    def test_patch_and_description(self, client, product_id):
        assert client.patch(f"/api/products/{product_id}", json={"price": 11.00}).status_code == 200
        client.put(f"/api/products/{product_id}/description", json={"description": "Five gallons"})
        data = client.get(f"/api/products/{product_id}").json()
        assert data["price"] == 11.00
        assert data["description"] == "Five gallons"

    def test_delete_is_soft(self, client, product_id):
        assert client.delete(f"/api/products/{product_id}").status_code == 204
        assert client.get(f"/api/products/{product_id}").json()["active"] is False

    def test_toggle_status(self, client, product_id):
        assert client.post(f"/api/products/{product_id}/toggle-status").json()["active"] is False

    def test_stock_endpoints(self, client, product_id):
        response = client.post(f"/api/products/{product_id}/stock/decrease", json={"quantity": 4})
        assert response.json() == {"success": True, "stock": 6}

        response = client.post(f"/api/products/{product_id}/stock/decrease", json={"quantity": 7})
        assert response.status_code == 200
        assert response.json() == {"success": False, "stock": 6}

        assert client.post(f"/api/products/{product_id}/stock/increase", json={"quantity": 1}).json()["stock"] == 7
        assert client.put(f"/api/products/{product_id}/stock", json={"stock": 2}).json()["stock"] == 2
        available = client.get(f"/api/products/{product_id}/stock/available", params={"quantity": 3}).json()
        assert available["available"] is False

    def test_sale_endpoints(self, client, product_id):
        now = datetime.now(UTC)
        response = client.post(
            f"/api/products/{product_id}/sale",
            json={
                "sale_price": 9.99,
                "sale_start": (now - timedelta(days=1)).isoformat(),
                "sale_end": (now + timedelta(days=1)).isoformat(),
            },
        )
        assert response.status_code == 200
        assert [p["product_id"] for p in client.get("/api/products/on-sale").json()] == [product_id]
        assert client.get(f"/api/products/{product_id}").json()["current_price"] == 9.99

        client.delete(f"/api/products/{product_id}/sale")
        assert client.get("/api/products/on-sale").json() == []

    def test_statistics(self, client, product_id):
        data = client.get("/api/products/statistics").json()
        assert data["active_products"] == 1
        assert data["total_stock_value"] == 125.00


class TestBasketEndpoints:
    def test_unknown_shopper_cannot_open_a_basket(self, client):
        assert client.post("/api/baskets", json={"shopper_id": "missing"}).status_code == 404

    def test_add_update_and_remove_items(self, client, basket_id, product_id):
        data = client.post(f"/api/baskets/{basket_id}/items", json={"product_id": product_id, "quantity": 2}).json()
        assert data["quantity"] == 2
        assert data["subtotal"] == 25.00

        data = client.put(f"/api/baskets/{basket_id}/items/{product_id}", json={"quantity": 3}).json()
        assert data["items"][0]["quantity"] == 3

        data = client.delete(f"/api/baskets/{basket_id}/items/{product_id}").json()
        assert data["items"] == []

    def test_updating_a_missing_line_is_not_found(self, client, basket_id, product_id):
        response = client.put(f"/api/baskets/{basket_id}/items/{product_id}", json={"quantity": 1})
        assert response.status_code == 404

    def test_adding_beyond_stock_is_a_bad_request(self, client, basket_id, product_id):
        response = client.post(f"/api/baskets/{basket_id}/items", json={"product_id": product_id, "quantity": 11})
        assert response.status_code == 400

    def test_checkout_flow(self, client, basket_id, product_id):
        client.post(f"/api/baskets/{basket_id}/items", json={"product_id": product_id, "quantity": 2})
        client.put(f"/api/baskets/{basket_id}/shipping", json={"shipping": 8.00})

        data = client.post(f"/api/baskets/{basket_id}/checkout").json()
        assert data["status"] == "SUBMITTED"
        assert data["status_code"] == 1
        assert data["total"] == 33.00
        assert client.get(f"/api/products/{product_id}").json()["stock"] == 8

        assert client.post(f"/api/baskets/{basket_id}/finalize").json()["status"] == "CHECKED_OUT"
        assert client.post(f"/api/baskets/{basket_id}/checkout").status_code == 400

    def test_empty_basket_checkout_is_a_bad_request(self, client, basket_id):
        assert client.post(f"/api/baskets/{basket_id}/checkout").status_code == 400

    def test_status_update_and_invalid_transition(self, client, basket_id, product_id):
        client.post(f"/api/baskets/{basket_id}/items", json={"product_id": product_id, "quantity": 1})
        client.post(f"/api/baskets/{basket_id}/checkout")

        assert client.put(f"/api/baskets/{basket_id}/status", json={"status": "checked_out"}).status_code == 200
        assert client.put(f"/api/baskets/{basket_id}/status", json={"status": "DELIVERED"}).status_code == 400
        assert client.put(f"/api/baskets/{basket_id}/status", json={"status": "LOST"}).status_code == 400

    def test_cancel_restocks(self, client, basket_id, product_id):
        client.post(f"/api/baskets/{basket_id}/items", json={"product_id": product_id, "quantity": 4})
        client.post(f"/api/baskets/{basket_id}/checkout")
        assert client.post(f"/api/baskets/{basket_id}/cancel").json()["status"] == "CANCELLED"
        assert client.get(f"/api/products/{product_id}").json()["stock"] == 10

    def test_list_by_status(self, client, basket_id):
        assert [b["basket_id"] for b in client.get("/api/baskets", params={"status": "active"}).json()] == [basket_id]
        assert client.get("/api/baskets", params={"status": "nonsense"}).status_code == 400

    def test_shipping_quote_uses_default_table(self, client, basket_id):
        data = client.post(f"/api/baskets/{basket_id}/shipping/quote", json={"weight": 2.5, "method": "express"}).json()
        assert data["shipping"] == 15.00

    def test_shipping_address(self, client, basket_id):
        client.put(
            f"/api/baskets/{basket_id}/shipping-address",
            json={"ship_address": "1 Kettle Rd", "ship_city": "Richmond", "ship_state": "VA"},
        )
        assert "Richmond" in client.get(f"/api/baskets/{basket_id}").json()["shipping_address"]
