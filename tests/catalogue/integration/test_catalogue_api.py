"""Integration tests for Category, Product and Grain endpoints via TestClient."""


class TestProductEndpoints:
    def test_create_product_with_stock(self, client, admin_headers):
        response = client.post(
            "/api/products",
            json={"name": "Basmati Rice", "price": "49.99", "initial_stock": 25, "low_stock_alert": 5},
            headers=admin_headers,
        )
        assert response.status_code == 201
        product = response.json()["data"]
        assert product["price"] == "49.99"
        assert product["is_active"] is True

        inventory = client.get(f"/api/inventory/{product['id']}", headers=admin_headers).json()["data"]
        assert inventory["quantity"] == 25
        assert inventory["is_low_stock"] is False

    def test_read_is_public(self, client, make_product):
        product_id = make_product()
        response = client.get(f"/api/products/{product_id}")
        assert response.status_code == 200
        assert response.json()["data"]["price"] == "50.00"

    def test_create_requires_admin(self, client, customer_headers):
        response = client.post("/api/products", json={"name": "Ghee", "price": "90"}, headers=customer_headers)
        assert response.status_code == 403

    def test_negative_price(self, client, admin_headers):
        response = client.post("/api/products", json={"name": "Ghee", "price": "-1"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_deactivate(self, client, admin_headers, make_product):
        product_id = make_product()
        response = client.put(f"/api/products/{product_id}/deactivate", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False


class TestCategoryEndpoints:
    def test_subcategories(self, client, admin_headers):
        parent = client.post("/api/categories", json={"name": "Grains"}, headers=admin_headers).json()["data"]
        client.post("/api/categories", json={"name": "Rice", "parent_id": parent["id"]}, headers=admin_headers)
        client.post("/api/categories", json={"name": "Millets", "parent_id": parent["id"]}, headers=admin_headers)

        response = client.get(f"/api/categories/{parent['id']}/subcategories")
        assert response.status_code == 200
        assert sorted(c["name"] for c in response.json()["data"]) == ["Millets", "Rice"]

    def test_cycle_rejected(self, client, admin_headers):
        parent = client.post("/api/categories", json={"name": "Grains"}, headers=admin_headers).json()["data"]
        child = client.post(
            "/api/categories", json={"name": "Rice", "parent_id": parent["id"]}, headers=admin_headers
        ).json()["data"]

        response = client.put(
            f"/api/categories/{parent['id']}", json={"parent_id": child["id"]}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CATEGORY_CYCLE"


class TestGrainEndpoints:
    def test_crud(self, client, admin_headers):
        response = client.post("/api/grains", json={"name": "Wheat", "price": "40.00"}, headers=admin_headers)
        assert response.status_code == 201
        grain = response.json()["data"]
        assert grain["unit"] == "kg"

        response = client.put(f"/api/grains/{grain['id']}", json={"price": "42.50"}, headers=admin_headers)
        assert response.json()["data"]["price"] == "42.50"

        assert client.delete(f"/api/grains/{grain['id']}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/grains/{grain['id']}").status_code == 404
