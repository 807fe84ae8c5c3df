"""Integration tests for Coupon API endpoints via TestClient."""

from protean import current_domain
from storefront.coupons.coupon.usage import CouponUsage


def _create_coupon(client, admin_headers, **overrides):
    body = {
        "coupon_type": "discount_code",
        "code": "SAVE10",
        "discount_amount": "10.00",
        "min_order_amount": "50.00",
    }
    body.update(overrides)
    response = client.post("/api/coupons", json=body, headers=admin_headers)
    assert response.status_code == 201, response.json()
    return response.json()["data"]


class TestAdminCoupons:
    def test_create_requires_admin(self, client):
        response = client.post("/api/coupons", json={"coupon_type": "discount_code", "code": "X"})
        assert response.status_code == 401

    def test_create_and_read(self, client, admin_headers):
        coupon = _create_coupon(client, admin_headers, code="welcome")
        assert coupon["code"] == "WELCOME"
        assert coupon["discount_amount"] == "10.00"
        assert coupon["min_order_amount"] == "50.00"

        response = client.get(f"/api/coupons/{coupon['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["id"] == coupon["id"]

    def test_duplicate_code(self, client, admin_headers):
        _create_coupon(client, admin_headers)
        response = client.post(
            "/api/coupons",
            json={"coupon_type": "discount_code", "code": "save10", "discount_amount": "5", "min_order_amount": "0"},
            headers=admin_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_COUPON_CODE"

    def test_missing_fields(self, client, admin_headers):
        response = client.post(
            "/api/coupons", json={"coupon_type": "discount_code", "code": "HALF"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_REQUIRED_FIELDS"

    def test_deactivate_and_activate(self, client, admin_headers):
        coupon = _create_coupon(client, admin_headers)
        response = client.put(f"/api/coupons/{coupon['id']}/deactivate", headers=admin_headers)
        assert response.json()["data"]["is_active"] is False
        response = client.put(f"/api/coupons/{coupon['id']}/activate", headers=admin_headers)
        assert response.json()["data"]["is_active"] is True

    def test_unknown_coupon(self, client, admin_headers):
        response = client.get("/api/coupons/no-such-coupon", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "COUPON_NOT_FOUND"


class TestStorefrontCoupons:
    def test_validate(self, client, admin_headers):
        _create_coupon(client, admin_headers)
        response = client.post("/api/coupons/validate", json={"code": "save10", "order_amount": "60.00"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["valid"] is True
        assert data["discount_amount"] == "10.00"
        assert data["free_product"] is None

    def test_validate_below_minimum(self, client, admin_headers):
        _create_coupon(client, admin_headers)
        response = client.post("/api/coupons/validate", json={"code": "SAVE10", "order_amount": "49.99"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["valid"] is False
        assert body["error"]["code"] == "MINIMUM_ORDER_NOT_MET"

    def test_validate_unknown_code(self, client):
        response = client.post("/api/coupons/validate", json={"code": "NOPE", "order_amount": "60.00"})
        assert response.status_code == 400
        assert response.json()["valid"] is False
        assert response.json()["error"]["code"] == "COUPON_NOT_FOUND"

    def test_validate_free_item(self, client, admin_headers, make_product):
        product_id = make_product(name="Jaggery Sample", price=100)
        _create_coupon(
            client,
            admin_headers,
            coupon_type="additional_item",
            code="FREEJAGGERY",
            discount_amount=None,
            product_id=product_id,
            min_order_amount="75.00",
        )
        response = client.post("/api/coupons/validate", json={"code": "FREEJAGGERY", "order_amount": "80.00"})
        data = response.json()["data"]
        assert data["valid"] is True
        assert data["discount_amount"] == "0.00"
        assert data["free_product"]["name"] == "Jaggery Sample"

    def test_additional_items_for_order_amount(self, client, admin_headers, make_product):
        small = make_product(name="Tea Sample", price=100)
        large = make_product(name="Ghee Sample", price=100)
        retired = make_product(name="Old Sample", price=100)
        for product_id, minimum in ((small, "50.00"), (large, "150.00"), (retired, "20.00")):
            _create_coupon(
                client,
                admin_headers,
                coupon_type="additional_item",
                code=None,
                discount_amount=None,
                product_id=product_id,
                min_order_amount=minimum,
            )
        _create_coupon(client, admin_headers)
        client.put(f"/api/products/{retired}/deactivate", headers=admin_headers)

        response = client.get("/api/coupons/additional-items", params={"order_amount": "200.00"})
        assert response.status_code == 200
        offers = response.json()["data"]
        assert [offer["product_name"] for offer in offers] == ["Ghee Sample", "Tea Sample"]
        assert offers[0]["min_order_amount"] == "150.00"

        response = client.get("/api/coupons/additional-items", params={"order_amount": "100.00"})
        assert [offer["product_name"] for offer in response.json()["data"]] == ["Tea Sample"]

    def test_additional_items_requires_positive_amount(self, client):
        response = client.get("/api/coupons/additional-items", params={"order_amount": "0"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_apply_once_per_order(self, client, admin_headers, make_product, order_placer):
        coupon = _create_coupon(client, admin_headers)
        order_id = order_placer([(make_product(price=6000), 1, 6000)])
        body = {"coupon_id": coupon["id"], "order_id": order_id, "order_amount": "60.00"}

        first = client.post("/api/coupons/apply", json=body)
        assert first.status_code == 200
        assert first.json()["data"]["discount_applied"] == "10.00"

        second = client.post("/api/coupons/apply", json=body)
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "COUPON_ALREADY_APPLIED"

        usages = current_domain.repository_for(CouponUsage)._dao.query.filter(coupon_id=coupon["id"]).all()
        assert usages.total == 1

        stats = client.get(f"/api/coupons/{coupon['id']}/stats", headers=admin_headers).json()["data"]
        assert stats["total_usages"] == 1
        assert stats["total_discount_given"] == "10.00"

        response = client.delete(f"/api/coupons/{coupon['id']}", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "COUPON_IN_USE"
