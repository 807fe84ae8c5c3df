"""The deployed FastAPI application: domain wiring, routes and request ids."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def app_client():
    from app import app

    return TestClient(app, raise_server_exceptions=False)


def test_handlers_are_registered_on_startup(app_client):
    from storefront.domain import storefront

    handler_names = [str(name) for name in storefront.registry.event_handlers]
    assert any("LowStockAlertHandler" in name for name in handler_names)

    command_handler_names = [str(name) for name in storefront.registry.command_handlers]
    assert any("PlaceOrderHandler" in name for name in command_handler_names)
    assert any("ManageProductHandler" in name for name in command_handler_names)


def test_create_product_through_application(app_client, admin_headers):
    response = app_client.post(
        "/api/products",
        json={"name": "Toor Dal", "price": "120.00", "initial_stock": 8},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    product_id = body["data"]["id"]

    stock = app_client.get(f"/api/inventory/{product_id}", headers=admin_headers)
    assert stock.status_code == 200
    assert stock.json()["data"]["quantity"] == 8


def test_place_order_through_application(app_client, admin_headers):
    created = app_client.post(
        "/api/products",
        json={"name": "Ragi Flour", "price": "50.00", "initial_stock": 3},
        headers=admin_headers,
    )
    product_id = created.json()["data"]["id"]

    response = app_client.post(
        "/api/orders",
        json={
            "customer_info": {
                "full_name": "Asha Rao",
                "phone": "9876543210",
                "address": "12 Lake Road",
                "city": "Pune",
            },
            "cart_items": [{"product_id": product_id, "quantity": 2, "unit_price": "50.00"}],
            "pricing": {"item_total": "100.00", "delivery_fee": "0", "discount": "0", "grand_total": "100.00"},
        },
    )

    assert response.status_code == 201
    stock = app_client.get(f"/api/inventory/{product_id}", headers=admin_headers)
    assert stock.json()["data"]["quantity"] == 1


def test_health_and_request_id(app_client):
    response = app_client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "domain": "storefront"}
    assert response.headers["X-Request-ID"] == "req-42"
