"""Integration tests for the error envelope shared by every router."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.exceptions import ExpectedVersionError
from storefront.shared.api import register_error_handlers
from storefront.shared.errors import ConflictError


@pytest.fixture()
def bare_client():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database on fire")

    @app.get("/stale")
    async def stale():
        raise ExpectedVersionError("Wrong expected version: 3 (Aggregate: Inventory, Version: 4)")

    @app.get("/taken")
    async def taken():
        raise ConflictError({"code": ["Coupon code SAVE10 already exists"]}, code="DUPLICATE_COUPON_CODE")

    return TestClient(app, raise_server_exceptions=False)


def test_unexpected_errors_do_not_leak(bare_client):
    response = bare_client.get("/boom")
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
    }


def test_version_conflict_is_a_409(bare_client):
    response = bare_client.get("/stale")
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONCURRENT_MODIFICATION"


def test_conflict_message_is_flattened(bare_client):
    response = bare_client.get("/taken")
    assert response.status_code == 409
    assert response.json()["error"] == {
        "code": "DUPLICATE_COUPON_CODE",
        "message": "code: Coupon code SAVE10 already exists",
    }


def test_unknown_route(bare_client):
    response = bare_client.get("/nowhere")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "HTTP_ERROR"
