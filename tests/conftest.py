import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config overlay before the domain is imported, so `domain.toml`
    is read with the right environment.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import load_elements, storefront

    load_elements()
    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Run every test inside the domain context and wipe all stores afterwards."""
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    """Create an active product with an inventory record; returns the product id."""
    from protean import current_domain
    from storefront.catalogue.product.management import CreateProduct

    def _make(name="Basmati Rice", price=5000, stock=10, low_stock_alert=2):
        return current_domain.process(
            CreateProduct(name=name, price=price, initial_stock=stock, low_stock_alert=low_stock_alert),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def make_discount_coupon():
    from protean import current_domain
    from storefront.coupons.coupon.management import CreateCoupon

    def _make(code="SAVE10", discount_amount=1000, min_order_amount=5000):
        return current_domain.process(
            CreateCoupon(
                coupon_type="discount_code",
                code=code,
                discount_amount=discount_amount,
                min_order_amount=min_order_amount,
            ),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def admin_headers():
    from storefront.identity.auth import create_access_token

    return {"Authorization": f"Bearer {create_access_token('admin-1', 'ADMIN')}"}


@pytest.fixture()
def customer_headers():
    from storefront.identity.auth import create_access_token

    return {"Authorization": f"Bearer {create_access_token('user-1', 'CUSTOMER')}"}


CUSTOMER = {"full_name": "Asha Rao", "phone": "9876543210", "address": "12 Lake Road", "city": "Pune"}


@pytest.fixture()
def order_placer():
    """Submit an order for ``lines`` of ``(product_id, quantity, unit_price)`` with consistent totals."""
    import json

    from protean import current_domain
    from storefront.ordering.order.placement import PlaceOrder

    def _place(lines, delivery_fee=0, discount=0, coupon_code=None, user_id=None, customer=None):
        item_total = sum(quantity * unit_price for _, quantity, unit_price in lines)
        command = PlaceOrder(
            customer_info=json.dumps(customer or CUSTOMER),
            cart_items=json.dumps(
                [
                    {"product_id": product_id, "quantity": quantity, "unit_price": unit_price}
                    for product_id, quantity, unit_price in lines
                ]
            ),
            item_total=item_total,
            delivery_fee=delivery_fee,
            discount=discount,
            grand_total=item_total + delivery_fee - discount,
            coupon_code=coupon_code,
            user_id=user_id,
        )
        return current_domain.process(command, asynchronous=False)

    return _place


@pytest.fixture()
def client():
    """TestClient over every router, mounted under /api the way the application mounts them."""
    from fastapi import FastAPI, Request
    from fastapi.testclient import TestClient
    from storefront.catalogue.api import category_router, grain_router, product_router
    from storefront.coupons.api import router as coupon_router
    from storefront.domain import storefront
    from storefront.identity.api import router as user_router
    from storefront.inventory.api import router as inventory_router
    from storefront.ordering.api import router as order_router
    from storefront.promos.api import router as promo_router
    from storefront.reporting.api import router as dashboard_router
    from storefront.shared.api import register_error_handlers

    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with storefront.domain_context():
            return await call_next(request)

    register_error_handlers(app)
    for router in (
        user_router,
        category_router,
        product_router,
        grain_router,
        inventory_router,
        coupon_router,
        order_router,
        promo_router,
        dashboard_router,
    ):
        app.include_router(router, prefix="/api")

    return TestClient(app, raise_server_exceptions=False)
