"""Storefront FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
Every request runs inside the storefront domain context and carries a
request id that is bound into the structured log context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml.
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.domain import load_elements, storefront
from storefront.identity.auth import jwt_secret
from storefront.shared.api import register_error_handlers
from storefront.utils.logging import add_context, clear_context, get_logger

load_elements()
storefront.init()

# Refuse to start without a token signing secret
jwt_secret()

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="E-commerce backend: catalogue, inventory, coupons and orders",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and tag logs with a request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    clear_context()
    add_context(request_id=request_id, method=request.method, path=request.url.path)

    with storefront.domain_context():
        response = await call_next(request)

    response.headers["X-Request-ID"] = request_id
    logger.debug("request_completed", status_code=response.status_code)
    return response


register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.catalogue.api import category_router, grain_router, product_router  # noqa: E402
from storefront.coupons.api import router as coupon_router  # noqa: E402
from storefront.identity.api import router as user_router  # noqa: E402
from storefront.inventory.api import router as inventory_router  # noqa: E402
from storefront.ordering.api import router as order_router  # noqa: E402
from storefront.promos.api import router as promo_router  # noqa: E402
from storefront.reporting.api import router as dashboard_router  # noqa: E402

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


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
