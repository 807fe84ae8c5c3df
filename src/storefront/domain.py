"""Domain initialization and configuration."""

import importlib

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")

# Modules declaring aggregates, commands, handlers and projections. They live
# two package levels below this file, below the depth `init()` traverses.
ELEMENT_MODULES = (
    "storefront.catalogue.category.category",
    "storefront.catalogue.category.events",
    "storefront.catalogue.category.management",
    "storefront.catalogue.grain.grain",
    "storefront.catalogue.grain.management",
    "storefront.catalogue.product.events",
    "storefront.catalogue.product.product",
    "storefront.catalogue.product.management",
    "storefront.coupons.coupon.events",
    "storefront.coupons.coupon.coupon",
    "storefront.coupons.coupon.usage",
    "storefront.coupons.coupon.management",
    "storefront.coupons.coupon.application",
    "storefront.identity.user.user",
    "storefront.identity.user.management",
    "storefront.inventory.stock.events",
    "storefront.inventory.stock.inventory",
    "storefront.inventory.stock.repository",
    "storefront.inventory.stock.management",
    "storefront.inventory.stock.alerts",
    "storefront.ordering.order.events",
    "storefront.ordering.order.order",
    "storefront.ordering.order.repository",
    "storefront.ordering.order.placement",
    "storefront.ordering.order.lifecycle",
    "storefront.promos.promo.promo",
    "storefront.promos.promo.management",
    "storefront.reporting.projections.product_sales",
)


def load_elements():
    """Import every element module so the registry is complete before `init()`."""
    for module in ELEMENT_MODULES:
        importlib.import_module(module)


def get_setting(key, default=None):
    """Read an application setting from the `[custom]` config section."""
    custom = storefront.config.get("custom") or {}
    return custom.get(key, default)
