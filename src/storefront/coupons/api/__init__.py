"""Coupons API package."""

from storefront.coupons.api.routes import router

__all__ = ["router"]
