"""Promos API package."""

from storefront.promos.api.routes import router

__all__ = ["router"]
