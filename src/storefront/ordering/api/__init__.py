"""Orders API package."""

from storefront.ordering.api.routes import router

__all__ = ["router"]
