"""Ordering domain API package."""

from storefront.ordering.api.routes import admin_router, router

__all__ = ["router", "admin_router"]
