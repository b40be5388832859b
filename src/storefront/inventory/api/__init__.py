"""Inventory domain API package."""

from storefront.inventory.api.routes import router

__all__ = ["router"]
