"""Identity domain API package."""

from storefront.identity.api.routes import admin_router, auth_router

__all__ = ["auth_router", "admin_router"]
