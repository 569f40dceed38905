"""Menu domain API package."""

from menu.api.routes import product_router

__all__ = ["product_router"]
