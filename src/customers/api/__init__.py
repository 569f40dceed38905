"""Customers domain API package."""

from customers.api.routes import router

__all__ = ["router"]
