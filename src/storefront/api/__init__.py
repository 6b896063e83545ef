"""Storefront API package."""

from storefront.api.routes import order_router, product_router

__all__ = ["order_router", "product_router"]
