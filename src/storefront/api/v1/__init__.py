"""API v1 routers."""

from storefront.api.v1 import admin, cart, orders, products, uploads, users

__all__ = ["admin", "cart", "orders", "products", "uploads", "users"]
