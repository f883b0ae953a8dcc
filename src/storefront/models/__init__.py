"""SQLAlchemy ORM models."""

from storefront.models.base import TimestampMixin
from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.models.product import Product

__all__ = [
    "TimestampMixin",
    "Product",
    "Order",
    "OrderItem",
    "OrderStatus",
]
