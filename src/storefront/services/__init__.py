"""Business logic services."""

from storefront.services.cart_service import CartStore
from storefront.services.gateway import CatalogGateway
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService

__all__ = [
    "CartStore",
    "CatalogGateway",
    "OrderService",
    "ProductService",
]
