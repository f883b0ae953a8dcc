"""Pydantic schemas for request/response validation."""

from storefront.schemas.admin import AdminResult, UploadResponse
from storefront.schemas.base import Pagination
from storefront.schemas.cart import Cart, CartItem, CartItemAdd, CartQuantityUpdate, CartResponse
from storefront.schemas.order import (
    CheckoutRequest,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    ShippingAddress,
)
from storefront.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductFilter,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    ProductUpdateRequest,
)
from storefront.schemas.user import Identity, MeResponse

__all__ = [
    "Pagination",
    "ProductCreate",
    "ProductUpdate",
    "ProductUpdateRequest",
    "ProductFilter",
    "ProductResponse",
    "ProductListResponse",
    "ProductDetailResponse",
    "Cart",
    "CartItem",
    "CartItemAdd",
    "CartQuantityUpdate",
    "CartResponse",
    "CheckoutRequest",
    "ShippingAddress",
    "OrderResponse",
    "OrderListResponse",
    "OrderStatusUpdate",
    "Identity",
    "MeResponse",
    "AdminResult",
    "UploadResponse",
]
