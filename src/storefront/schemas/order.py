"""Order schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from storefront.models.order import OrderStatus
from storefront.schemas.base import APIModel, Money, Pagination, RequestModel


class ShippingAddress(RequestModel):
    """Schema for a shipping address."""

    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field("", max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)


class CheckoutRequest(RequestModel):
    """Schema for checkout request; the cart comes from the cart store."""

    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str | None = Field(None, max_length=50)
    shipping_address: ShippingAddress
    payment_method: str | None = Field(None, max_length=50)


class OrderStatusUpdate(RequestModel):
    """Schema for order status change."""

    status: OrderStatus


class OrderItemResponse(APIModel):
    """Schema for order item response."""

    product_id: UUID
    product_name: str
    product_slug: str
    product_image: str | None
    price: Money
    quantity: int


class OrderResponse(APIModel):
    """Schema for order response."""

    id: UUID
    order_number: str
    status: OrderStatus
    total: Money
    customer_name: str
    customer_email: str
    customer_phone: str | None
    shipping_address: dict
    items: list[OrderItemResponse]
    payment_method: str | None
    payment_status: str | None
    created_at: datetime
    updated_at: datetime


class OrderListResponse(APIModel):
    """Schema for order list response."""

    data: list[OrderResponse]
    pagination: Pagination
