"""Cart schemas.

A cart is a value: every operation in ``cart_service`` returns a new
``Cart`` rather than mutating the one it was given.
"""

from uuid import UUID

from pydantic import Field

from storefront.schemas.base import APIModel, Money, RequestModel


class CartItem(APIModel):
    """One cart line, with the price snapshotted when the item was added."""

    product_id: str
    name: str
    price: Money
    quantity: int = Field(..., ge=1)
    image_url: str | None = None

    model_config = {"frozen": True}


class Cart(APIModel):
    """Client-held cart, at most one line per product."""

    items: tuple[CartItem, ...] = ()

    model_config = {"frozen": True}


class CartResponse(APIModel):
    """Schema for cart response."""

    cart_id: str
    items: list[CartItem]
    subtotal: Money
    item_count: int


class CartItemAdd(RequestModel):
    """Schema for adding a product to the cart."""

    product_id: UUID
    quantity: int = Field(1, ge=1)


class CartQuantityUpdate(RequestModel):
    """Schema for changing a cart line quantity; values below 1 are ignored."""

    quantity: int
