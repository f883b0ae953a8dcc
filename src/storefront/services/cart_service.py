"""Cart state manager.

The cart operations are pure functions over an immutable ``Cart`` value.
``CartStore`` binds a cart id to a key-value backend: it rebuilds the cart
from the backend before every operation and flushes the whole cart after
every mutation. There is no reconciliation with the catalog; prices are the
snapshots taken when items were added.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis

from storefront.core.config import settings
from storefront.core.exceptions import ValidationError
from storefront.schemas.cart import Cart, CartItem

logger = logging.getLogger(__name__)


def effective_price(price: Decimal, sale_price: Decimal | None) -> Decimal:
    """Sale price if present, else regular price."""
    return sale_price if sale_price is not None else price


def add_item(cart: Cart, product: Any, qty: int = 1) -> Cart:
    """Add a product to the cart.

    An existing line for the product has its quantity increased; otherwise a
    new line is appended with the product's current effective price.

    Args:
        cart: Current cart
        product: Object with id, name, price, sale_price and image_urls
        qty: Quantity to add

    Returns:
        New cart
    """
    if qty < 1:
        raise ValidationError("Quantity must be at least 1")

    product_id = str(product.id)
    if any(item.product_id == product_id for item in cart.items):
        return Cart(
            items=tuple(
                item.model_copy(update={"quantity": item.quantity + qty})
                if item.product_id == product_id
                else item
                for item in cart.items
            )
        )

    image_urls = getattr(product, "image_urls", None) or []
    new_item = CartItem(
        product_id=product_id,
        name=product.name,
        price=effective_price(product.price, product.sale_price),
        quantity=qty,
        image_url=image_urls[0] if image_urls else None,
    )
    return Cart(items=cart.items + (new_item,))


def update_quantity(cart: Cart, product_id: str, qty: int) -> Cart:
    """Replace a line's quantity; quantities below 1 leave the cart unchanged."""
    if qty < 1:
        return cart
    return Cart(
        items=tuple(
            item.model_copy(update={"quantity": qty}) if item.product_id == product_id else item
            for item in cart.items
        )
    )


def remove_item(cart: Cart, product_id: str) -> Cart:
    return Cart(items=tuple(item for item in cart.items if item.product_id != product_id))


def clear_cart(cart: Cart) -> Cart:
    return Cart()


def subtotal(cart: Cart) -> Decimal:
    """Sum of price * quantity over all lines."""
    return sum((item.price * item.quantity for item in cart.items), Decimal("0"))


def item_count(cart: Cart) -> int:
    return sum(item.quantity for item in cart.items)


# ==================== Storage Backends ====================


class KeyValueStore(Protocol):
    """String-keyed store holding serialized carts."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store for tests and local development."""

    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class RedisKeyValueStore:
    """Redis-backed store; entries expire after the configured cart lifetime."""

    def __init__(self, redis: Redis, ttl: int = settings.CART_TTL_SECONDS):
        self.redis = redis
        self.ttl = ttl

    async def get(self, key: str) -> str | None:
        return await self.redis.get(key)

    async def set(self, key: str, value: str) -> None:
        await self.redis.set(key, value, ex=self.ttl)

    async def delete(self, key: str) -> None:
        await self.redis.delete(key)


class CartStore:
    """Cart bound to one client-held cart id."""

    def __init__(self, backend: KeyValueStore, cart_id: str):
        self.backend = backend
        self.cart_id = cart_id

    @property
    def key(self) -> str:
        return f"{settings.CART_KEY_PREFIX}:{self.cart_id}"

    async def load(self) -> Cart:
        """Rebuild the cart from the backend; missing or corrupt data is an empty cart."""
        raw = await self.backend.get(self.key)
        if not raw:
            return Cart()
        try:
            return Cart.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.warning(f"Discarding unreadable cart {self.cart_id}: {e}")
            return Cart()

    async def save(self, cart: Cart) -> Cart:
        # Decimals stored as strings to keep exact prices
        await self.backend.set(self.key, json.dumps(cart.model_dump(), default=str))
        return cart

    async def add_item(self, product: Any, qty: int = 1) -> Cart:
        return await self.save(add_item(await self.load(), product, qty))

    async def update_quantity(self, product_id: str, qty: int) -> Cart:
        return await self.save(update_quantity(await self.load(), product_id, qty))

    async def remove_item(self, product_id: str) -> Cart:
        return await self.save(remove_item(await self.load(), product_id))

    async def clear(self) -> Cart:
        cart = clear_cart(await self.load())
        await self.backend.delete(self.key)
        return cart
