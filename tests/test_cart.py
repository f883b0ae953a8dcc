"""Tests for the cart state manager.

Tests verify:
- Pure cart operations return new carts and never mutate their input
- Price snapshots use the effective price at add time
- CartStore persistence against in-memory and Redis backends
"""

import json
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from storefront.core.config import settings
from storefront.core.exceptions import ValidationError
from storefront.schemas.cart import Cart
from storefront.services import cart_service
from storefront.services.cart_service import CartStore, RedisKeyValueStore


class TestCartOperations:
    """Test the pure cart functions."""

    def test_add_new_item(self, mock_product):
        cart = cart_service.add_item(Cart(), mock_product, 2)

        assert len(cart.items) == 1
        item = cart.items[0]
        assert item.product_id == str(mock_product.id)
        assert item.name == "Red Mug"
        assert item.price == Decimal("20.00")
        assert item.quantity == 2
        assert item.image_url == "/uploads/test.jpg"

    def test_add_snapshots_sale_price(self, make_product):
        product = make_product(price=Decimal("20"), sale_price=Decimal("15"))

        cart = cart_service.add_item(Cart(), product)

        assert cart.items[0].price == Decimal("15")

    def test_add_without_images(self, make_product):
        cart = cart_service.add_item(Cart(), make_product(image_urls=[]))
        assert cart.items[0].image_url is None

    def test_add_existing_increments_quantity(self, mock_product):
        """Test one line per product; re-adding sums quantities."""
        cart = cart_service.add_item(Cart(), mock_product, 1)
        cart = cart_service.add_item(cart, mock_product, 3)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 4

    def test_add_keeps_original_snapshot(self, mock_product):
        """Test re-adding after a price change keeps the first snapshot."""
        cart = cart_service.add_item(Cart(), mock_product)
        mock_product.price = Decimal("99.00")

        cart = cart_service.add_item(cart, mock_product)

        assert cart.items[0].price == Decimal("20.00")

    def test_add_preserves_order(self, make_product):
        first, second = make_product(), make_product()

        cart = cart_service.add_item(cart_service.add_item(Cart(), first), second)

        assert [i.product_id for i in cart.items] == [str(first.id), str(second.id)]

    @pytest.mark.parametrize("qty", [0, -1])
    def test_add_rejects_non_positive_quantity(self, mock_product, qty):
        with pytest.raises(ValidationError):
            cart_service.add_item(Cart(), mock_product, qty)

    def test_operations_do_not_mutate_input(self, mock_product):
        original = cart_service.add_item(Cart(), mock_product, 1)

        cart_service.add_item(original, mock_product, 5)
        cart_service.update_quantity(original, str(mock_product.id), 9)
        cart_service.remove_item(original, str(mock_product.id))
        cart_service.clear_cart(original)

        assert len(original.items) == 1
        assert original.items[0].quantity == 1

    def test_update_quantity(self, mock_product):
        cart = cart_service.add_item(Cart(), mock_product, 1)

        cart = cart_service.update_quantity(cart, str(mock_product.id), 7)

        assert cart.items[0].quantity == 7

    @pytest.mark.parametrize("qty", [0, -3])
    def test_update_below_one_is_noop(self, mock_product, qty):
        cart = cart_service.add_item(Cart(), mock_product, 2)

        updated = cart_service.update_quantity(cart, str(mock_product.id), qty)

        assert updated == cart

    def test_update_unknown_product_is_noop(self, mock_product):
        cart = cart_service.add_item(Cart(), mock_product, 2)
        assert cart_service.update_quantity(cart, "missing", 5) == cart

    def test_remove_item(self, make_product):
        keep, drop = make_product(), make_product()
        cart = cart_service.add_item(cart_service.add_item(Cart(), keep), drop)

        cart = cart_service.remove_item(cart, str(drop.id))

        assert [i.product_id for i in cart.items] == [str(keep.id)]

    def test_clear(self, mock_product):
        cart = cart_service.add_item(Cart(), mock_product, 2)
        assert cart_service.clear_cart(cart).items == ()

    def test_subtotal_and_count(self, make_product):
        cart = cart_service.add_item(Cart(), make_product(price=Decimal("10.50")), 2)
        cart = cart_service.add_item(
            cart, make_product(price=Decimal("20"), sale_price=Decimal("4.25")), 3
        )

        assert cart_service.subtotal(cart) == Decimal("33.75")
        assert cart_service.item_count(cart) == 5

    def test_empty_cart_totals(self):
        assert cart_service.subtotal(Cart()) == Decimal("0")
        assert cart_service.item_count(Cart()) == 0


class TestCartStore:
    """Test cart persistence through the key-value backend."""

    @pytest.mark.asyncio
    async def test_missing_cart_is_empty(self, cart_store):
        cart = await cart_store.load()
        assert cart.items == ()

    @pytest.mark.asyncio
    async def test_mutation_flushes_whole_cart(self, cart_store, memory_backend, mock_product):
        await cart_store.add_item(mock_product, 2)

        stored = json.loads(memory_backend.data[f"{settings.CART_KEY_PREFIX}:test-cart"])
        assert stored["items"][0]["product_id"] == str(mock_product.id)
        assert stored["items"][0]["quantity"] == 2
        assert Decimal(stored["items"][0]["price"]) == Decimal("20.00")

    @pytest.mark.asyncio
    async def test_state_survives_new_store(self, memory_backend, mock_product):
        """Test a cart is rebuilt from the backend by a fresh store instance."""
        await CartStore(memory_backend, "abc").add_item(mock_product, 3)

        cart = await CartStore(memory_backend, "abc").load()

        assert cart.items[0].quantity == 3
        assert cart.items[0].price == Decimal("20.00")

    @pytest.mark.asyncio
    async def test_carts_isolated_by_id(self, memory_backend, mock_product):
        await CartStore(memory_backend, "one").add_item(mock_product)

        assert (await CartStore(memory_backend, "two").load()).items == ()

    @pytest.mark.asyncio
    async def test_update_and_remove(self, cart_store, mock_product):
        product_id = str(mock_product.id)
        await cart_store.add_item(mock_product, 1)

        cart = await cart_store.update_quantity(product_id, 4)
        assert cart.items[0].quantity == 4

        cart = await cart_store.remove_item(product_id)
        assert cart.items == ()
        assert (await cart_store.load()).items == ()

    @pytest.mark.asyncio
    async def test_clear_deletes_key(self, cart_store, memory_backend, mock_product):
        await cart_store.add_item(mock_product)

        cart = await cart_store.clear()

        assert cart.items == ()
        assert memory_backend.data == {}

    @pytest.mark.asyncio
    async def test_clear_corrupt_cart(self, cart_store, memory_backend):
        """Test clearing an unreadable cart still empties it."""
        memory_backend.data[cart_store.key] = "{not json"

        cart = await cart_store.clear()

        assert cart.items == ()
        assert cart_store.key not in memory_backend.data

    @pytest.mark.asyncio
    async def test_corrupt_data_is_empty_cart(self, cart_store, memory_backend):
        memory_backend.data[cart_store.key] = "{not json"

        assert (await cart_store.load()).items == ()

    @pytest.mark.asyncio
    async def test_invalid_shape_is_empty_cart(self, cart_store, memory_backend):
        memory_backend.data[cart_store.key] = json.dumps({"items": [{"quantity": 0}]})

        assert (await cart_store.load()).items == ()


class TestRedisBackend:
    """Test the Redis key-value backend."""

    @pytest.mark.asyncio
    async def test_set_with_ttl(self, mock_redis):
        backend = RedisKeyValueStore(mock_redis, ttl=60)

        await backend.set("cart:1", "{}")

        mock_redis.set.assert_called_once_with("cart:1", "{}", ex=60)

    @pytest.mark.asyncio
    async def test_store_reads_from_redis(self, mock_redis, mock_product):
        stored = cart_service.add_item(Cart(), mock_product, 2)
        mock_redis.get = AsyncMock(
            return_value=json.dumps(stored.model_dump(), default=str)
        )
        store = CartStore(RedisKeyValueStore(mock_redis), "xyz")

        cart = await store.load()

        mock_redis.get.assert_called_once_with(f"{settings.CART_KEY_PREFIX}:xyz")
        assert cart == stored

    @pytest.mark.asyncio
    async def test_clear_deletes_redis_key(self, mock_redis):
        store = CartStore(RedisKeyValueStore(mock_redis), "xyz")

        await store.clear()

        mock_redis.delete.assert_called_once_with(f"{settings.CART_KEY_PREFIX}:xyz")
