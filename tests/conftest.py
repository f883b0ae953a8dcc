"""Pytest configuration and fixtures for testing."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from storefront.api import deps
from storefront.core.security import create_access_token
from storefront.models import Product
from storefront.services.cart_service import CartStore, InMemoryKeyValueStore
from storefront.services.gateway import CatalogGateway
from storefront.services.product_service import ProductService


# Decoded token claims are cached per process
@pytest.fixture(autouse=True)
def clear_token_cache():
    """Keep token claim cache entries from leaking between tests."""
    deps._token_cache.clear()
    yield
    deps._token_cache.clear()


# Mock Redis client fixture
@pytest.fixture
def mock_redis() -> AsyncMock:
    """Create a mock Redis client."""
    redis = AsyncMock()

    # Mock common Redis operations
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)

    return redis


# Mock catalog gateway fixture
@pytest.fixture
def mock_gateway() -> AsyncMock:
    """Create a mock catalog gateway with empty results."""
    gateway = AsyncMock(spec=CatalogGateway)

    gateway.find = AsyncMock(return_value=[])
    gateway.count = AsyncMock(return_value=0)
    gateway.get = AsyncMock(return_value=None)
    gateway.get_by_slug = AsyncMock(return_value=None)
    gateway.count_order_items = AsyncMock(return_value=0)
    gateway.delete = AsyncMock(return_value=True)
    gateway.distinct_categories = AsyncMock(return_value=[])

    return gateway


@pytest.fixture
def product_service(mock_gateway: AsyncMock) -> ProductService:
    return ProductService(mock_gateway)


# Product factory fixture
@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Build unsaved Product instances with every column populated."""
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(**overrides: Any) -> Product:
        counter["n"] += 1
        name = overrides.pop("name", f"Test Product {counter['n']}")
        fields = {
            "id": uuid4(),
            "name": name,
            "slug": name.lower().replace(" ", "-"),
            "description": "A product for tests",
            "price": Decimal("20.00"),
            "sale_price": None,
            "stock": 10,
            "image_urls": ["/uploads/test.jpg"],
            "is_active": True,
            "is_featured": False,
            "category": "Kitchen",
            "tags": [],
            "created_at": created + timedelta(minutes=counter["n"]),
            "updated_at": created + timedelta(minutes=counter["n"]),
        }
        fields.update(overrides)
        return Product(**fields)

    return _make


@pytest.fixture
def mock_product(make_product: Callable[..., Product]) -> Product:
    """Create an active product priced at 20.00 with no sale."""
    return make_product(name="Red Mug")


# Cart store fixtures
@pytest.fixture
def memory_backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def cart_store(memory_backend: InMemoryKeyValueStore) -> CartStore:
    return CartStore(memory_backend, "test-cart")


# Token fixtures
@pytest.fixture
def admin_token() -> str:
    return create_access_token({"sub": "admin-1", "email": "admin@test.com", "role": "admin"})


@pytest.fixture
def shopper_token() -> str:
    return create_access_token({"sub": "shopper-1", "email": "shopper@test.com"})


@pytest.fixture
def admin_headers(admin_token: str) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def shopper_headers(shopper_token: str) -> dict:
    return {"Authorization": f"Bearer {shopper_token}"}
