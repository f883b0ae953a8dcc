"""API dependencies for identity, database access and services."""

import hashlib
import time
import uuid
from typing import Annotated, Any

from cachetools import TTLCache
from fastapi import Depends, Header, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import get_db
from storefront.core.redis import get_redis
from storefront.core.security import decode_access_token
from storefront.schemas.user import Identity
from storefront.services.admin_service import ProductAdminWorkflow
from storefront.services.cart_service import CartStore, RedisKeyValueStore
from storefront.services.gateway import CatalogGateway
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.storage_service import ImageStorage, LocalImageStorage

security = HTTPBearer(auto_error=False)

CART_HEADER = "X-Cart-Id"

# Decoded JWT claims keyed by token digest
JWT_CACHE_TTL = 10
_token_cache: TTLCache = TTLCache(maxsize=10_000, ttl=JWT_CACHE_TTL)


def _decode_cached(token: str) -> dict[str, Any] | None:
    cache_key = hashlib.sha256(token.encode()).hexdigest()
    payload = _token_cache.get(cache_key)
    if payload is None:
        payload = decode_access_token(token)
        if payload:
            _token_cache[cache_key] = payload
    elif payload.get("exp", 0) <= time.time():
        # Token expired while cached
        _token_cache.pop(cache_key, None)
        return None
    return payload


def _identity_from_token(token: str) -> Identity:
    payload = _decode_cached(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Identity(
        user_id=str(user_id),
        email=payload.get("email"),
        role=payload.get("role", "customer"),
    )


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Identity | None:
    """Get the caller's identity if a bearer token was sent."""
    if credentials is None:
        return None
    return _identity_from_token(credentials.credentials)


async def get_current_user(
    user: Annotated[Identity | None, Depends(get_optional_user)],
) -> Identity:
    """Get current authenticated user.

    Raises:
        HTTPException: If no valid token was sent
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_admin_user(
    current_user: Annotated[Identity, Depends(get_current_user)],
) -> Identity:
    """Get current user and verify they are an admin.

    Raises:
        HTTPException: If user is not an admin
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[Identity, Depends(get_current_user)]
OptionalUser = Annotated[Identity | None, Depends(get_optional_user)]
AdminUser = Annotated[Identity, Depends(get_current_admin_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]


# =============================================================================
# Service dependency injection
# =============================================================================


async def get_product_service(db: DbSession) -> ProductService:
    return ProductService(CatalogGateway(db))


async def get_admin_workflow(
    service: Annotated[ProductService, Depends(get_product_service)],
) -> ProductAdminWorkflow:
    return ProductAdminWorkflow(service)


async def get_order_service(db: DbSession) -> OrderService:
    return OrderService(db)


async def get_cart_store(
    response: Response,
    cart_id: Annotated[str | None, Header(alias=CART_HEADER)] = None,
) -> CartStore:
    """Get the cart store for the client-held cart id.

    A new id is issued (and echoed in the response header) when the client
    has none yet.
    """
    if not cart_id:
        cart_id = uuid.uuid4().hex
    response.headers[CART_HEADER] = cart_id
    redis = await get_redis()
    return CartStore(RedisKeyValueStore(redis), cart_id)


def get_image_storage() -> ImageStorage:
    return LocalImageStorage()


ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
AdminWorkflowDep = Annotated[ProductAdminWorkflow, Depends(get_admin_workflow)]
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
CartStoreDep = Annotated[CartStore, Depends(get_cart_store)]
ImageStorageDep = Annotated[ImageStorage, Depends(get_image_storage)]
