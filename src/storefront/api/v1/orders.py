"""Order management and checkout API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from storefront.api.deps import AdminUser, CartStoreDep, OrderServiceDep
from storefront.models.order import OrderStatus
from storefront.schemas.order import (
    CheckoutRequest,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
)

router = APIRouter()


@router.post("/checkout", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def checkout(
    customer: CheckoutRequest,
    store: CartStoreDep,
    service: OrderServiceDep,
):
    """Place an order for the current cart and empty it."""
    cart = await store.load()
    order = await service.checkout(cart, customer)
    await store.clear()
    return order


@router.get("", response_model=OrderListResponse)
async def list_orders(
    service: OrderServiceDep,
    admin: AdminUser,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    order_status: OrderStatus | None = Query(None, alias="status"),
):
    """Get orders, newest first (admin only)."""
    orders, pagination = await service.list_orders(page=page, limit=limit, status=order_status)
    return OrderListResponse(data=orders, pagination=pagination)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: UUID, service: OrderServiceDep, admin: AdminUser):
    """Get order by ID (admin only)."""
    return await service.get_order(order_id)


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    update: OrderStatusUpdate,
    service: OrderServiceDep,
    admin: AdminUser,
):
    """Change an order's status (admin only)."""
    return await service.update_status(order_id, update.status)
