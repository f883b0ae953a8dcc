"""Order service for order management and checkout."""

import logging
import secrets
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError
from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.models.product import Product
from storefront.schemas.base import Pagination
from storefront.schemas.cart import Cart
from storefront.schemas.order import CheckoutRequest

logger = logging.getLogger(__name__)


def generate_order_number() -> str:
    """Human-facing order number, e.g. ``ORD-20261019-3F9A1C``."""
    today = datetime.now(timezone.utc).strftime("%Y%m%d")
    return f"ORD-{today}-{secrets.token_hex(3).upper()}"


class OrderService:
    """Service class for order operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_orders(
        self, page: int = 1, limit: int = 10, status: OrderStatus | None = None
    ) -> tuple[list[Order], Pagination]:
        """Get orders, newest first.

        Args:
            page: 1-based page number
            limit: Page size
            status: Only orders in this status

        Returns:
            Tuple of (orders list, pagination)
        """
        conditions = []
        if status is not None:
            conditions.append(Order.status == status.value)

        # Get total count
        count_result = await self.db.execute(
            select(func.count(Order.id)).where(*conditions)
        )
        total = count_result.scalar_one()

        # Get orders
        result = await self.db.execute(
            select(Order)
            .where(*conditions)
            .order_by(Order.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        orders = list(result.scalars().all())

        return orders, Pagination.build(page=page, limit=limit, total=total)

    async def get_order(self, order_id: UUID) -> Order:
        result = await self.db.execute(select(Order).where(Order.id == order_id))
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFoundError("Order not found")
        return order

    async def update_status(self, order_id: UUID, status: OrderStatus | str) -> Order:
        """Change an order's status.

        Raises:
            ValidationError: Unknown status
            NotFoundError: Order does not exist
        """
        try:
            status = OrderStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown order status: {status}")

        order = await self.get_order(order_id)
        order.status = status.value
        await self.db.commit()
        await self.db.refresh(order)
        logger.info(f"Order {order.order_number} moved to {status.value}")
        return order

    async def checkout(self, cart: Cart, customer: CheckoutRequest) -> Order:
        """Place an order for the cart contents.

        Every line is re-checked against the live catalog: lines are charged
        the current effective price, not the price snapshotted in the cart,
        and stock is decremented with a conditional UPDATE in the same
        transaction as the order insert.

        Args:
            cart: Cart to check out
            customer: Customer and shipping details

        Returns:
            Created order

        Raises:
            ValidationError: Empty cart, or a product is missing or inactive
            ConflictError: Not enough stock for a line
        """
        if not cart.items:
            raise ValidationError("Cart is empty")

        try:
            product_ids = [UUID(item.product_id) for item in cart.items]
        except ValueError:
            raise ValidationError("Cart contains an unknown product")
        result = await self.db.execute(select(Product).where(Product.id.in_(product_ids)))
        products = {str(p.id): p for p in result.scalars().all()}

        order_items = []
        total = Decimal("0")
        for item in cart.items:
            product = products.get(item.product_id)
            if product is None or not product.is_active:
                raise ValidationError(f"{item.name} is no longer available")
            if product.stock < item.quantity:
                raise ConflictError(f"Only {product.stock} of {product.name} left in stock")

            price = product.effective_price
            if price != item.price:
                logger.info(f"Repriced {product.slug} at checkout: {item.price} -> {price}")
            total += price * item.quantity
            order_items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    product_slug=product.slug,
                    product_image=product.image_urls[0] if product.image_urls else None,
                    price=price,
                    quantity=item.quantity,
                )
            )

        try:
            for order_item in order_items:
                decremented = await self.db.execute(
                    update(Product)
                    .where(Product.id == order_item.product_id)
                    .where(Product.stock >= order_item.quantity)
                    .values(stock=Product.stock - order_item.quantity)
                    .returning(Product.stock)
                )
                if decremented.first() is None:
                    await self.db.rollback()
                    raise ConflictError(f"{order_item.product_name} sold out during checkout")

            order = Order(
                order_number=generate_order_number(),
                status=OrderStatus.PENDING.value,
                total=total,
                customer_name=customer.customer_name,
                customer_email=customer.customer_email,
                customer_phone=customer.customer_phone,
                shipping_address=customer.shipping_address.model_dump(by_alias=True),
                payment_method=customer.payment_method,
                payment_status="UNPAID",
                items=order_items,
            )
            self.db.add(order)
            await self.db.commit()
            await self.db.refresh(order)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Database error during checkout")
            raise PersistenceError("Failed to place order") from e

        logger.info(f"Placed order {order.order_number} ({len(order_items)} lines, total {total})")
        return order
