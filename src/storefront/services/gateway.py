"""Catalog persistence gateway over the async SQLAlchemy session."""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import ConflictError, PersistenceError
from storefront.middleware.metrics import record_db_query
from storefront.models.order import OrderItem
from storefront.models.product import Product

logger = logging.getLogger(__name__)


class CatalogGateway:
    """Find/count/create/update/delete primitives for products.

    Every database error is logged here and re-raised as a domain error so
    callers never see driver details.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        start = time.perf_counter()
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Integrity error during {operation}: {e.orig}")
            if "slug" in str(e.orig):
                raise ConflictError("A product with this slug already exists") from e
            raise ConflictError("Operation conflicts with existing data") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Database error during {operation}")
            raise PersistenceError(f"Failed to {operation}") from e
        finally:
            record_db_query(operation, time.perf_counter() - start)

    async def find(
        self,
        predicate: ColumnElement[bool],
        order: Sequence[Any],
        offset: int,
        limit: int,
    ) -> list[Product]:
        """Get one page of products matching the predicate."""
        async with self._guard("fetch products"):
            result = await self.db.execute(
                select(Product)
                .where(predicate)
                .order_by(*order)
                .offset(offset)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def count(self, predicate: ColumnElement[bool]) -> int:
        """Count all products matching the predicate, ignoring any page window."""
        async with self._guard("count products"):
            result = await self.db.execute(
                select(func.count(Product.id)).where(predicate)
            )
            return result.scalar_one()

    async def get(self, product_id: UUID) -> Product | None:
        async with self._guard("fetch product"):
            result = await self.db.execute(
                select(Product).where(Product.id == product_id)
            )
            return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str, active_only: bool = True) -> Product | None:
        async with self._guard("fetch product"):
            stmt = select(Product).where(Product.slug == slug)
            if active_only:
                stmt = stmt.where(Product.is_active.is_(True))
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()

    async def create(self, record: dict[str, Any]) -> Product:
        """Insert a product and return it with server defaults loaded."""
        async with self._guard("create product"):
            product = Product(**record)
            self.db.add(product)
            await self.db.commit()
            await self.db.refresh(product)
            return product

    async def update(self, product_id: UUID, patch: dict[str, Any]) -> Product | None:
        """Apply a patch to a product.

        Returns:
            Updated product, or None if it does not exist
        """
        async with self._guard("update product"):
            result = await self.db.execute(
                select(Product).where(Product.id == product_id)
            )
            product = result.scalar_one_or_none()
            if product is None:
                return None
            for field, value in patch.items():
                setattr(product, field, value)
            await self.db.commit()
            await self.db.refresh(product)
            return product

    async def delete(self, product_id: UUID) -> bool:
        """Delete a product; returns False if nothing was deleted."""
        async with self._guard("delete product"):
            result = await self.db.execute(
                delete(Product).where(Product.id == product_id)
            )
            await self.db.commit()
            return result.rowcount > 0

    async def count_order_items(self, product_id: UUID) -> int:
        """Count order items referencing a product."""
        async with self._guard("count order items"):
            result = await self.db.execute(
                select(func.count(OrderItem.id)).where(OrderItem.product_id == product_id)
            )
            return result.scalar_one()

    async def distinct_categories(self, predicate: ColumnElement[bool]) -> list[str]:
        """Get distinct non-null categories among matching products."""
        async with self._guard("fetch categories"):
            result = await self.db.execute(
                select(Product.category)
                .where(predicate)
                .where(Product.category.is_not(None))
                .distinct()
                .order_by(Product.category)
            )
            return list(result.scalars().all())
