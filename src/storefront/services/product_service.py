"""Product catalog service: listings, CRUD and referential checks."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from storefront.core.config import settings
from storefront.core.exceptions import ConflictError, NotFoundError, ValidationError
from storefront.models.product import Product
from storefront.schemas.base import Pagination, format_validation_error
from storefront.schemas.product import ProductCreate, ProductFilter, ProductUpdate
from storefront.services import query_builder
from storefront.services.gateway import CatalogGateway

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Derive a URL slug: lowercase, whitespace runs replaced by hyphens."""
    return _WHITESPACE.sub("-", name.strip().lower())


def parse_filter(request: ProductFilter | Mapping[str, Any]) -> ProductFilter:
    if isinstance(request, ProductFilter):
        return request
    try:
        return ProductFilter.model_validate(dict(request))
    except PydanticValidationError as e:
        raise ValidationError(format_validation_error(e)) from e


@dataclass
class ProductPage:
    """One page of products plus pagination metadata."""

    items: list[Product]
    pagination: Pagination


class ProductService:
    """Service class for product catalog operations."""

    def __init__(self, gateway: CatalogGateway):
        self.gateway = gateway

    async def list_products(
        self,
        request: ProductFilter | Mapping[str, Any],
        *,
        public: bool = True,
    ) -> ProductPage:
        """Get a filtered, sorted page of products.

        The page fetch and the total count share one predicate but are not
        wrapped in a transaction; a concurrent write may make ``total``
        disagree with the page contents.

        Args:
            request: Filter request or raw query parameters
            public: Restrict to active products (storefront listing)

        Returns:
            ProductPage with items and pagination
        """
        query = query_builder.build(parse_filter(request), public=public)

        items = await self.gateway.find(query.predicate, query.order_by, query.offset, query.limit)
        total = await self.gateway.count(query.predicate)

        return ProductPage(
            items=items,
            pagination=Pagination.build(page=query.page, limit=query.limit, total=total),
        )

    async def get_product(self, product_id: UUID) -> Product:
        product = await self.gateway.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    async def get_product_by_slug(self, slug: str) -> Product:
        """Get an active product for the product detail page."""
        product = await self.gateway.get_by_slug(slug, active_only=True)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    async def get_related_products(
        self, product: Product, limit: int = settings.RELATED_PRODUCTS_LIMIT
    ) -> list[Product]:
        """Get other active products in the same category."""
        if not product.category:
            return []
        query = query_builder.build(ProductFilter(category=product.category, limit=limit + 1))
        candidates = await self.gateway.find(query.predicate, query.order_by, 0, limit + 1)
        return [p for p in candidates if p.id != product.id][:limit]

    async def list_categories(self) -> list[str]:
        """Get distinct categories among active products."""
        return await self.gateway.distinct_categories(
            query_builder.build_predicate(ProductFilter(), public=True)
        )

    async def create_product(self, payload: ProductCreate | Mapping[str, Any]) -> Product:
        """Validate and create a product.

        Args:
            payload: Parsed create request or raw request body

        Returns:
            Created product

        Raises:
            ValidationError: Missing name/price, invalid values, or
                sale price not below price
        """
        if not isinstance(payload, ProductCreate):
            if not _present(payload, "name") or not _present(payload, "price"):
                raise ValidationError("Name and price are required")
            try:
                payload = ProductCreate.model_validate(dict(payload))
            except PydanticValidationError as e:
                raise ValidationError(format_validation_error(e)) from e

        record = payload.model_dump()
        record["slug"] = payload.slug or slugify(payload.name)

        product = await self.gateway.create(record)
        logger.info(f"Created product {product.id} ({product.slug})")
        return product

    async def update_product(
        self, product_id: UUID, payload: ProductUpdate | Mapping[str, Any]
    ) -> Product:
        """Apply a partial update to a product.

        Only fields present in the payload change. The sale price invariant is
        checked against the merged result (new value if given, else stored).

        Raises:
            NotFoundError: Product does not exist
            ValidationError: Invalid field values or sale price not below price
        """
        if not isinstance(payload, ProductUpdate):
            try:
                payload = ProductUpdate.model_validate(dict(payload))
            except PydanticValidationError as e:
                raise ValidationError(format_validation_error(e)) from e

        existing = await self.gateway.get(product_id)
        if existing is None:
            raise NotFoundError("Product not found")

        changes = payload.changes()
        price = changes.get("price", existing.price)
        sale_price = changes.get("sale_price", existing.sale_price)
        if sale_price is not None and sale_price >= price:
            raise ValidationError("Sale price must be less than regular price")

        product = await self.gateway.update(product_id, changes)
        if product is None:
            raise NotFoundError("Product not found")
        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return product

    async def set_active(self, product_id: UUID, is_active: bool) -> Product:
        return await self.update_product(product_id, ProductUpdate(is_active=is_active))

    async def delete_product(self, product_id: UUID) -> None:
        """Delete a product that no order references.

        The reference check is a read before the delete, not atomic with it;
        the ``order_items`` foreign key still rejects a racing insert.

        Raises:
            ConflictError: Product is referenced by order items
            NotFoundError: Product does not exist
        """
        references = await self.gateway.count_order_items(product_id)
        if references > 0:
            raise ConflictError("Product cannot be deleted as it exists in orders")

        deleted = await self.gateway.delete(product_id)
        if not deleted:
            raise NotFoundError("Product not found")
        logger.info(f"Deleted product {product_id}")


def _present(payload: Mapping[str, Any], field: str) -> bool:
    value = payload.get(field)
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None
