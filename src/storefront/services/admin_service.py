"""Admin dashboard workflow for product management.

Each action runs the same sequence as the dashboard form: validate, call the
catalog service, then re-fetch the admin listing so the caller can redraw it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from storefront.core.exceptions import ValidationError
from storefront.models.product import Product
from storefront.schemas.base import Pagination, format_validation_error
from storefront.schemas.product import ProductFilter, ProductUpdateRequest
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)

ADMIN_PAGE_SIZE = 10


@dataclass
class AdminResult:
    message: str
    product: Product | None
    items: list[Product]
    pagination: Pagination


class ProductAdminWorkflow:
    """Sequences admin product actions over the catalog service."""

    def __init__(self, service: ProductService, page_size: int = ADMIN_PAGE_SIZE):
        self.service = service
        self.page_size = page_size

    async def _refresh(self, message: str, product: Product | None, page: int) -> AdminResult:
        listing = await self.service.list_products(
            ProductFilter(page=page, limit=self.page_size, active=None),
            public=False,
        )
        return AdminResult(
            message=message,
            product=product,
            items=listing.items,
            pagination=listing.pagination,
        )

    async def submit(self, form: Mapping[str, Any], page: int = 1) -> AdminResult:
        """Create or update a product from the dashboard form.

        A form carrying an ``id`` edits that product; any other form creates one.
        """
        if form.get("id"):
            try:
                request = ProductUpdateRequest.model_validate(dict(form))
            except PydanticValidationError as e:
                raise ValidationError(format_validation_error(e)) from e
            product = await self.service.update_product(request.id, request)
            return await self._refresh("Product updated successfully", product, page)

        data = {key: value for key, value in form.items() if key != "id"}
        product = await self.service.create_product(data)
        return await self._refresh("Product created successfully", product, page)

    async def remove(self, product_id: UUID, page: int = 1) -> AdminResult:
        await self.service.delete_product(product_id)
        return await self._refresh("Product deleted successfully", None, page)

    async def toggle_active(self, product_id: UUID, page: int = 1) -> AdminResult:
        """Flip a product's storefront visibility."""
        current = await self.service.get_product(product_id)
        product = await self.service.set_active(product_id, not current.is_active)
        state = "activated" if product.is_active else "deactivated"
        logger.info(f"Product {product_id} {state}")
        return await self._refresh(f"Product {state} successfully", product, page)
