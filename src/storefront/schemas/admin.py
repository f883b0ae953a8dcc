"""Admin dashboard schemas."""

from storefront.schemas.base import APIModel, Pagination
from storefront.schemas.product import ProductResponse


class AdminResult(APIModel):
    """Outcome of an admin action plus the refreshed product listing."""

    message: str
    product: ProductResponse | None = None
    data: list[ProductResponse]
    pagination: Pagination


class UploadResponse(APIModel):
    """Schema for uploaded image URLs."""

    urls: list[str]
