"""Product schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar
from uuid import UUID

from pydantic import Field, StringConstraints, field_validator, model_validator

from storefront.core.config import settings
from storefront.schemas.base import APIModel, Money, Pagination, RequestModel, blank_to_none

ProductName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
# Matches the Numeric(10, 2) price columns
Price = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


def _unique_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    seen: dict[str, None] = {}
    for tag in tags:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


class ProductCreate(RequestModel):
    """Schema for product creation request."""

    name: ProductName
    price: Price
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    sale_price: Price | None = None
    stock: int = Field(0, ge=0)
    image_urls: list[str] = Field(default_factory=list)
    is_active: bool = True
    is_featured: bool = False
    category: str | None = Field(None, max_length=100)
    tags: list[str] = Field(default_factory=list)

    @field_validator("slug", "description", "sale_price", "category", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return blank_to_none(value)

    @field_validator("stock", mode="before")
    @classmethod
    def _blank_stock(cls, value: Any) -> Any:
        return 0 if blank_to_none(value) is None else value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        return _unique_tags(value)

    @model_validator(mode="after")
    def _sale_below_price(self) -> "ProductCreate":
        if self.sale_price is not None and self.sale_price >= self.price:
            raise ValueError("Sale price must be less than regular price")
        return self


class ProductUpdate(RequestModel):
    """Schema for partial product update.

    Only fields present in the payload are applied. ``salePrice`` and
    ``category`` may be cleared with null or an empty string; the cross-field
    sale price check needs the stored product and runs in the service.
    """

    name: ProductName | None = None
    slug: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: Price | None = None
    sale_price: Price | None = None
    stock: int | None = Field(None, ge=0)
    image_urls: list[str] | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    category: str | None = Field(None, max_length=100)
    tags: list[str] | None = None

    NON_NULLABLE: ClassVar[tuple[str, ...]] = (
        "name", "slug", "price", "stock", "image_urls", "is_active", "is_featured", "tags",
    )

    @field_validator("sale_price", "category", "description", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return blank_to_none(value)

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str] | None) -> list[str] | None:
        return _unique_tags(value)

    @model_validator(mode="after")
    def _required_fields_not_null(self) -> "ProductUpdate":
        for field in self.NON_NULLABLE:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the payload."""
        return self.model_dump(exclude_unset=True, exclude={"id"})


class ProductUpdateRequest(ProductUpdate):
    """Schema for ``PUT /products``: the update payload plus the product id."""

    id: UUID


class ProductFilter(RequestModel):
    """Filter, sort and pagination request for product listings."""

    page: int = Field(1, ge=1)
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1)
    category: str | None = None
    min_price: Decimal | None = Field(None, ge=0)
    max_price: Decimal | None = Field(None, ge=0)
    featured: bool | None = None
    sort: str | None = None
    search: str | None = None
    active: bool | None = True

    model_config = {"frozen": True}

    @field_validator("category", "min_price", "max_price", "featured", "sort", "search", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return blank_to_none(value)

    @field_validator("limit")
    @classmethod
    def _cap_limit(cls, value: int) -> int:
        return min(value, settings.MAX_PAGE_SIZE)

    @field_validator("search")
    @classmethod
    def _strip_search(cls, value: str | None) -> str | None:
        return value.strip() if value else value


class ProductResponse(APIModel):
    """Schema for product response."""

    id: UUID
    name: str
    slug: str
    description: str | None
    price: Money
    sale_price: Money | None
    stock: int
    image_urls: list[str]
    is_active: bool
    is_featured: bool
    category: str | None
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class ProductListResponse(APIModel):
    """Schema for product list response."""

    data: list[ProductResponse]
    pagination: Pagination


class ProductDetailResponse(APIModel):
    """Schema for the product detail page."""

    product: ProductResponse
    related: list[ProductResponse]


class CategoryListResponse(APIModel):
    data: list[str]


class MessageResponse(APIModel):
    message: str
