"""Product catalog API endpoints."""

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Query, status

from storefront.api.deps import AdminUser, OptionalUser, ProductServiceDep
from storefront.core.exceptions import ValidationError
from storefront.schemas.product import (
    CategoryListResponse,
    MessageResponse,
    ProductCreate,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(
    service: ProductServiceDep,
    user: OptionalUser,
    page: int = Query(1),
    limit: int | None = Query(None),
    category: str | None = Query(None),
    min_price: Decimal | None = Query(None, alias="minPrice"),
    max_price: Decimal | None = Query(None, alias="maxPrice"),
    featured: bool | None = Query(None),
    sort: str | None = Query(None),
    search: str | None = Query(None),
    active: bool | None = Query(None),
):
    """Get a filtered, sorted page of products.

    Shoppers only ever see active products; admins may pass ``active`` to
    list inactive ones, or omit it to list everything.
    """
    is_admin = user is not None and user.is_admin
    params = {
        "page": page,
        "category": category,
        "min_price": min_price,
        "max_price": max_price,
        "featured": featured,
        "sort": sort,
        "search": search,
        "active": active if is_admin else True,
    }
    if limit is not None:
        params["limit"] = limit

    result = await service.list_products(params, public=not is_admin)
    return ProductListResponse(data=result.items, pagination=result.pagination)


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(service: ProductServiceDep):
    """Get categories of active products."""
    return CategoryListResponse(data=await service.list_categories())


@router.get("/slug/{slug}", response_model=ProductDetailResponse)
async def get_product_by_slug(slug: str, service: ProductServiceDep):
    """Get an active product with related products from its category."""
    product = await service.get_product_by_slug(slug)
    related = await service.get_related_products(product)
    return ProductDetailResponse(product=product, related=related)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: UUID, service: ProductServiceDep):
    """Get product by ID."""
    return await service.get_product(product_id)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    service: ProductServiceDep,
    admin: AdminUser,
):
    """Create a new product (admin only)."""
    return await service.create_product(product_data)


@router.put("", response_model=ProductResponse)
async def update_product(
    product_data: ProductUpdateRequest,
    service: ProductServiceDep,
    admin: AdminUser,
):
    """Update the fields present in the body of product ``id`` (admin only)."""
    return await service.update_product(product_data.id, product_data)


@router.delete("", response_model=MessageResponse)
async def delete_product(
    service: ProductServiceDep,
    admin: AdminUser,
    id: UUID | None = Query(None),
):
    """Delete a product that no order references (admin only)."""
    if id is None:
        raise ValidationError("Product ID is required")
    await service.delete_product(id)
    return MessageResponse(message="Product deleted successfully")
