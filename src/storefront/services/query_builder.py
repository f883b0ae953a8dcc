"""Product query builder.

Translates a ``ProductFilter`` into a ``ProductQuery``: the resolved WHERE
predicate, ORDER BY clauses and offset/limit window. The storefront listing,
the REST API and the admin dashboard all go through ``build`` so filter
semantics live in one place.
"""

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import ColumnElement, and_, or_, true

from storefront.models.product import Product
from storefront.schemas.product import ProductFilter


class ProductSort(str, enum.Enum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NEWEST = "newest"
    OLDEST = "oldest"

    @classmethod
    def resolve(cls, value: str | None) -> "ProductSort":
        """Map a requested sort key to a known order, defaulting to newest."""
        try:
            return cls(value)
        except ValueError:
            return cls.NEWEST


@dataclass(frozen=True)
class ProductQuery:
    """Normalized product query consumed by the catalog gateway."""

    predicate: ColumnElement[bool]
    order_by: tuple[Any, ...]
    offset: int
    limit: int
    page: int
    sort: ProductSort


def _price_range(column, min_price: Decimal | None, max_price: Decimal | None) -> ColumnElement[bool]:
    bounds = []
    if min_price is not None:
        bounds.append(column >= min_price)
    if max_price is not None:
        bounds.append(column <= max_price)
    return and_(*bounds)


def build_predicate(request: ProductFilter, *, public: bool = True) -> ColumnElement[bool]:
    """Build the WHERE clause for a product filter request.

    Args:
        request: Parsed filter request
        public: Storefront listing; restricts to active products regardless
            of ``request.active``

    Returns:
        A single boolean SQL expression
    """
    clauses: list[ColumnElement[bool]] = []

    if public:
        clauses.append(Product.is_active.is_(True))
    elif request.active is not None:
        clauses.append(Product.is_active.is_(request.active))

    if request.category:
        clauses.append(Product.category == request.category)

    if request.min_price is not None or request.max_price is not None:
        # Regular price or sale price in range
        clauses.append(
            or_(
                _price_range(Product.price, request.min_price, request.max_price),
                and_(
                    Product.sale_price.is_not(None),
                    _price_range(Product.sale_price, request.min_price, request.max_price),
                ),
            )
        )

    if request.featured:
        clauses.append(Product.sale_price.is_not(None))

    if request.search:
        clauses.append(
            or_(
                Product.name.icontains(request.search, autoescape=True),
                Product.description.icontains(request.search, autoescape=True),
                Product.tags.contains([request.search]),
            )
        )

    if not clauses:
        return true()
    return and_(*clauses)


def build_order_by(sort: ProductSort) -> tuple[Any, ...]:
    """Build ORDER BY clauses; ``Product.id`` keeps page boundaries stable.

    Price sorts order on sale price with unsaled products last, then on
    regular price.
    """
    if sort is ProductSort.PRICE_ASC:
        return (Product.sale_price.asc().nulls_last(), Product.price.asc(), Product.id.asc())
    if sort is ProductSort.PRICE_DESC:
        return (Product.sale_price.desc().nulls_last(), Product.price.desc(), Product.id.asc())
    if sort is ProductSort.OLDEST:
        return (Product.created_at.asc(), Product.id.asc())
    return (Product.created_at.desc(), Product.id.asc())


def build(request: ProductFilter, *, public: bool = True) -> ProductQuery:
    """Resolve a filter request into a complete product query."""
    sort = ProductSort.resolve(request.sort)
    return ProductQuery(
        predicate=build_predicate(request, public=public),
        order_by=build_order_by(sort),
        offset=(request.page - 1) * request.limit,
        limit=request.limit,
        page=request.page,
        sort=sort,
    )
