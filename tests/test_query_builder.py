"""Tests for the product query builder.

Predicates and orderings are compiled against the PostgreSQL dialect and
checked as SQL text, so no database is needed.
"""

import re
from decimal import Decimal

import pytest
from sqlalchemy.dialects import postgresql

from storefront.core.config import settings
from storefront.schemas.product import ProductFilter
from storefront.services import query_builder
from storefront.services.query_builder import ProductSort


def compile_sql(expr):
    return expr.compile(dialect=postgresql.dialect())


def where_sql(**params) -> str:
    return str(compile_sql(query_builder.build_predicate(ProductFilter(**params))))


def case_insensitive_match(column: str) -> re.Pattern:
    """Case-insensitive LIKE on a column, as either ILIKE or lower() LIKE."""
    return re.compile(rf"(lower\({re.escape(column)}\) LIKE|{re.escape(column)} ILIKE)")


class TestPredicate:
    """Test WHERE clause construction."""

    def test_public_listing_only_active(self):
        """Test storefront listings always restrict to active products."""
        sql = where_sql()
        assert sql == "products.is_active IS true"

    def test_public_ignores_active_flag(self):
        """Test a public request cannot ask for inactive products."""
        predicate = query_builder.build_predicate(ProductFilter(active=False), public=True)
        sql = str(compile_sql(predicate))
        assert "products.is_active IS true" in sql
        assert "IS false" not in sql

    def test_admin_inactive_filter(self):
        """Test non-public requests honour the active flag."""
        predicate = query_builder.build_predicate(ProductFilter(active=False), public=False)
        assert str(compile_sql(predicate)) == "products.is_active IS false"

    def test_admin_all_products(self):
        """Test non-public request without active flag has no restriction."""
        predicate = query_builder.build_predicate(ProductFilter(active=None), public=False)
        assert str(compile_sql(predicate)) == "true"

    def test_category_exact_match(self):
        compiled = compile_sql(query_builder.build_predicate(ProductFilter(category="Kitchen")))
        assert "products.category = " in str(compiled)
        assert "Kitchen" in compiled.params.values()

    def test_price_range_matches_price_or_sale_price(self):
        """Test price bounds apply to regular price OR a non-null sale price."""
        compiled = compile_sql(
            query_builder.build_predicate(
                ProductFilter(min_price=Decimal("10"), max_price=Decimal("30"))
            )
        )
        sql = str(compiled)

        assert "products.price >= " in sql
        assert "products.price <= " in sql
        assert " OR " in sql
        assert "products.sale_price IS NOT NULL AND products.sale_price >= " in sql
        assert "products.sale_price <= " in sql
        assert Decimal("10") in compiled.params.values()
        assert Decimal("30") in compiled.params.values()

    def test_min_price_only(self):
        """Test a single bound produces no upper limit."""
        sql = where_sql(min_price=Decimal("10"))
        assert "products.price >= " in sql
        assert "<=" not in sql

    def test_featured_means_on_sale(self):
        sql = where_sql(featured=True)
        assert "products.sale_price IS NOT NULL" in sql
        assert "is_featured" not in sql

    def test_featured_false_is_no_filter(self):
        assert where_sql(featured=False) == "products.is_active IS true"

    def test_search_name_description_tags(self):
        """Test search matches name, description or an exact tag."""
        compiled = compile_sql(query_builder.build_predicate(ProductFilter(search="mug")))
        sql = str(compiled)

        assert case_insensitive_match("products.name").search(sql)
        assert case_insensitive_match("products.description").search(sql)
        assert "mug" in compiled.params.values()
        assert "products.tags @>" in sql
        assert ["mug"] in compiled.params.values()

    def test_search_escapes_wildcards(self):
        """Test LIKE wildcards in search text are matched literally."""
        compiled = compile_sql(query_builder.build_predicate(ProductFilter(search="50%_off")))
        assert "ESCAPE '/'" in str(compiled)
        assert "50/%/_off" in compiled.params.values()

    def test_search_combined_with_price_range(self):
        """Test search narrows a price-filtered listing instead of replacing it."""
        sql = where_sql(search="mug", min_price=Decimal("5"))
        assert "products.price >= " in sql
        assert case_insensitive_match("products.name").search(sql)
        assert " AND (" in sql

    def test_blank_values_ignored(self):
        """Test empty query string values are treated as absent."""
        assert where_sql(category="", search="   ", sort="") == "products.is_active IS true"


class TestOrdering:
    """Test ORDER BY construction."""

    @pytest.mark.parametrize("value", [None, "", "popular", "PRICE-ASC"])
    def test_unknown_sort_defaults_to_newest(self, value):
        assert ProductSort.resolve(value) is ProductSort.NEWEST

    def test_price_asc_sale_price_nulls_last(self):
        """Test sale prices lead, unsaled products follow by regular price."""
        order = [str(compile_sql(c)) for c in query_builder.build_order_by(ProductSort.PRICE_ASC)]
        assert order == [
            "products.sale_price ASC NULLS LAST",
            "products.price ASC",
            "products.id ASC",
        ]

    def test_price_desc_sale_price_nulls_last(self):
        """Test unsaled products still sort last when descending."""
        order = [str(compile_sql(c)) for c in query_builder.build_order_by(ProductSort.PRICE_DESC)]
        assert order == [
            "products.sale_price DESC NULLS LAST",
            "products.price DESC",
            "products.id ASC",
        ]

    def test_newest_and_oldest(self):
        newest = [str(compile_sql(c)) for c in query_builder.build_order_by(ProductSort.NEWEST)]
        oldest = [str(compile_sql(c)) for c in query_builder.build_order_by(ProductSort.OLDEST)]
        assert newest == ["products.created_at DESC", "products.id ASC"]
        assert oldest == ["products.created_at ASC", "products.id ASC"]


class TestBuild:
    """Test full query resolution."""

    def test_defaults(self):
        query = query_builder.build(ProductFilter())
        assert query.page == 1
        assert query.limit == settings.DEFAULT_PAGE_SIZE
        assert query.offset == 0
        assert query.sort is ProductSort.NEWEST

    def test_offset_from_page(self):
        query = query_builder.build(ProductFilter(page=3, limit=5, sort="price-asc"))
        assert query.offset == 10
        assert query.limit == 5
        assert query.sort is ProductSort.PRICE_ASC

    def test_limit_capped(self):
        query = query_builder.build(ProductFilter(limit=10_000))
        assert query.limit == settings.MAX_PAGE_SIZE

    def test_query_is_immutable(self):
        query = query_builder.build(ProductFilter())
        with pytest.raises(AttributeError):
            query.page = 2

    def test_camel_case_params(self):
        """Test filters accept the camelCase names used in query strings."""
        request = ProductFilter.model_validate({"minPrice": "5", "maxPrice": "9.5"})
        assert request.min_price == Decimal("5")
        assert request.max_price == Decimal("9.5")
