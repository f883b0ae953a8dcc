"""Product model for catalog data."""

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.database import Base
from storefront.models.base import TimestampMixin

if TYPE_CHECKING:
    from storefront.models.order import OrderItem


class Product(Base, TimestampMixin):
    """Product model representing a catalog item."""

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
    )
    sale_price: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2),
        nullable=True,
    )
    stock: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    image_urls: Mapped[List[str]] = mapped_column(
        ARRAY(String(500)),
        nullable=False,
        default=list,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    is_featured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    category: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    tags: Mapped[List[str]] = mapped_column(
        ARRAY(String(100)),
        nullable=False,
        default=list,
    )

    # Relationships
    order_items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem", back_populates="product"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_product_price_non_negative"),
        CheckConstraint("stock >= 0", name="chk_product_stock_non_negative"),
        CheckConstraint(
            "sale_price IS NULL OR (sale_price >= 0 AND sale_price < price)",
            name="chk_product_sale_price_below_price",
        ),
        Index("idx_products_category", "category"),
        Index("idx_products_active_created", "is_active", "created_at"),
    )

    @property
    def effective_price(self) -> Decimal:
        """Price shown to and paid by the customer."""
        return self.sale_price if self.sale_price is not None else self.price
