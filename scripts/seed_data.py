"""Seed data script for development and testing.

Creates:
- A demo catalog across several categories, some items on sale, one inactive
- Prints an admin access token for the admin endpoints

Environment Variables:
    RESET_DATA: Set to "true" to clear orders and products before seeding (default: false)
    SEED_PRODUCT_COPIES: Extra numbered copies of each product, for paging tests (default: 0)

Usage:
    uv run python -m scripts.seed_data
    RESET_DATA=true SEED_PRODUCT_COPIES=5 uv run python -m scripts.seed_data
"""

import asyncio
import os
from decimal import Decimal

# Configuration from environment variables
RESET_DATA = os.getenv("RESET_DATA", "false").lower() == "true"
SEED_PRODUCT_COPIES = int(os.getenv("SEED_PRODUCT_COPIES", "0"))

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import async_session_maker, engine
from storefront.core.security import create_access_token
from storefront.models import Product
from storefront.services.product_service import slugify

CATALOG = [
    {
        "name": "Red Mug",
        "description": "Stoneware mug with a glossy red glaze",
        "price": Decimal("14.00"),
        "stock": 40,
        "category": "Kitchen",
        "tags": ["mug", "ceramic"],
    },
    {
        "name": "Pour Over Kettle",
        "description": "Gooseneck kettle for slow coffee",
        "price": Decimal("59.00"),
        "sale_price": Decimal("45.00"),
        "stock": 12,
        "category": "Kitchen",
        "tags": ["coffee"],
        "is_featured": True,
    },
    {
        "name": "Linen Apron",
        "description": "Washed linen apron with two pockets",
        "price": Decimal("32.00"),
        "stock": 25,
        "category": "Kitchen",
        "tags": ["linen"],
    },
    {
        "name": "Wool Throw",
        "description": "Merino throw blanket",
        "price": Decimal("120.00"),
        "sale_price": Decimal("95.00"),
        "stock": 8,
        "category": "Living",
        "tags": ["wool", "blanket"],
        "is_featured": True,
    },
    {
        "name": "Desk Lamp",
        "description": "Adjustable brass desk lamp",
        "price": Decimal("85.00"),
        "stock": 15,
        "category": "Living",
        "tags": ["lighting"],
    },
    {
        "name": "Canvas Tote",
        "description": "Heavy canvas tote bag",
        "price": Decimal("25.00"),
        "sale_price": Decimal("19.00"),
        "stock": 60,
        "category": "Accessories",
        "tags": ["bag", "canvas"],
    },
    {
        "name": "Archived Vase",
        "description": "Discontinued glass vase",
        "price": Decimal("40.00"),
        "stock": 0,
        "category": "Living",
        "tags": ["glass"],
        "is_active": False,
    },
]


async def reset_catalog_data(session: AsyncSession) -> None:
    """Clear orders and products for a fresh catalog."""
    print("Resetting catalog data...")
    await session.execute(text("DELETE FROM order_items"))
    await session.execute(text("DELETE FROM orders"))
    await session.execute(text("DELETE FROM products"))
    await session.commit()
    print("  Cleared order_items, orders, products")


async def seed_products(session: AsyncSession) -> list[Product]:
    """Create the demo catalog, skipping it if products already exist."""
    print("Seeding products...")

    result = await session.execute(select(Product).limit(1))
    if result.scalar_one_or_none():
        print("  Products already exist, skipping...")
        result = await session.execute(select(Product))
        return list(result.scalars().all())

    products = []
    for copy in range(SEED_PRODUCT_COPIES + 1):
        for entry in CATALOG:
            name = entry["name"] if copy == 0 else f"{entry['name']} {copy}"
            products.append(
                Product(
                    **{**entry, "name": name},
                    slug=slugify(name),
                    image_urls=[f"/uploads/demo/{slugify(entry['name'])}.jpg"],
                )
            )

    session.add_all(products)
    await session.commit()

    print(f"  Created {len(products)} products")
    return products


async def main():
    """Main seed function."""
    print("=" * 60)
    print("Storefront - Seed Data Script")
    print("=" * 60)
    print(f"  RESET_DATA: {RESET_DATA}")
    print(f"  SEED_PRODUCT_COPIES: {SEED_PRODUCT_COPIES}")
    print("=" * 60)

    async with async_session_maker() as session:
        if RESET_DATA:
            await reset_catalog_data(session)
        products = await seed_products(session)

    admin_token = create_access_token(
        {"sub": "admin", "email": "admin@test.com", "role": "admin"}
    )

    print("=" * 60)
    print("Seed data complete!")
    print(f"  Products: {len(products)}")
    print("")
    print("Admin bearer token:")
    print(f"  {admin_token}")
    print("=" * 60)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
