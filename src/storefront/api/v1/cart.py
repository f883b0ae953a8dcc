"""Shopping cart endpoints.

The cart is addressed by the client-held ``X-Cart-Id`` header; the server
keeps no cart identity beyond it.
"""

from fastapi import APIRouter

from storefront.api.deps import CartStoreDep, ProductServiceDep
from storefront.core.exceptions import ValidationError
from storefront.schemas.cart import Cart, CartItemAdd, CartQuantityUpdate, CartResponse
from storefront.services import cart_service
from storefront.services.cart_service import CartStore

router = APIRouter()


def _to_response(store: CartStore, cart: Cart) -> CartResponse:
    return CartResponse(
        cart_id=store.cart_id,
        items=list(cart.items),
        subtotal=cart_service.subtotal(cart),
        item_count=cart_service.item_count(cart),
    )


@router.get("", response_model=CartResponse)
async def get_cart(store: CartStoreDep):
    return _to_response(store, await store.load())


@router.post("/items", response_model=CartResponse)
async def add_cart_item(
    item: CartItemAdd,
    store: CartStoreDep,
    products: ProductServiceDep,
):
    """Add an active product, snapshotting its current effective price."""
    product = await products.get_product(item.product_id)
    if not product.is_active:
        raise ValidationError("Product is not available")
    return _to_response(store, await store.add_item(product, item.quantity))


@router.patch("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    update: CartQuantityUpdate,
    store: CartStoreDep,
):
    """Set a line's quantity; quantities below 1 leave the cart unchanged."""
    return _to_response(store, await store.update_quantity(product_id, update.quantity))


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, store: CartStoreDep):
    return _to_response(store, await store.remove_item(product_id))


@router.delete("", response_model=CartResponse)
async def clear_cart(store: CartStoreDep):
    return _to_response(store, await store.clear())
