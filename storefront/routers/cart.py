# storefront/routers/cart.py
from fastapi import APIRouter, Depends

from storefront.dependencies import Storefront, current_user_id, get_cart, get_store
from storefront.schemas.cart import (
    CartItemAdd,
    CartQuantityUpdate,
    CartSummary,
    CheckoutSummary,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartSummary)
async def get_my_cart(cart: CartService = Depends(get_cart)):
    """
    Get the current cart summary. Guests have a cart too.
    """
    return cart.summary()


@router.post("", response_model=CartSummary)
async def add_to_cart(
    payload: CartItemAdd,
    store: Storefront = Depends(get_store),
    user_id: str | None = Depends(current_user_id),
):
    """
    Add one unit of a product to the cart.

    - The product is loaded server-side; its current price is captured.
    - 404 if the product does not exist or is hidden from guests.

    Returns the updated cart summary.
    """
    product = await store.products.get_product(
        payload.product_id,
        signed_in=user_id is not None,
    )
    store.cart.add_to_cart(product)
    return store.cart.summary()


@router.patch("/{product_id}", response_model=CartSummary)
async def update_cart_item(
    product_id: str,
    payload: CartQuantityUpdate,
    cart: CartService = Depends(get_cart),
):
    """
    Change a line's quantity by `delta` (e.g. +1 / -1 buttons).

    A quantity that drops to zero removes the line.
    """
    cart.update_quantity(product_id, payload.delta)
    return cart.summary()


@router.delete("/{product_id}", response_model=CartSummary)
async def remove_cart_item(
    product_id: str,
    cart: CartService = Depends(get_cart),
):
    """
    Remove a product from the cart (no-op if absent).
    """
    cart.remove_from_cart(product_id)
    return cart.summary()


@router.delete("", response_model=CartSummary)
async def clear_cart(cart: CartService = Depends(get_cart)):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    cart.clear_cart()
    return cart.summary()


@router.get("/summary", response_model=CheckoutSummary)
async def get_checkout_summary(cart: CartService = Depends(get_cart)):
    """
    Order summary panel: subtotal, shipping, total.
    """
    return cart.checkout_summary()
