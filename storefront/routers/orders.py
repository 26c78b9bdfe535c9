# storefront/routers/orders.py
from fastapi import APIRouter, Depends, status

from storefront.dependencies import Storefront, get_store, require_user
from storefront.schemas.order import CheckoutRequest, OrderRead

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "/checkout",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
async def checkout(
    payload: CheckoutRequest,
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """
    Create an order from the current cart.

    The cart is cleared once the order and its items are stored.
    """
    return await store.orders.checkout(
        user_id,
        shipping_address_id=payload.shipping_address_id,
        payment_method=payload.payment_method,
    )


@router.get("/me", response_model=list[OrderRead])
async def list_my_orders(
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """
    List the signed-in user's orders with items, newest first.
    """
    return await store.orders.list_user_orders(user_id)


@router.get("/me/{order_id}", response_model=OrderRead)
async def get_my_order(
    order_id: int,
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return await store.orders.get_user_order(user_id, order_id)


@router.post("/me/{order_id}/cancel", response_model=OrderRead)
async def cancel_my_order(
    order_id: int,
    store: Storefront = Depends(get_store),
    user_id: str = Depends(require_user),
):
    """
    Cancel an order that has not shipped yet.

      pending    -> cancelled
      processing -> cancelled
    """
    return await store.orders.cancel_order(user_id, order_id)
