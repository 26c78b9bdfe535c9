# storefront/services/order_service.py
from fastapi import HTTPException, status

from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.order import (
    OrderCreate,
    OrderItemCreate,
    OrderRead,
    OrderStatus,
)
from storefront.services.cart_service import CartService

# Forward-only lifecycle; delivered and cancelled are terminal
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"processing", "cancelled"},
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create an order from the in-memory cart
      - Clear the cart after success
      - Read the user's orders
      - Enforce simple status transitions
    """

    def __init__(self, order_repo: OrderRepository, cart: CartService):
        self.order_repo = order_repo
        self.cart = cart

    async def checkout(
        self,
        user_id: str,
        shipping_address_id: int,
        payment_method: str | None = None,
    ) -> OrderRead:
        """
        Convert the current cart into an Order.

        Steps:
          1. Error if the cart is empty.
          2. Total = subtotal + shipping (same numbers as the summary panel).
          3. One order item per cart line at the captured price.
          4. Create order + items; clear the cart on success.
        """
        lines = self.cart.lines
        if not lines:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        summary = self.cart.checkout_summary()
        order = OrderCreate(
            user_id=user_id,
            status="pending",
            total=summary.total,
            shipping_address_id=shipping_address_id,
            payment_method=payment_method,
        )
        items = [
            OrderItemCreate(
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.product.price,
            )
            for line in lines
        ]

        created = await self.order_repo.create_order(order, items)
        if created is None:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to create order",
            )

        self.cart.clear_cart()
        return created

    async def list_user_orders(self, user_id: str) -> list[OrderRead]:
        return await self.order_repo.list_for_user(user_id)

    async def get_user_order(self, user_id: str, order_id: int) -> OrderRead:
        """
        404 if order not found or does not belong to this user.
        """
        order = await self.order_repo.get_by_id(order_id)
        if not order or (order.user_id is not None and order.user_id != user_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    async def cancel_order(self, user_id: str, order_id: int) -> OrderRead:
        """
        Shoppers may cancel their own order while it is pending or
        processing. Any other transition raises 400.
        """
        return await self.update_status(user_id, order_id, "cancelled")

    async def update_status(
        self,
        user_id: str,
        order_id: int,
        new: OrderStatus,
    ) -> OrderRead:
        order = await self.get_user_order(user_id, order_id)
        current = order.status

        if current == new:
            return order

        if new not in ALLOWED_TRANSITIONS.get(current, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        updated = await self.order_repo.update_status(order_id, new)
        if updated is None:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to update order status",
            )
        return updated
