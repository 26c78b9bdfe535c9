# storefront/repositories/order_repo.py
import logging

from storefront.core.errors import RemoteError, log_error
from storefront.repositories.base import SupabaseRepository
from storefront.schemas.order import (
    OrderCreate,
    OrderItemCreate,
    OrderRead,
    OrderStatus,
)

logger = logging.getLogger(__name__)

# Full order with items and each item's product
ORDER_COLUMNS = "*,order_items(*,product:product_id(product_id,title,image))"

# Profile page view: only what an order card shows
ORDER_CARD_COLUMNS = (
    "id,total,status,created_at,"
    "order_items(id,quantity,price,product:product_id(product_id,title,image))"
)


class OrderRepository(SupabaseRepository):
    """
    Data access layer for orders and order_items.

    NOTE:
      - PostgREST offers no transaction spanning two inserts. If the items
        insert fails after the order row was written, the order row is
        deleted again so no empty order is left behind.
    """

    table = "orders"
    items_table = "order_items"

    # ---- Orders ----

    async def list_for_user(self, user_id: str) -> list[OrderRead]:
        rows = await self._fetch_many(
            self.query()
            .select(ORDER_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True),
            "fetching orders",
        )
        return [OrderRead.model_validate(r) for r in rows]

    async def get_by_id(self, order_id: int) -> OrderRead | None:
        row = await self._fetch_one(
            self.query().select(ORDER_COLUMNS).eq("id", order_id).single(),
            f"fetching order with id {order_id}",
        )
        return OrderRead.model_validate(row) if row else None

    async def get_user_orders(self, user_id: str) -> list[OrderRead]:
        """
        Orders for the profile page, newest first.

        Raises:
            RemoteError: so the caller decides how loudly to report it.
        """
        try:
            rows = await self._execute(
                self.query()
                .select(ORDER_CARD_COLUMNS)
                .eq("user_id", user_id)
                .order("created_at", desc=True)
            )
        except RemoteError as e:
            log_error("fetching user orders", e)
            raise
        return [OrderRead.model_validate(r) for r in rows or []]

    async def create_order(
        self,
        order: OrderCreate,
        items: list[OrderItemCreate],
    ) -> OrderRead | None:
        """
        Insert an order, then its items, then re-read the full order.

        Returns None if any step fails (failures are logged).
        """
        try:
            rows = await self._execute(
                self.query().insert(order.model_dump(mode="json"))
            )
        except RemoteError as e:
            log_error("creating order", e)
            return None

        if not rows:
            logger.error("Error in creating order: insert returned no row")
            return None

        order_id = rows[0]["id"]
        payload = [
            {**item.model_dump(mode="json"), "order_id": order_id}
            for item in items
        ]

        try:
            await self._execute(self.client.table(self.items_table).insert(payload))
        except RemoteError as e:
            log_error(f"creating items for order {order_id}", e)
            await self._discard_order(order_id)
            return None

        return await self.get_by_id(order_id)

    async def _discard_order(self, order_id: int) -> None:
        """
        Compensating delete for an order whose items could not be written.
        """
        try:
            await self._execute(self.query().delete().eq("id", order_id))
        except RemoteError as e:
            # The empty order stays; nothing more can be done from here.
            log_error(f"discarding order {order_id}", e)
        else:
            logger.warning("Discarded order %s after item insert failure", order_id)

    async def update_status(
        self,
        order_id: int,
        status: OrderStatus,
    ) -> OrderRead | None:
        """
        Returns the updated order row (items are not embedded in the
        representation PostgREST sends back for an update).
        """
        rows = await self._fetch_many(
            self.query().update({"status": status}).eq("id", order_id),
            f"updating order status for id {order_id}",
        )
        return OrderRead.model_validate(rows[0]) if rows else None
