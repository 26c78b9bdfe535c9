# storefront/services/cart_service.py
import logging
from decimal import Decimal

from storefront.schemas.cart import (
    CartLine,
    CartLineRead,
    CartSummary,
    CheckoutSummary,
)
from storefront.schemas.product import ProductRead

logger = logging.getLogger(__name__)


class CartService:
    """
    In-memory shopping cart for the current shopper.

    Responsibilities:
      - one line per product_id, kept in insertion order
      - quantity >= 1 on every line
      - total_items / subtotal recomputed from scratch after each change

    Every mutation builds the new collection first and swaps it in at the
    end, so readers never see a half-applied change.
    """

    def __init__(self, shipping_fee: Decimal = Decimal("5.99")):
        self.shipping_fee = shipping_fee
        self._lines: dict[str, CartLine] = {}
        self.total_items = 0
        self.subtotal = Decimal("0")

    # ---- internal helpers ----

    def _commit(self, lines: dict[str, CartLine]) -> None:
        self._lines = lines
        self.total_items = sum(line.quantity for line in lines.values())
        self.subtotal = sum(
            (line.line_total for line in lines.values()),
            Decimal("0"),
        )

    # ---- reads ----

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines.values())

    def get_line(self, product_id: str) -> CartLine | None:
        return self._lines.get(product_id)

    def summary(self) -> CartSummary:
        return CartSummary(
            items=[
                CartLineRead(
                    product=line.product,
                    quantity=line.quantity,
                    line_total=line.line_total,
                )
                for line in self._lines.values()
            ],
            total_items=self.total_items,
            subtotal=self.subtotal,
        )

    def checkout_summary(self) -> CheckoutSummary:
        """
        Subtotal + flat shipping. An empty cart ships nothing.
        """
        shipping = self.shipping_fee if self._lines else Decimal("0")
        return CheckoutSummary(
            subtotal=self.subtotal,
            shipping=shipping,
            total=self.subtotal + shipping,
        )

    # ---- public operations ----

    def add_to_cart(self, product: ProductRead) -> None:
        """
        Add one unit of a product.

        If the product is already in the cart its quantity goes up by one;
        otherwise a new line is appended with the product as captured now.
        """
        logger.info("Adding to cart: %s", product.product_id)
        lines = dict(self._lines)
        existing = lines.get(product.product_id)
        if existing:
            lines[product.product_id] = CartLine(
                product=existing.product,
                quantity=existing.quantity + 1,
            )
        else:
            lines[product.product_id] = CartLine(
                product=product.model_copy(deep=True),
                quantity=1,
            )
        self._commit(lines)

    def remove_from_cart(self, product_id: str) -> None:
        """Remove a line; unknown product ids are ignored."""
        if product_id not in self._lines:
            return
        logger.info("Removing item from cart: %s", product_id)
        lines = dict(self._lines)
        del lines[product_id]
        self._commit(lines)

    def update_quantity(self, product_id: str, delta: int) -> None:
        """
        Adjust a line's quantity by `delta`.

        A result <= 0 removes the line. Unknown product ids are ignored.
        """
        existing = self._lines.get(product_id)
        if existing is None:
            return

        new_quantity = existing.quantity + delta
        lines = dict(self._lines)
        if new_quantity <= 0:
            del lines[product_id]
        else:
            logger.info(
                "Updating item %s quantity: %s -> %s",
                existing.product.title,
                existing.quantity,
                new_quantity,
            )
            lines[product_id] = CartLine(
                product=existing.product,
                quantity=new_quantity,
            )
        self._commit(lines)

    def clear_cart(self) -> None:
        self._commit({})
