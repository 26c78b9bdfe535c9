# storefront/schemas/cart.py
from decimal import Decimal

from sqlmodel import SQLModel, Field

from storefront.schemas.product import ProductRead


class CartLine(SQLModel):
    """
    One product-to-quantity entry in the in-memory cart.
    At most one line exists per product_id.
    """

    product: ProductRead
    quantity: int = Field(ge=1)

    @property
    def product_id(self) -> str:
        return self.product.product_id

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


class CartLineRead(SQLModel):
    """
    Read model for a single cart line, including line_total.
    """

    product: ProductRead
    quantity: int
    line_total: Decimal


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartLineRead]
    total_items: int
    subtotal: Decimal


class CheckoutSummary(SQLModel):
    """
    Order summary panel: subtotal, flat shipping, total.
    """

    subtotal: Decimal
    shipping: Decimal
    total: Decimal


class CartItemAdd(SQLModel):
    """
    Payload for adding to cart.

    Only the id is taken from the client; the product (and its price) is
    loaded from Supabase and captured into the cart line.
    """

    product_id: str


class CartQuantityUpdate(SQLModel):
    """
    Payload for adjusting a line's quantity by a signed delta.
    """

    delta: int
