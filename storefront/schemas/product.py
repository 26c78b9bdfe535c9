# storefront/schemas/product.py
from datetime import datetime
from decimal import Decimal

from sqlmodel import SQLModel, Field


class CategoryRef(SQLModel):
    """Category embedded in a product row (`category:category_id(id, name)`)."""

    id: int
    name: str


class ProductRead(SQLModel):
    """
    Product row as returned by the `products` table.

    Also used as the cart's product snapshot: once captured into a cart
    line, later price/stock changes on the remote side are not reflected.
    """

    product_id: str
    title: str
    description: str = ""
    price: Decimal = Field(ge=0)
    image: str | None = None
    stock: int | None = None
    sku: str | None = None
    category_id: int | None = None
    category: CategoryRef | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductRef(SQLModel):
    """Minimal product embedded in order items and reviews."""

    product_id: str
    title: str
    image: str | None = None
