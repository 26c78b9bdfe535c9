# storefront/schemas/order.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.product import ProductRef

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item, with its product embedded.
    """

    id: int
    order_id: int | None = None
    quantity: int
    price: Decimal
    product_id: str | None = None
    product: ProductRef | None = None


class OrderRead(SQLModel):
    """
    Order with its items.

    `user_id` and the payment fields are optional because the profile
    page query only selects id, total, status, created_at and items.
    """

    id: int
    user_id: str | None = None
    status: OrderStatus
    total: Decimal
    shipping_address_id: int | None = None
    payment_method: str | None = None
    payment_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    order_items: list[OrderItemRead] = []


class OrderCreate(SQLModel):
    """
    Row inserted into `orders`. Built by the checkout service.
    """

    user_id: str
    status: OrderStatus = "pending"
    total: Decimal
    shipping_address_id: int
    payment_method: str | None = None
    payment_id: str | None = None


class OrderItemCreate(SQLModel):
    """
    Row inserted into `order_items`; order_id is added after the order
    insert succeeds.
    """

    product_id: str
    quantity: int = Field(gt=0)
    price: Decimal = Field(ge=0)


class CheckoutRequest(SQLModel):
    """
    Payload for turning the current cart into an order.
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address_id: int
    payment_method: str | None = None

    @field_validator("payment_method")
    @classmethod
    def normalize_payment_method(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None
