# storefront/schemas/review.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.product import ProductRef


class ReviewerRef(SQLModel):
    """Reviewer profile embedded in product reviews."""

    username: str | None = None
    avatar_url: str | None = None


class ReviewRead(SQLModel):
    id: int
    product_id: str
    user_id: str
    rating: int = Field(ge=1, le=5)
    comment: str | None = None
    created_at: datetime | None = None
    profile: ReviewerRef | None = None
    product: ProductRef | None = None


class ReviewCreate(SQLModel):
    """
    Payload for reviewing a product. A second review by the same user
    for the same product replaces the first.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: str
    rating: int = Field(ge=1, le=5)
    comment: str | None = None

    @field_validator("comment")
    @classmethod
    def normalize_comment(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None
