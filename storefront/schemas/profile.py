# storefront/schemas/profile.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.order import OrderRead


class ProfileRead(SQLModel):
    """
    Row of the `profiles` table.

    Identity:
      - profile_id: MUST match Supabase auth.users.id
    """

    profile_id: str
    username: str | None = None
    avatar_url: str | None = None
    email: str | None = None
    created_at: datetime | None = None


class ProfileUpdate(SQLModel):
    """
    Partial profile update for the signed-in user.
    Editable fields: username, avatar_url.
    """

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, max_length=50)
    avatar_url: str | None = None

    @field_validator("username", "avatar_url")
    @classmethod
    def strip(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip()


class ProfilePageState(SQLModel):
    """
    Everything the profile screen renders.

    redirect_to is set when the page should send the user elsewhere
    (profile could not be created for a reason other than RLS).
    """

    username: str = ""
    avatar_url: str = ""
    created_at: datetime | None = None
    orders: list[OrderRead] = []
    redirect_to: str | None = None
