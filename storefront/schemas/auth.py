# storefront/schemas/auth.py
from datetime import datetime

from pydantic import EmailStr, ConfigDict
from sqlmodel import SQLModel, Field


class Credentials(SQLModel):
    """Email/password payload for sign-up and sign-in."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class SessionRead(SQLModel):
    """
    Current authenticated identity.

    The access token is included so the front-end can call Supabase
    directly (storage, realtime) with the same session.
    """

    user_id: str
    email: str | None = None
    access_token: str
    expires_at: datetime | None = None


class SessionStatus(SQLModel):
    session: SessionRead | None
    loading: bool
