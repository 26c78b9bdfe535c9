# storefront/schemas/address.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel


class AddressRead(SQLModel):
    id: int
    user_id: str
    street: str
    city: str
    state: str | None = None
    zip_code: str
    country: str
    is_default: bool = False


class AddressCreate(SQLModel):
    """
    Payload for a new shipping address. user_id comes from the session.
    """

    model_config = ConfigDict(extra="forbid")

    street: str
    city: str
    state: str | None = None
    zip_code: str
    country: str
    is_default: bool = False

    @field_validator("street", "city", "zip_code", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class AddressUpdate(SQLModel):
    """
    Partial update payload for addresses.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    is_default: bool | None = None

    @field_validator("street", "city", "zip_code", "country")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v
