# storefront/schemas/category.py
from sqlmodel import SQLModel


class CategoryRead(SQLModel):
    id: int
    name: str
    description: str = ""
    parent_id: int | None = None
