# storefront/schemas/compare.py
from sqlmodel import SQLModel


class CompareStoreRef(SQLModel):
    id: str
    name: str


class CompareProduct(SQLModel):
    """Product as held in the local comparison list."""

    id: str
    name: str
    price: float
    image_url: str | None = None
    description: str | None = None
    category: str | None = None
    inventory_count: int = 0
    stores: CompareStoreRef | None = None
