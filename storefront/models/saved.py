# storefront/models/saved.py
from datetime import datetime
from typing import Any, ClassVar

from pydantic import model_validator
from sqlmodel import SQLModel, Field

from storefront.models.cart import lift_product
from storefront.models.product import ProductSnippet


class SavedForLaterEntry(SQLModel):
    """
    Row of public.saved_for_later.

    Same shape as a cart line but a separate collection; moving it to the
    cart merges into cart_items and then deletes this row.
    """

    TABLE: ClassVar[str] = "saved_for_later"

    id: str
    user_id: str
    product_id: str
    quantity: int = Field(default=1, gt=0)
    created_at: datetime | None = None

    product: ProductSnippet | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_product(cls, data: Any) -> Any:
        return lift_product(data)
