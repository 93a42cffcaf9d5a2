# storefront/models/wishlist.py
from datetime import datetime
from typing import Any, ClassVar

from pydantic import model_validator
from sqlmodel import SQLModel

from storefront.models.cart import lift_product
from storefront.models.product import ProductSnippet


class WishlistEntry(SQLModel):
    """
    Row of public.wishlist_items.

    Membership set per user: (user_id, product_id) is unique.
    """

    TABLE: ClassVar[str] = "wishlist_items"

    id: str
    user_id: str
    product_id: str
    created_at: datetime | None = None

    product: ProductSnippet | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_product(cls, data: Any) -> Any:
        return lift_product(data)
