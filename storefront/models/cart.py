# storefront/models/cart.py
from datetime import datetime
from typing import Any, ClassVar

from pydantic import model_validator
from sqlmodel import SQLModel, Field

from storefront.models.product import ProductSnippet


def lift_product(data: Any) -> Any:
    """PostgREST returns the expanded product under the table name."""
    if isinstance(data, dict) and "products" in data:
        data = dict(data)
        data["product"] = data.pop("products")
    return data


class CartLine(SQLModel):
    """
    One (user, product) row of public.cart_items.

    A user never holds two lines for the same product: adding a product
    that is already in the cart increments the existing line.
    """

    TABLE: ClassVar[str] = "cart_items"

    id: str
    user_id: str
    product_id: str
    quantity: int = Field(gt=0, description="Must be >= 1")
    created_at: datetime | None = None

    product: ProductSnippet | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_product(cls, data: Any) -> Any:
        return lift_product(data)

    @property
    def line_total(self) -> float:
        if self.product is None:
            return 0.0
        return self.quantity * self.product.price
