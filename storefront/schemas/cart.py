# storefront/schemas/cart.py
from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from storefront.models.cart import CartLine
from storefront.schemas.result import LoadState, OperationResponse


class CartSummary(SQLModel):
    """
    Snapshot of the cart store.

    item_count is the sum of quantities (what the cart badge shows),
    not the number of lines.
    """

    items: list[CartLine]
    item_count: int
    total_price: float
    state: LoadState
    loading: bool = False


class CartItemCreate(SQLModel):
    """Payload for adding to cart."""

    model_config = ConfigDict(extra="forbid")

    product_id: str
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for changing a line's quantity.

    Zero or negative removes the line, so no lower bound here.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class ReorderItem(SQLModel):
    """One line of a past order offered for reorder."""

    product_id: str
    quantity: int = Field(gt=0)
    is_active: bool = True


class CartResponse(OperationResponse):
    cart: CartSummary


class ReorderRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    items: list[ReorderItem]
