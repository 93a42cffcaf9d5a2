# storefront/schemas/wishlist.py
from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from storefront.models.saved import SavedForLaterEntry
from storefront.models.wishlist import WishlistEntry
from storefront.schemas.result import LoadState, OperationResponse


class WishlistResponse(OperationResponse):
    items: list[WishlistEntry]
    state: LoadState


class SavedItemCreate(SQLModel):
    """Payload for parking a product outside the cart."""

    model_config = ConfigDict(extra="forbid")

    product_id: str
    quantity: int = Field(default=1, gt=0)


class SavedItemsResponse(OperationResponse):
    items: list[SavedForLaterEntry]
    state: LoadState
