# storefront/services/saved_service.py
import logging

from supabase import AsyncClient

from storefront.core.errors import REMOTE_ERRORS, error_code, error_message, result_from_error
from storefront.core.notifications import Notifier
from storefront.core.session import AuthSession
from storefront.models.saved import SavedForLaterEntry
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.saved_repo import SavedForLaterRepository
from storefront.schemas.result import OperationResult
from storefront.services.cart_service import CartStore
from storefront.services.store import RemoteStore

logger = logging.getLogger(__name__)


class SavedForLaterStore(RemoteStore):
    """
    Items the user parked outside the cart.

    move_to_cart() is a two-step operation without a transaction:
      1. merge the entry into cart_items (same rule as add-to-cart)
      2. delete the saved entry, only if step 1 committed
    A failure in step 2 leaves the product in both places. That outcome is
    returned as needs_reconciliation; step 1 is not undone.
    """

    def __init__(
        self,
        client: AsyncClient,
        session: AuthSession,
        notifier: Notifier | None = None,
        repo: SavedForLaterRepository | None = None,
        cart_repo: CartRepository | None = None,
        cart: CartStore | None = None,
    ):
        super().__init__(client, session, notifier)
        self.repo = repo or SavedForLaterRepository()
        self.cart_repo = cart_repo or CartRepository()
        # optional: refreshed after a move so the cart badge follows
        self.cart = cart
        self.items: list[SavedForLaterEntry] = []

    def reset(self) -> None:
        self.items = []

    def find_entry(self, entry_id: str) -> SavedForLaterEntry | None:
        return next((entry for entry in self.items if entry.id == entry_id), None)

    async def refresh(self) -> OperationResult:
        return await self.fetch_saved_items()

    async def fetch_saved_items(self) -> OperationResult:
        result = OperationResult(operation="saved.fetch")
        if self.user is None:
            return result

        user_id = self.user.id
        self.state = "loading"
        with self._busy():
            try:
                entries = await self.repo.list_for_user(self.client, user_id)
            except REMOTE_ERRORS as e:
                if self._discard("saved items fetch error", user_id):
                    return result
                self.state = "error"
                self.error = str(e)
                return self._notify(result_from_error("saved.fetch", e))

        if self._discard("saved items", user_id):
            return result
        self.items = entries
        self.state = "populated"
        self.error = None
        return result

    async def save_for_later(self, product_id: str, quantity: int = 1) -> OperationResult:
        denied = self._require_user("saved.save")
        if denied:
            return denied

        with self._busy():
            try:
                await self.repo.create(self.client, self.user.id, product_id, quantity)
            except REMOTE_ERRORS as e:
                return self._notify(result_from_error("saved.save", e))
            await self.fetch_saved_items()

        return self._notify(OperationResult(operation="saved.save"))

    async def remove_saved_item(self, entry_id: str) -> OperationResult:
        denied = self._require_user("saved.remove")
        if denied:
            return denied

        with self._busy():
            try:
                await self.repo.delete(self.client, self.user.id, entry_id)
            except REMOTE_ERRORS as e:
                return self._notify(result_from_error("saved.remove", e))
            await self.fetch_saved_items()

        return self._notify(OperationResult(operation="saved.remove"))

    async def _merge_into_cart(self, entry: SavedForLaterEntry) -> None:
        # looked up remotely: the cart store's copy may be stale or absent
        existing = await self.cart_repo.get_item(self.client, self.user.id, entry.product_id)
        if existing is not None:
            await self.cart_repo.set_quantity(
                self.client, self.user.id, existing.id, existing.quantity + entry.quantity
            )
        else:
            await self.cart_repo.create(
                self.client, self.user.id, entry.product_id, entry.quantity
            )

    async def move_to_cart(self, entry_id: str) -> OperationResult:
        denied = self._require_user("saved.move_to_cart")
        if denied:
            return denied

        entry = self.find_entry(entry_id)
        if entry is None:
            # unknown id: nothing to move
            return OperationResult(operation="saved.move_to_cart", data={"entry_id": entry_id})

        data = {"entry_id": entry.id, "product_id": entry.product_id, "quantity": entry.quantity}
        with self._busy():
            # step 1
            try:
                await self._merge_into_cart(entry)
            except REMOTE_ERRORS as e:
                return self._notify(result_from_error("saved.move_to_cart", e, data))

            # step 2
            try:
                await self.repo.delete(self.client, self.user.id, entry.id)
            except REMOTE_ERRORS as e:
                logger.warning(
                    "saved entry %s copied to cart but not deleted: %s", entry.id, e
                )
                result = OperationResult(
                    operation="saved.move_to_cart",
                    status="needs_reconciliation",
                    message=f"The item is in your cart but is still listed as saved: {error_message(e)}",
                    error_code=error_code(e),
                    data={**data, "cart_committed": True},
                )
            else:
                result = OperationResult(operation="saved.move_to_cart", data=data)

            # step 3
            await self.fetch_saved_items()
            if self.cart is not None:
                await self.cart.fetch_cart()

        return self._notify(result)
