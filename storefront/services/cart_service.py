# storefront/services/cart_service.py
import logging

from supabase import AsyncClient

from storefront.core.errors import REMOTE_ERRORS, error_message, result_from_error
from storefront.core.notifications import Notifier
from storefront.core.session import AuthSession
from storefront.models.cart import CartLine
from storefront.repositories.cart_repo import CartRepository
from storefront.schemas.cart import CartSummary, ReorderItem
from storefront.schemas.result import OperationResult
from storefront.services.store import RemoteStore

logger = logging.getLogger(__name__)


class CartStore(RemoteStore):
    """
    The signed-in user's cart.

    Responsibilities:
      - keep a local copy of cart_items for the user
      - merge repeated adds of one product into a single line
      - re-fetch after every write instead of patching the local copy
      - report every outcome as an OperationResult (and notification)

    Known limitation: add_to_cart reads the current quantity from the local
    copy and writes back quantity + n. Two overlapping adds of the same
    product can both read the same value and one increment is lost; the last
    write wins. Serial adds are exact.
    """

    def __init__(
        self,
        client: AsyncClient,
        session: AuthSession,
        notifier: Notifier | None = None,
        repo: CartRepository | None = None,
    ):
        super().__init__(client, session, notifier)
        self.repo = repo or CartRepository()
        self.items: list[CartLine] = []
        self.item_count = 0

    # ---- derived ----

    @property
    def total_price(self) -> float:
        return sum(line.line_total for line in self.items)

    def find_line(self, product_id: str) -> CartLine | None:
        return next((line for line in self.items if line.product_id == product_id), None)

    def summary(self) -> CartSummary:
        return CartSummary(
            items=list(self.items),
            item_count=self.item_count,
            total_price=self.total_price,
            state=self.state,
            loading=self.loading,
        )

    def reset(self) -> None:
        self.items = []
        self.item_count = 0

    # ---- reads ----

    async def refresh(self) -> OperationResult:
        return await self.fetch_cart()

    async def fetch_cart(self) -> OperationResult:
        """
        Replace the local copy with the backend's rows.

        No user => no-op.
        """
        result = OperationResult(operation="cart.fetch")
        if self.user is None:
            return result

        user_id = self.user.id
        self.state = "loading"
        with self._busy():
            try:
                lines = await self.repo.list_for_user(self.client, user_id)
            except REMOTE_ERRORS as e:
                if self._discard("cart fetch error", user_id):
                    return result
                self.state = "error"
                self.error = str(e)
                return self._notify(result_from_error("cart.fetch", e))

        if self._discard("cart rows", user_id):
            return result
        self.items = lines
        self.item_count = sum(line.quantity for line in lines)
        self.state = "populated"
        self.error = None
        return result

    # ---- writes ----

    async def _merge_add(self, product_id: str, quantity: int) -> None:
        """
        Increment the existing line for product_id, or insert one.

        A merged quantity of zero or less deletes the line.
        """
        existing = self.find_line(product_id)
        if existing is None:
            await self.repo.create(self.client, self.user.id, product_id, quantity)
            return

        merged = existing.quantity + quantity
        if merged > 0:
            await self.repo.set_quantity(self.client, self.user.id, existing.id, merged)
        else:
            await self.repo.delete(self.client, self.user.id, existing.id)

    async def add_to_cart(self, product_id: str, quantity: int = 1) -> OperationResult:
        """
        Add `quantity` of a product.

        Requires a signed-in user; otherwise auth_required and nothing changes.
        A non-positive quantity only lowers an existing line; it never
        creates one.
        """
        denied = self._require_user("cart.add")
        if denied:
            return denied
        if quantity <= 0 and self.find_line(product_id) is None:
            return self._notify(
                OperationResult(
                    operation="cart.add",
                    status="remote_failure",
                    message="Quantity must be at least 1.",
                    data={"product_id": product_id},
                )
            )

        with self._busy():
            try:
                await self._merge_add(product_id, quantity)
            except REMOTE_ERRORS as e:
                return self._notify(result_from_error("cart.add", e))
            await self.fetch_cart()

        return self._notify(
            OperationResult(operation="cart.add", data={"product_id": product_id})
        )

    async def update_quantity(self, line_id: str, quantity: int) -> OperationResult:
        """
        Set a line's quantity. Zero or less removes the line.
        """
        if quantity <= 0:
            return await self.remove_from_cart(line_id)

        denied = self._require_user("cart.update")
        if denied:
            return denied

        with self._busy():
            try:
                await self.repo.set_quantity(self.client, self.user.id, line_id, quantity)
            except REMOTE_ERRORS as e:
                return self._notify(result_from_error("cart.update", e))
            await self.fetch_cart()

        # silent on success
        return OperationResult(operation="cart.update")

    async def remove_from_cart(self, line_id: str) -> OperationResult:
        denied = self._require_user("cart.remove")
        if denied:
            return denied

        with self._busy():
            try:
                await self.repo.delete(self.client, self.user.id, line_id)
            except REMOTE_ERRORS as e:
                return self._notify(result_from_error("cart.remove", e))
            await self.fetch_cart()

        return self._notify(OperationResult(operation="cart.remove"))

    async def clear_cart(self) -> OperationResult:
        """
        Delete every line of the user's cart.

        The local copy is emptied before the delete is confirmed. If the
        delete fails the local copy stays empty until the next fetch.
        """
        if self.user is None:
            return OperationResult(operation="cart.clear")

        self.reset()
        with self._busy():
            try:
                await self.repo.clear_user_cart(self.client, self.user.id)
            except REMOTE_ERRORS as e:
                return self._notify(result_from_error("cart.clear", e))

        return self._notify(OperationResult(operation="cart.clear"))

    async def reorder(self, items: list[ReorderItem]) -> OperationResult:
        """
        Add the still-active lines of a past order to the cart.

        Lines are added one by one with the normal merge rule. When a later
        line fails after earlier ones were committed, the committed ones stay
        in the cart and the result is needs_reconciliation, listing both.
        """
        denied = self._require_user("cart.reorder")
        if denied:
            return denied

        active = [item for item in items if item.is_active]
        skipped = len(items) - len(active)
        if not active:
            return self._notify(
                OperationResult(
                    operation="cart.reorder",
                    status="remote_failure",
                    message="None of the products in this order are currently available.",
                    data={"added": [], "skipped": skipped},
                )
            )

        added: list[str] = []
        with self._busy():
            for item in active:
                try:
                    await self._merge_add(item.product_id, item.quantity)
                except REMOTE_ERRORS as e:
                    data = {"added": added, "failed": item.product_id, "skipped": skipped}
                    await self.fetch_cart()
                    if not added:
                        return self._notify(result_from_error("cart.reorder", e, data))
                    return self._notify(
                        OperationResult(
                            operation="cart.reorder",
                            status="needs_reconciliation",
                            message=f"{len(added)} items added before an error: {error_message(e)}",
                            data=data,
                        )
                    )
                added.append(item.product_id)
                # keep the local copy current so the next merge sees this line
                await self.fetch_cart()

        if skipped:
            message = f"{len(added)} items added. {skipped} unavailable items were skipped."
        else:
            message = f"{len(added)} items have been added to your cart."
        return self._notify(
            OperationResult(
                operation="cart.reorder",
                message=message,
                data={"added": added, "skipped": skipped},
            )
        )
