# storefront/services/wishlist_service.py
import logging

from supabase import AsyncClient

from storefront.core.errors import REMOTE_ERRORS, result_from_error
from storefront.core.notifications import Notifier
from storefront.core.session import AuthSession
from storefront.models.wishlist import WishlistEntry
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.result import OperationResult
from storefront.services.store import RemoteStore

logger = logging.getLogger(__name__)


class WishlistStore(RemoteStore):
    """
    The signed-in user's wishlist: a set of products.

    toggle_wishlist() decides between add and remove from the local copy,
    so two overlapping toggles can both see "absent". The backend's unique
    (user_id, product_id) constraint turns the second add into a conflict.
    """

    def __init__(
        self,
        client: AsyncClient,
        session: AuthSession,
        notifier: Notifier | None = None,
        repo: WishlistRepository | None = None,
    ):
        super().__init__(client, session, notifier)
        self.repo = repo or WishlistRepository()
        self.items: list[WishlistEntry] = []

    def reset(self) -> None:
        self.items = []

    def is_in_wishlist(self, product_id: str) -> bool:
        return any(entry.product_id == product_id for entry in self.items)

    async def refresh(self) -> OperationResult:
        return await self.fetch_wishlist()

    async def fetch_wishlist(self) -> OperationResult:
        result = OperationResult(operation="wishlist.fetch")
        if self.user is None:
            self.reset()
            self.state = "populated"
            return result

        user_id = self.user.id
        self.state = "loading"
        with self._busy():
            try:
                entries = await self.repo.list_for_user(self.client, user_id)
            except REMOTE_ERRORS as e:
                # not shown to the user, the heart icons just stay as they were
                logger.error("Error fetching wishlist: %s", e)
                if not self._discard("wishlist fetch error", user_id):
                    self.state = "error"
                    self.error = str(e)
                return result_from_error("wishlist.fetch", e)

        if self._discard("wishlist rows", user_id):
            return result
        self.items = entries
        self.state = "populated"
        self.error = None
        return result

    async def add_to_wishlist(self, product_id: str) -> OperationResult:
        denied = self._require_user("wishlist.add")
        if denied:
            return denied

        with self._busy():
            try:
                await self.repo.create(self.client, self.user.id, product_id)
            except REMOTE_ERRORS as e:
                return self._notify(result_from_error("wishlist.add", e))
            await self.fetch_wishlist()

        return self._notify(OperationResult(operation="wishlist.add"))

    async def remove_from_wishlist(self, product_id: str) -> OperationResult:
        denied = self._require_user("wishlist.remove")
        if denied:
            return denied

        with self._busy():
            try:
                await self.repo.delete_product(self.client, self.user.id, product_id)
            except REMOTE_ERRORS as e:
                return self._notify(result_from_error("wishlist.remove", e))
            await self.fetch_wishlist()

        return self._notify(OperationResult(operation="wishlist.remove"))

    async def toggle_wishlist(self, product_id: str) -> OperationResult:
        if self.is_in_wishlist(product_id):
            return await self.remove_from_wishlist(product_id)
        return await self.add_to_wishlist(product_id)
