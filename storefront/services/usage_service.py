# storefront/services/usage_service.py
import logging

from supabase import AsyncClient

from storefront.core.errors import REMOTE_ERRORS, result_from_error
from storefront.core.notifications import Notifier
from storefront.core.realtime import TableWatch
from storefront.core.session import AuthSession
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.result import OperationResult
from storefront.schemas.usage import UsageStats
from storefront.services.store import RemoteStore

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"


class UsageStore(RemoteStore):
    """
    Seller usage against the plan's product limit.

    Invalidation is coarse: a change to any row of products,
    anyone's, triggers a re-fetch.
    """

    def __init__(
        self,
        client: AsyncClient,
        session: AuthSession,
        notifier: Notifier | None = None,
        repo: StatsRepository | None = None,
    ):
        super().__init__(client, session, notifier)
        self.repo = repo or StatsRepository()
        self.stats: UsageStats | None = None
        self.watch = TableWatch(client, "usage_changes", PRODUCTS_TABLE, on_change=self.invalidate)

    def reset(self) -> None:
        self.stats = None

    async def start(self) -> None:
        await self.watch.start()
        await super().start()

    async def close(self) -> None:
        await super().close()
        await self.watch.stop()

    async def refresh(self) -> OperationResult:
        return await self.fetch_usage_stats()

    async def fetch_usage_stats(self) -> OperationResult:
        result = OperationResult(operation="usage.fetch")
        if self.user is None:
            return result

        user_id = self.user.id
        self.state = "loading"
        with self._busy():
            try:
                stats = await self.repo.usage_stats(self.client, user_id)
            except REMOTE_ERRORS as e:
                logger.error("Error fetching usage stats: %s", e)
                if not self._discard("usage fetch error", user_id):
                    self.state = "error"
                    self.error = str(e)
                return result_from_error("usage.fetch", e)

        if self._discard("usage stats", user_id):
            return result
        self.stats = stats
        self.state = "populated"
        self.error = None
        return result
