# storefront/services/subscription_service.py
import asyncio
import logging

from supabase import AsyncClient

from storefront.core.errors import REMOTE_ERRORS, result_from_error
from storefront.core.notifications import Notifier
from storefront.core.realtime import TableWatch
from storefront.core.session import AuthSession
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.result import Notification, OperationResult
from storefront.schemas.subscription import SubscriptionStatus
from storefront.schemas.user import AuthUser
from storefront.services.store import RemoteStore

logger = logging.getLogger(__name__)

SUBSCRIPTIONS_TABLE = "user_subscriptions"


class SubscriptionStore(RemoteStore):
    """
    Plan gating flags for the signed-in user.

    - status comes from one remote aggregate; no row => all-false default
    - any change to the user's user_subscriptions row triggers a re-fetch
    - a paid plan with 1..3 days left pushes a renewal reminder on every
      successful fetch
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
        self.status = SubscriptionStatus()
        self.watch: TableWatch | None = None
        self._rebinds: set[asyncio.Task] = set()
        self._bind_lock = asyncio.Lock()

    def reset(self) -> None:
        self.status = SubscriptionStatus()

    # ---- lifecycle ----

    async def start(self) -> None:
        self._remove_listener = self.session.add_listener(self._on_user_change)
        await self._bind()
        await self._trigger.wait_idle()

    def _on_user_change(self, user: AuthUser | None) -> None:
        self.reset()
        task = asyncio.get_running_loop().create_task(self._bind())
        self._rebinds.add(task)
        task.add_done_callback(self._rebinds.discard)

    async def _bind(self) -> None:
        """
        (Re)subscribe to the current user's subscription row and reload.

        Rebinds run one at a time and each reads the user when it runs, so
        after a burst of identity changes exactly one watch is left, for
        the latest user.
        """
        async with self._bind_lock:
            if self._closed:
                return
            if self.watch is not None:
                watch, self.watch = self.watch, None
                await watch.stop()

            if self.user is None:
                self.reset()
                self.state = "populated"
                return

            self.watch = TableWatch(
                self.client,
                "subscription_changes",
                SUBSCRIPTIONS_TABLE,
                on_change=self.invalidate,
                row_filter=f"user_id=eq.{self.user.id}",
            )
            await self.watch.start()
            self.invalidate()

    async def close(self) -> None:
        await super().close()
        # queued rebinds see the store closed and return without binding
        await asyncio.gather(*list(self._rebinds), return_exceptions=True)
        async with self._bind_lock:
            if self.watch is not None:
                watch, self.watch = self.watch, None
                await watch.stop()

    # ---- reads ----

    async def refresh(self) -> OperationResult:
        return await self.fetch_status()

    async def fetch_status(self) -> OperationResult:
        result = OperationResult(operation="subscription.fetch")
        if self.user is None:
            return result

        user_id = self.user.id
        self.state = "loading"
        with self._busy():
            try:
                status = await self.repo.subscription_status(self.client, user_id)
            except REMOTE_ERRORS as e:
                logger.error("Error fetching subscription status: %s", e)
                if not self._discard("subscription fetch error", user_id):
                    self.state = "error"
                    self.error = str(e)
                return result_from_error("subscription.fetch", e)

        if self._discard("subscription status", user_id):
            return result
        self.status = status or SubscriptionStatus()
        self.state = "populated"
        self.error = None

        if self.status.needs_renewal_reminder:
            days = self.status.days_remaining
            self.notifier.push(
                Notification(
                    title="Subscription ending soon",
                    description=(
                        f"Your {self.status.plan_name or 'current'} plan expires in "
                        f"{days} day{'s' if days != 1 else ''}. Renew to keep selling."
                    ),
                )
            )
        return result

    async def can_add_product(self) -> bool:
        """
        Ask the backend whether one more product fits the plan.

        Not cached. Any error counts as "no".
        """
        if self.user is None:
            return False
        try:
            return await self.repo.can_add_product(self.client, self.user.id)
        except REMOTE_ERRORS as e:
            logger.error("Error checking product limit: %s", e)
            return False
