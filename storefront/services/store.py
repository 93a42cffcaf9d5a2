# storefront/services/store.py
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager

from supabase import AsyncClient

from storefront.core.errors import auth_required
from storefront.core.notifications import Notifier
from storefront.core.realtime import RefetchTrigger
from storefront.core.session import AuthSession
from storefront.schemas.result import LoadState, OperationResult
from storefront.schemas.user import AuthUser

logger = logging.getLogger(__name__)


class RemoteStore(ABC):
    """
    Cached, possibly stale copy of one remote collection for the current user.

    Lifecycle:
      - start(): follow the session's user and load
      - any re-fetch trigger (explicit, realtime, user change) goes through
        one RefetchTrigger, so bursts collapse into a single trailing fetch
      - close(): stop following; results that land afterwards are dropped

    Subclasses implement `refresh()` and `reset()`.
    """

    def __init__(self, client: AsyncClient, session: AuthSession, notifier: Notifier | None = None):
        self.client = client
        self.session = session
        self.notifier = notifier or Notifier()
        self.state: LoadState = "uninitialized"
        self.error: str | None = None
        self._in_flight = 0
        self._closed = False
        self._trigger = RefetchTrigger(self.refresh)
        self._remove_listener = None

    # ---- state ----

    @property
    def user(self) -> AuthUser | None:
        return self.session.user

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def _busy(self):
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1

    def _discard(self, what: str, user_id: str | None = None) -> bool:
        """
        True if `what` arrived too late to apply: the store was closed, or
        the user it was fetched for (`user_id`) is no longer signed in.
        """
        if self._closed:
            logger.debug("%s: dropping %s, store closed", type(self).__name__, what)
            return True
        current = self.user.id if self.user else None
        if user_id is not None and current != user_id:
            logger.debug("%s: dropping %s, user changed", type(self).__name__, what)
            return True
        return False

    def _notify(self, result: OperationResult) -> OperationResult:
        self.notifier.notify(result)
        return result

    def _require_user(self, operation: str) -> OperationResult | None:
        if self.user is None:
            return self._notify(auth_required(operation))
        return None

    # ---- lifecycle ----

    async def start(self) -> None:
        self._remove_listener = self.session.add_listener(self._on_user_change)
        await self.refetch()

    def _on_user_change(self, user: AuthUser | None) -> None:
        # the previous account's rows must not be visible to the next one
        self.reset()
        self.invalidate()

    def invalidate(self) -> None:
        self._trigger.invalidate()

    async def refetch(self) -> None:
        self.invalidate()
        await self._trigger.wait_idle()

    async def close(self) -> None:
        self._closed = True
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        await self._trigger.close()

    # ---- subclass hooks ----

    @abstractmethod
    async def refresh(self) -> OperationResult:
        """Re-load the collection for the current user."""

    @abstractmethod
    def reset(self) -> None:
        """Drop the cached copy."""
