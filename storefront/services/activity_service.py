# storefront/services/activity_service.py
import asyncio
import logging
from typing import Any

from supabase import AsyncClient

from storefront.core.activity import ActivityCategory, ActivityLogger
from storefront.core.errors import REMOTE_ERRORS
from storefront.models.activity import ActivityLog
from storefront.repositories.activity_repo import ActivityRepository

logger = logging.getLogger(__name__)

USER_AGENT = "storefront-python"


class ActivityService(ActivityLogger):
    """
    Activity logging.

    Logging is best effort: a failed write is reported to the log and
    never to the caller.
    """

    def __init__(self, client: AsyncClient, repo: ActivityRepository | None = None):
        self.client = client
        self.repo = repo or ActivityRepository()
        self.logs: list[ActivityLog] = []
        self._background: set[asyncio.Task] = set()

    async def log_activity(
        self,
        user_id: str,
        activity_type: str,
        activity_category: ActivityCategory,
        description: str,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """Returns True when the entry was written."""
        try:
            await self.repo.log(
                self.client,
                user_id=user_id,
                activity_type=activity_type,
                activity_category=activity_category,
                description=description,
                metadata=metadata or {},
                user_agent=USER_AGENT,
            )
        except REMOTE_ERRORS as e:
            logger.error("Error logging activity %r for %s: %s", activity_type, user_id, e)
            return False
        return True

    def log_in_background(self, *args: Any, **kwargs: Any) -> asyncio.Task:
        """Fire-and-forget variant of log_activity."""
        task = asyncio.get_running_loop().create_task(self.log_activity(*args, **kwargs))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def fetch_activity_logs(self, user_id: str, limit: int = 50) -> list[ActivityLog]:
        try:
            self.logs = await self.repo.list_for_user(self.client, user_id, limit=limit)
        except REMOTE_ERRORS as e:
            logger.error("Error fetching activity logs: %s", e)
        return self.logs
