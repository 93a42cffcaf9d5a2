# storefront/repositories/activity_repo.py
from typing import Any

from supabase import AsyncClient

from storefront.models.activity import ActivityLog


class ActivityRepository:
    """Data access for the user activity log."""

    async def log(
        self,
        client: AsyncClient,
        *,
        user_id: str,
        activity_type: str,
        activity_category: str,
        description: str,
        metadata: dict[str, Any],
        user_agent: str | None = None,
    ) -> None:
        await client.rpc(
            "log_user_activity",
            {
                "p_user_id": user_id,
                "p_activity_type": activity_type,
                "p_activity_category": activity_category,
                "p_description": description,
                "p_metadata": metadata,
                "p_ip_address": None,
                "p_user_agent": user_agent,
            },
        ).execute()

    async def list_for_user(
        self, client: AsyncClient, user_id: str, limit: int = 50
    ) -> list[ActivityLog]:
        resp = await (
            client.table(ActivityLog.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [ActivityLog.model_validate(row) for row in resp.data or []]
