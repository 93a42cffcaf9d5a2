# storefront/repositories/stats_repo.py
from typing import Any

from supabase import AsyncClient

from storefront.models.product import LowStockProduct
from storefront.schemas.analytics import StoreAnalyticsSummary
from storefront.schemas.subscription import SubscriptionStatus
from storefront.schemas.usage import UsageStats


def first_row(data: Any) -> dict | None:
    """
    Aggregate RPCs are declared as set-returning functions; the caller wants
    the single row, or None when the set is empty.
    """
    if isinstance(data, list):
        return data[0] if data else None
    if isinstance(data, dict):
        return data
    return None


class StatsRepository:
    """
    Read-only aggregate lookups backed by remote procedures.

    The functions live in the database; this class only names them and
    shapes their rows.
    """

    async def subscription_status(
        self, client: AsyncClient, user_id: str
    ) -> SubscriptionStatus | None:
        resp = await client.rpc(
            "get_user_subscription_status", {"user_id_param": user_id}
        ).execute()
        row = first_row(resp.data)
        return SubscriptionStatus.model_validate(row) if row else None

    async def can_add_product(self, client: AsyncClient, user_id: str) -> bool:
        resp = await client.rpc("can_add_product", {"user_id_param": user_id}).execute()
        data = resp.data
        if isinstance(data, list):
            data = data[0] if data else False
        return bool(data)

    async def usage_stats(self, client: AsyncClient, user_id: str) -> UsageStats | None:
        resp = await client.rpc("get_user_usage_stats", {"user_id_param": user_id}).execute()
        row = first_row(resp.data)
        return UsageStats.model_validate(row) if row else None

    async def store_analytics_summary(
        self, client: AsyncClient, store_id: str, days: int = 30
    ) -> StoreAnalyticsSummary | None:
        resp = await client.rpc(
            "get_store_analytics_summary", {"p_store_id": store_id, "p_days": days}
        ).execute()
        row = first_row(resp.data)
        return StoreAnalyticsSummary.model_validate(row) if row else None

    async def track_store_view(
        self, client: AsyncClient, store_id: str, visitor_data: dict[str, Any]
    ) -> None:
        await client.rpc(
            "track_store_view", {"p_store_id": store_id, "p_visitor_data": visitor_data}
        ).execute()

    async def low_stock_products(
        self, client: AsyncClient, store_id: str
    ) -> list[LowStockProduct]:
        resp = await client.rpc(
            "get_low_stock_products", {"store_id_param": store_id}
        ).execute()
        return [LowStockProduct.model_validate(row) for row in resp.data or []]
