# storefront/services/store_analytics_service.py
import logging
from typing import Any

from supabase import AsyncClient

from storefront.core.errors import REMOTE_ERRORS
from storefront.models.product import LowStockProduct
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.analytics import StoreAnalyticsSummary

logger = logging.getLogger(__name__)


class StoreAnalyticsService:
    """
    Per-store numbers for the seller dashboard.

    Failures are logged, never shown: a new store with no data is normal.
    """

    def __init__(self, client: AsyncClient, repo: StatsRepository | None = None):
        self.client = client
        self.repo = repo or StatsRepository()

    async def get_summary(self, store_id: str, days: int = 30) -> StoreAnalyticsSummary | None:
        """None only when the lookup failed."""
        try:
            summary = await self.repo.store_analytics_summary(self.client, store_id, days)
        except REMOTE_ERRORS as e:
            logger.error("Error fetching store analytics for %s: %s", store_id, e)
            return None
        return summary or StoreAnalyticsSummary()

    async def track_view(self, store_id: str, visitor_data: dict[str, Any] | None = None) -> None:
        try:
            await self.repo.track_store_view(self.client, store_id, visitor_data or {})
        except REMOTE_ERRORS as e:
            logger.error("Error tracking store view for %s: %s", store_id, e)

    async def low_stock_products(self, store_id: str) -> list[LowStockProduct]:
        try:
            return await self.repo.low_stock_products(self.client, store_id)
        except REMOTE_ERRORS as e:
            logger.error("Error fetching low stock products for %s: %s", store_id, e)
            return []
