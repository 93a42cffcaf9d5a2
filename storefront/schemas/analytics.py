# storefront/schemas/analytics.py
from sqlmodel import SQLModel, Field


class DailyAnalytics(SQLModel):
    date: str
    views: int = 0
    unique_visitors: int = 0
    orders: int = 0
    revenue: float = 0.0
    conversion_rate: float = 0.0


class StoreAnalyticsSummary(SQLModel):
    """
    Result of get_store_analytics_summary(p_store_id, p_days).

    A store with no recorded traffic gets the all-zero default.
    """

    total_views: int = 0
    total_unique_visitors: int = 0
    total_orders: int = 0
    total_revenue: float = 0.0
    avg_conversion_rate: float = 0.0
    daily_data: list[DailyAnalytics] = Field(default_factory=list)
