# storefront/schemas/usage.py
from typing import Any, Literal

from pydantic import model_validator
from sqlmodel import SQLModel

UsageLevel = Literal["healthy", "warning", "critical"]

WARNING_THRESHOLD = 75
CRITICAL_THRESHOLD = 90


class UsageStats(SQLModel):
    """
    Result of get_user_usage_stats(user_id_param).

    product_limit == 0 means unlimited; usage is then always 0%.
    If the row omits usage_percentage it is derived from the totals.
    """

    total_products: int = 0
    active_products: int = 0
    total_orders: int = 0
    total_revenue: float = 0.0
    product_limit: int = 0
    usage_percentage: float = 0

    @model_validator(mode="before")
    @classmethod
    def _derive_percentage(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("usage_percentage") is None:
            data = dict(data)
            limit = data.get("product_limit") or 0
            total = data.get("total_products") or 0
            data["usage_percentage"] = round(total * 100 / limit) if limit > 0 else 0
        return data

    @property
    def unlimited(self) -> bool:
        return self.product_limit == 0

    @property
    def usage_level(self) -> UsageLevel:
        if self.usage_percentage >= CRITICAL_THRESHOLD:
            return "critical"
        if self.usage_percentage >= WARNING_THRESHOLD:
            return "warning"
        return "healthy"


class UsageResponse(SQLModel):
    stats: UsageStats | None
    usage_level: UsageLevel | None = None
