# storefront/models/activity.py
from datetime import datetime
from typing import Any, ClassVar

from pydantic import model_validator
from sqlmodel import SQLModel, Field


class ActivityLog(SQLModel):
    """
    Row of public.user_activity_logs (written only via log_user_activity).

    The `metadata` column is exposed as `details`: SQLModel reserves
    `metadata` for its own table registry.
    """

    TABLE: ClassVar[str] = "user_activity_logs"

    id: str
    activity_type: str
    activity_category: str
    description: str
    details: dict[str, Any] = Field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _rename_metadata(cls, data: Any) -> Any:
        if isinstance(data, dict) and "metadata" in data:
            data = dict(data)
            data["details"] = data.pop("metadata") or {}
        return data
