# storefront/schemas/subscription.py
from typing import Any

from pydantic import model_validator
from sqlmodel import SQLModel

from storefront.schemas.result import OperationResponse

# Reminder window (days) for paid plans about to run out.
RENEWAL_REMINDER_DAYS = 3


class SubscriptionStatus(SQLModel):
    """
    Result of get_user_subscription_status(user_id_param).

    Derived on the backend; the client never mutates it.
    max_products None means unlimited.
    """

    has_active_subscription: bool = False
    is_trial: bool = False
    is_expired: bool = False
    days_remaining: int = 0
    plan_name: str | None = None
    max_products: int | None = None
    has_analytics: bool = False

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_defaults(cls, data: Any) -> Any:
        # SQL functions return NULL for missing booleans/counters
        if isinstance(data, dict):
            data = {k: v for k, v in data.items() if v is not None or k in ("plan_name", "max_products")}
        return data

    @property
    def needs_renewal_reminder(self) -> bool:
        """Paid plan with 1..3 days left."""
        return (
            not self.is_trial
            and 0 < self.days_remaining <= RENEWAL_REMINDER_DAYS
        )


class SubscriptionResponse(OperationResponse):
    status: SubscriptionStatus


class CanAddProductResponse(SQLModel):
    can_add_product: bool
