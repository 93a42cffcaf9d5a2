# storefront/core/activity.py
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Literal

ActivityCategory = Literal["auth", "profile", "order", "payment", "store", "product", "security"]


class ActivityType:
    """Activity type labels, shared so the log stays consistent."""

    # Auth
    LOGIN = "Login"
    LOGOUT = "Logout"
    SIGNUP = "Account Created"
    PASSWORD_CHANGE = "Password Changed"
    PASSWORD_RESET = "Password Reset"
    EMAIL_VERIFIED = "Email Verified"

    # Profile
    PROFILE_UPDATE = "Profile Updated"
    AVATAR_UPLOAD = "Avatar Uploaded"
    AVATAR_DELETE = "Avatar Deleted"

    # Orders
    ORDER_CREATED = "Order Created"
    ORDER_CANCELLED = "Order Cancelled"
    ORDER_COMPLETED = "Order Completed"
    ORDER_SHIPPED = "Order Shipped"

    # Payments
    PAYMENT_SUBMITTED = "Payment Submitted"
    PAYMENT_APPROVED = "Payment Approved"
    PAYMENT_REJECTED = "Payment Rejected"

    # Store
    STORE_CREATED = "Store Created"
    STORE_UPDATED = "Store Updated"
    STORE_DELETED = "Store Deleted"

    # Product
    PRODUCT_CREATED = "Product Created"
    PRODUCT_UPDATED = "Product Updated"
    PRODUCT_DELETED = "Product Deleted"

    # Security
    SESSION_REVOKED = "Session Revoked"
    MFA_ENABLED = "2FA Enabled"
    MFA_DISABLED = "2FA Disabled"


class ActivityLogger(ABC):
    """What AuthSession needs from an activity log."""

    @abstractmethod
    async def log_activity(
        self,
        user_id: str,
        activity_type: str,
        activity_category: ActivityCategory,
        description: str,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """Write one entry; True when it was written. Never raises."""

    @abstractmethod
    def log_in_background(self, *args: Any, **kwargs: Any) -> asyncio.Task:
        """Fire-and-forget variant of log_activity."""
