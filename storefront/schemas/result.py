# storefront/schemas/result.py
from typing import Any, Literal

from sqlmodel import SQLModel, Field

ResultStatus = Literal[
    "ok",
    "auth_required",
    "remote_failure",
    "conflict",
    "needs_reconciliation",
]

# Shared load lifecycle of every store:
#   uninitialized -> loading -> populated | error
#   populated | error -> loading on any re-fetch trigger
LoadState = Literal["uninitialized", "loading", "populated", "error"]


class OperationResult(SQLModel):
    """
    Typed outcome of a store mutation.

    Stores never raise remote errors to the caller; they return one of these
    and the notification adapter turns it into user-facing text.

      - ok: the operation completed
      - auth_required: no signed-in user, nothing was attempted
      - remote_failure: the backend call failed, message carries its text
      - conflict: a uniqueness violation that means "already done"
      - needs_reconciliation: a multi-step operation stopped half-way;
        `data` describes what was committed
    """

    operation: str
    status: ResultStatus = "ok"
    message: str | None = None
    error_code: str | None = None
    data: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


Variant = Literal["default", "destructive"]


class Notification(SQLModel):
    """What the user sees for an outcome (a toast)."""

    title: str
    description: str | None = None
    variant: Variant = "default"


class OperationResponse(SQLModel):
    """Body of every mutating HTTP call: outcome plus the toasts it produced."""

    result: OperationResult | None = None
    notifications: list[Notification] = Field(default_factory=list)
