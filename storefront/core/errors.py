# storefront/core/errors.py
import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError

from storefront.schemas.result import OperationResult

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"

# Everything a store catches at its boundary: errors from PostgREST or the
# transport, and rows that do not fit the row models.
REMOTE_ERRORS = (APIError, httpx.HTTPError, ValidationError)


def error_message(exc: Exception) -> str:
    """Best human-readable text for a remote error."""
    if isinstance(exc, APIError):
        return exc.message or str(exc)
    if isinstance(exc, ValidationError):
        return f"Unexpected data from the server ({exc.error_count()} invalid fields)"
    return str(exc) or exc.__class__.__name__


def error_code(exc: Exception) -> str | None:
    if isinstance(exc, APIError):
        return exc.code
    return None


def is_conflict(exc: Exception) -> bool:
    return error_code(exc) == UNIQUE_VIOLATION


def result_from_error(operation: str, exc: Exception, data: dict | None = None) -> OperationResult:
    """
    Convert a remote exception into an OperationResult.

    Unique violations become `conflict`, anything else `remote_failure`.
    """
    return OperationResult(
        operation=operation,
        status="conflict" if is_conflict(exc) else "remote_failure",
        message=error_message(exc),
        error_code=error_code(exc),
        data=data,
    )


def auth_required(operation: str) -> OperationResult:
    return OperationResult(operation=operation, status="auth_required")


# HTTP status for a result returned by a route
HTTP_STATUS = {
    "ok": 200,
    "needs_reconciliation": 200,
    "conflict": 409,
    "auth_required": 401,
    "remote_failure": 502,
}


def http_status_for(result: OperationResult | None) -> int:
    if result is None:
        return 200
    return HTTP_STATUS.get(result.status, 200)
