# tests/test_notifications.py
from storefront.core.errors import http_status_for, result_from_error
from storefront.core.notifications import Notifier, to_notification
from storefront.schemas.result import OperationResult

from conftest import api_error


def test_failure_uses_remote_message():
    result = result_from_error("cart.add", api_error("row level security"))

    note = to_notification(result)

    assert note.title == "Error adding to cart"
    assert note.description == "row level security"
    assert note.variant == "destructive"


def test_unique_violation_becomes_conflict():
    result = result_from_error("reviews.mark_helpful", api_error("dup", "23505"))

    assert result.status == "conflict"
    assert to_notification(result).title == "Already voted"
    assert http_status_for(result) == 409


def test_silent_outcomes():
    assert to_notification(OperationResult(operation="cart.update")) is None
    assert to_notification(OperationResult(operation="cart.fetch")) is None


def test_unknown_operation_falls_back():
    note = to_notification(OperationResult(operation="x.y", status="auth_required"))
    assert note.title == "Please sign in"

    note = to_notification(OperationResult(operation="x.y", status="remote_failure", message="nope"))
    assert note.title == "Something went wrong"
    assert note.description == "nope"


def test_notifier_drain():
    notifier = Notifier()
    notifier.notify(OperationResult(operation="cart.clear"))
    notifier.notify(OperationResult(operation="cart.update"))

    assert [n.title for n in notifier.pending] == ["Cart cleared"]
    assert len(notifier.drain()) == 1
    assert notifier.drain() == []


def test_http_status_mapping():
    assert http_status_for(None) == 200
    assert http_status_for(OperationResult(operation="a")) == 200
    assert http_status_for(OperationResult(operation="a", status="remote_failure")) == 502
    assert http_status_for(OperationResult(operation="a", status="needs_reconciliation")) == 200
