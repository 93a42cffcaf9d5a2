# storefront/core/notifications.py
"""
Presentation adapter: OperationResult -> user-facing notification.

Stores return typed results and hand them to a Notifier. The Notifier is
the only place that knows the wording shown to the user, so store logic can
be tested without any UI.
"""
import logging

from storefront.schemas.result import Notification, OperationResult, Variant

logger = logging.getLogger(__name__)

# (operation, status) -> (title, description)
# A description of None on a failure means "use the remote error message".
MESSAGES: dict[tuple[str, str], tuple[str, str | None]] = {
    # cart
    ("cart.fetch", "remote_failure"): ("Error loading cart", None),
    ("cart.add", "ok"): ("Added to cart", "Item has been added to your cart"),
    ("cart.add", "auth_required"): (
        "Please sign in",
        "You need to be signed in to add items to cart",
    ),
    ("cart.add", "remote_failure"): ("Error adding to cart", None),
    ("cart.update", "remote_failure"): ("Error updating cart", None),
    ("cart.remove", "ok"): ("Removed from cart", "Item has been removed from your cart"),
    ("cart.remove", "remote_failure"): ("Error removing item", None),
    ("cart.clear", "ok"): ("Cart cleared", "All items have been removed from your cart"),
    ("cart.clear", "remote_failure"): ("Error clearing cart", None),
    ("cart.reorder", "ok"): ("Added to cart!", None),
    ("cart.reorder", "remote_failure"): ("Cannot reorder", None),
    ("cart.reorder", "needs_reconciliation"): ("Reorder incomplete", None),
    # wishlist
    ("wishlist.add", "ok"): ("Added to wishlist", "Product has been saved to your wishlist."),
    ("wishlist.add", "auth_required"): (
        "Authentication required",
        "Please sign in to save items to your wishlist.",
    ),
    ("wishlist.add", "conflict"): ("Already in wishlist", "This product is already saved."),
    ("wishlist.add", "remote_failure"): ("Error adding to wishlist", None),
    ("wishlist.remove", "ok"): (
        "Removed from wishlist",
        "Product has been removed from your wishlist.",
    ),
    ("wishlist.remove", "remote_failure"): ("Error removing from wishlist", None),
    # saved for later
    ("saved.fetch", "remote_failure"): ("Error loading saved items", None),
    ("saved.save", "ok"): ("Saved for later", "Item has been saved for later"),
    ("saved.save", "remote_failure"): ("Error saving item", None),
    ("saved.move_to_cart", "ok"): ("Moved to cart", "Item has been moved to your cart"),
    ("saved.move_to_cart", "remote_failure"): ("Error moving item", None),
    ("saved.move_to_cart", "needs_reconciliation"): ("Item added to cart", None),
    ("saved.remove", "ok"): ("Item removed", "Item has been removed from saved items"),
    ("saved.remove", "remote_failure"): ("Error removing item", None),
    # reviews
    ("reviews.mark_helpful", "ok"): ("Thanks for your feedback!", None),
    ("reviews.mark_helpful", "auth_required"): (
        "Authentication required",
        "Please sign in to vote.",
    ),
    ("reviews.mark_helpful", "conflict"): (
        "Already voted",
        "You've already marked this review as helpful.",
    ),
}

_DEFAULT_AUTH_REQUIRED = ("Please sign in", "You need to be signed in to do that")


def to_notification(result: OperationResult) -> Notification | None:
    """
    Map a result to the notification shown for it.

    Returns None for outcomes that are silent (e.g. a successful quantity
    update or a successful fetch).
    """
    entry = MESSAGES.get((result.operation, result.status))
    if entry is None:
        if result.status == "auth_required":
            entry = _DEFAULT_AUTH_REQUIRED
        elif result.status in ("remote_failure", "needs_reconciliation"):
            entry = ("Something went wrong", None)
        else:
            return None

    title, description = entry
    if description is None:
        description = result.message

    variant: Variant = "default"
    if result.status in ("auth_required", "remote_failure", "needs_reconciliation"):
        variant = "destructive"
    return Notification(title=title, description=description, variant=variant)


class Notifier:
    """
    Default notification sink.

    Logs every notification and keeps it until drained, so an HTTP handler
    (or a test) can return what the user would have seen.
    """

    def __init__(self) -> None:
        self._pending: list[Notification] = []

    def notify(self, result: OperationResult) -> Notification | None:
        notification = to_notification(result)
        if notification is not None:
            self.push(notification)
        return notification

    def push(self, notification: Notification) -> None:
        level = logging.WARNING if notification.variant == "destructive" else logging.INFO
        logger.log(level, "notify: %s - %s", notification.title, notification.description)
        self._pending.append(notification)

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)

    def drain(self) -> list[Notification]:
        out, self._pending = self._pending, []
        return out
