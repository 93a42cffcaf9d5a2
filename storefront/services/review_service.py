# storefront/services/review_service.py
from supabase import AsyncClient

from storefront.core.errors import REMOTE_ERRORS, auth_required, result_from_error
from storefront.core.notifications import Notifier
from storefront.core.session import AuthSession
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.result import OperationResult


class ReviewService:
    """Review interactions of the signed-in user."""

    def __init__(
        self,
        client: AsyncClient,
        session: AuthSession,
        notifier: Notifier | None = None,
        repo: ReviewRepository | None = None,
    ):
        self.client = client
        self.session = session
        self.notifier = notifier or Notifier()
        self.repo = repo or ReviewRepository()

    async def mark_helpful(self, review_id: str) -> OperationResult:
        """
        Vote a review as helpful.

        Voting twice hits the unique (review_id, user_id) constraint and
        comes back as conflict ("Already voted"), not as a failure.
        """
        user = self.session.user
        if user is None:
            result = auth_required("reviews.mark_helpful")
        else:
            try:
                await self.repo.add_helpful_vote(self.client, user.id, review_id)
            except REMOTE_ERRORS as e:
                result = result_from_error("reviews.mark_helpful", e)
            else:
                result = OperationResult(operation="reviews.mark_helpful")

        self.notifier.notify(result)
        return result
