# storefront/repositories/review_repo.py
from supabase import AsyncClient

HELPFUL_VOTES = "review_helpful_votes"


class ReviewRepository:
    """Data access for review helpful-votes ((review_id, user_id) is unique)."""

    async def add_helpful_vote(self, client: AsyncClient, user_id: str, review_id: str) -> None:
        await (
            client.table(HELPFUL_VOTES)
            .insert({"review_id": review_id, "user_id": user_id})
            .execute()
        )
