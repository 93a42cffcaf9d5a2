# storefront/repositories/saved_repo.py
from supabase import AsyncClient

from storefront.models.saved import SavedForLaterEntry

SELECT = "*, products(id, name, description, price, image_url, inventory_count)"


class SavedForLaterRepository:
    """Data access for public.saved_for_later."""

    async def list_for_user(
        self, client: AsyncClient, user_id: str
    ) -> list[SavedForLaterEntry]:
        # newest first
        resp = await (
            client.table(SavedForLaterEntry.TABLE)
            .select(SELECT)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [SavedForLaterEntry.model_validate(row) for row in resp.data or []]

    async def create(
        self, client: AsyncClient, user_id: str, product_id: str, quantity: int
    ) -> None:
        await (
            client.table(SavedForLaterEntry.TABLE)
            .insert({"user_id": user_id, "product_id": product_id, "quantity": quantity})
            .execute()
        )

    async def delete(self, client: AsyncClient, user_id: str, entry_id: str) -> None:
        await (
            client.table(SavedForLaterEntry.TABLE)
            .delete()
            .eq("id", entry_id)
            .eq("user_id", user_id)
            .execute()
        )
