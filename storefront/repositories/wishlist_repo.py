# storefront/repositories/wishlist_repo.py
from supabase import AsyncClient

from storefront.models.wishlist import WishlistEntry

SELECT = "*, products(id, name, price, image_url, inventory_count, stores(name))"


class WishlistRepository:
    """Data access for public.wishlist_items."""

    async def list_for_user(self, client: AsyncClient, user_id: str) -> list[WishlistEntry]:
        resp = await (
            client.table(WishlistEntry.TABLE)
            .select(SELECT)
            .eq("user_id", user_id)
            .execute()
        )
        return [WishlistEntry.model_validate(row) for row in resp.data or []]

    async def create(self, client: AsyncClient, user_id: str, product_id: str) -> None:
        await (
            client.table(WishlistEntry.TABLE)
            .insert({"user_id": user_id, "product_id": product_id})
            .execute()
        )

    async def delete_product(self, client: AsyncClient, user_id: str, product_id: str) -> None:
        await (
            client.table(WishlistEntry.TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .execute()
        )
