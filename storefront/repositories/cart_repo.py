# storefront/repositories/cart_repo.py
from supabase import AsyncClient

from storefront.models.cart import CartLine

PRODUCT_COLUMNS = "products(id, name, price, image_url, inventory_count, is_active)"


class CartRepository:
    """
    Data access for public.cart_items.

    - Pure remote operations, no caching, no notifications.
    - Every mutation is scoped by user_id as well as id, so a stale or
      forged line id can never touch another user's cart.
    """

    async def list_for_user(self, client: AsyncClient, user_id: str) -> list[CartLine]:
        resp = await (
            client.table(CartLine.TABLE)
            .select(f"*, {PRODUCT_COLUMNS}")
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return [CartLine.model_validate(row) for row in resp.data or []]

    async def get_item(
        self, client: AsyncClient, user_id: str, product_id: str
    ) -> CartLine | None:
        resp = await (
            client.table(CartLine.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .limit(1)
            .execute()
        )
        rows = resp.data or []
        return CartLine.model_validate(rows[0]) if rows else None

    async def create(
        self, client: AsyncClient, user_id: str, product_id: str, quantity: int
    ) -> None:
        await (
            client.table(CartLine.TABLE)
            .insert({"user_id": user_id, "product_id": product_id, "quantity": quantity})
            .execute()
        )

    async def set_quantity(
        self, client: AsyncClient, user_id: str, line_id: str, quantity: int
    ) -> None:
        await (
            client.table(CartLine.TABLE)
            .update({"quantity": quantity})
            .eq("id", line_id)
            .eq("user_id", user_id)
            .execute()
        )

    async def delete(self, client: AsyncClient, user_id: str, line_id: str) -> None:
        await (
            client.table(CartLine.TABLE)
            .delete()
            .eq("id", line_id)
            .eq("user_id", user_id)
            .execute()
        )

    async def clear_user_cart(self, client: AsyncClient, user_id: str) -> None:
        await client.table(CartLine.TABLE).delete().eq("user_id", user_id).execute()
