# storefront/core/supabase_client.py
from supabase import AsyncClient, acreate_client

from storefront.core.config import get_settings

_public_client: AsyncClient | None = None


async def supabase_public() -> AsyncClient:
    """
    Shared async Supabase client with the anon/public key.

    Created once and reused. Realtime channels are only available on the
    async client, which is why every store is built on it.

    Note: This client still respects RLS.
    """
    global _public_client
    if _public_client is None:
        settings = get_settings()
        _public_client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _public_client


async def supabase_for_token(access_token: str) -> AsyncClient:
    """
    Create a client that acts as the bearer of `access_token`.

    Use cases:
      - HTTP requests on behalf of a signed-in user, so RLS policies
        see auth.uid() = the caller.
    """
    settings = get_settings()
    client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    client.postgrest.auth(access_token)
    return client


async def close_public_client() -> None:
    """Drop realtime connections of the shared client on shutdown."""
    global _public_client
    if _public_client is not None:
        await _public_client.remove_all_channels()
        _public_client = None
