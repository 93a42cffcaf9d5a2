# storefront/routers/wishlist.py
from fastapi import APIRouter, Depends, Response

from storefront.core.auth import RequestContext, get_request_context
from storefront.core.errors import http_status_for
from storefront.schemas.result import OperationResult
from storefront.schemas.wishlist import WishlistResponse
from storefront.services.wishlist_service import WishlistStore

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


async def load_wishlist(ctx: RequestContext) -> WishlistStore:
    store = WishlistStore(ctx.client, ctx.session, ctx.notifier)
    await store.fetch_wishlist()
    return store


def wishlist_response(
    response: Response, store: WishlistStore, ctx: RequestContext, result: OperationResult | None
) -> WishlistResponse:
    response.status_code = http_status_for(result)
    return WishlistResponse(
        items=list(store.items),
        state=store.state,
        result=result,
        notifications=ctx.notifier.drain(),
    )


@router.get("", response_model=WishlistResponse)
async def get_my_wishlist(response: Response, ctx: RequestContext = Depends(get_request_context)):
    store = await load_wishlist(ctx)
    return wishlist_response(response, store, ctx, None)


@router.post("/{product_id}", response_model=WishlistResponse)
async def add_to_wishlist(
    product_id: str,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    store = await load_wishlist(ctx)
    result = await store.add_to_wishlist(product_id)
    return wishlist_response(response, store, ctx, result)


@router.delete("/{product_id}", response_model=WishlistResponse)
async def remove_from_wishlist(
    product_id: str,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    store = await load_wishlist(ctx)
    result = await store.remove_from_wishlist(product_id)
    return wishlist_response(response, store, ctx, result)


@router.post("/{product_id}/toggle", response_model=WishlistResponse)
async def toggle_wishlist(
    product_id: str,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Add the product if absent, remove it if present.
    """
    store = await load_wishlist(ctx)
    result = await store.toggle_wishlist(product_id)
    return wishlist_response(response, store, ctx, result)
