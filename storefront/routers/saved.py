# storefront/routers/saved.py
from fastapi import APIRouter, Depends, Response

from storefront.core.auth import RequestContext, get_request_context
from storefront.core.errors import http_status_for
from storefront.schemas.result import OperationResult
from storefront.schemas.wishlist import SavedItemCreate, SavedItemsResponse
from storefront.services.saved_service import SavedForLaterStore

router = APIRouter(prefix="/saved", tags=["Saved for later"])


async def load_saved(ctx: RequestContext) -> SavedForLaterStore:
    store = SavedForLaterStore(ctx.client, ctx.session, ctx.notifier)
    await store.fetch_saved_items()
    return store


def saved_response(
    response: Response, store: SavedForLaterStore, ctx: RequestContext, result: OperationResult | None
) -> SavedItemsResponse:
    response.status_code = http_status_for(result)
    return SavedItemsResponse(
        items=list(store.items),
        state=store.state,
        result=result,
        notifications=ctx.notifier.drain(),
    )


@router.get("", response_model=SavedItemsResponse)
async def get_saved_items(response: Response, ctx: RequestContext = Depends(get_request_context)):
    store = await load_saved(ctx)
    return saved_response(response, store, ctx, None)


@router.post("", response_model=SavedItemsResponse)
async def save_for_later(
    payload: SavedItemCreate,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    store = await load_saved(ctx)
    result = await store.save_for_later(payload.product_id, payload.quantity)
    return saved_response(response, store, ctx, result)


@router.post("/{entry_id}/move-to-cart", response_model=SavedItemsResponse)
async def move_to_cart(
    entry_id: str,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Move a saved item into the cart.

    result.status == "needs_reconciliation" means the cart already has the
    item but the saved entry could not be deleted.
    """
    store = await load_saved(ctx)
    result = await store.move_to_cart(entry_id)
    return saved_response(response, store, ctx, result)


@router.delete("/{entry_id}", response_model=SavedItemsResponse)
async def remove_saved_item(
    entry_id: str,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    store = await load_saved(ctx)
    result = await store.remove_saved_item(entry_id)
    return saved_response(response, store, ctx, result)
