# storefront/routers/cart.py
from fastapi import APIRouter, Depends, Response

from storefront.core.auth import RequestContext, get_request_context
from storefront.core.errors import http_status_for
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartResponse,
    ReorderRequest,
)
from storefront.schemas.result import OperationResult
from storefront.services.cart_service import CartStore

router = APIRouter(prefix="/cart", tags=["Cart"])


async def load_cart(ctx: RequestContext) -> CartStore:
    """Cart store for the caller, with its rows loaded."""
    store = CartStore(ctx.client, ctx.session, ctx.notifier)
    await store.fetch_cart()
    return store


def cart_response(
    response: Response, store: CartStore, ctx: RequestContext, result: OperationResult | None
) -> CartResponse:
    response.status_code = http_status_for(result)
    return CartResponse(
        cart=store.summary(),
        result=result,
        notifications=ctx.notifier.drain(),
    )


@router.get("", response_model=CartResponse)
async def get_my_cart(response: Response, ctx: RequestContext = Depends(get_request_context)):
    """
    Current user's cart: lines, item count (sum of quantities), total.
    """
    store = CartStore(ctx.client, ctx.session, ctx.notifier)
    result = await store.fetch_cart()
    return cart_response(response, store, ctx, result)


@router.post("", response_model=CartResponse)
async def add_to_cart(
    payload: CartItemCreate,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Add a product. A product already in the cart gets its quantity increased.
    """
    store = await load_cart(ctx)
    result = await store.add_to_cart(payload.product_id, payload.quantity)
    return cart_response(response, store, ctx, result)


@router.patch("/{line_id}", response_model=CartResponse)
async def update_cart_line(
    line_id: str,
    payload: CartItemUpdate,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Set a line's quantity. Zero or negative removes the line.
    """
    store = await load_cart(ctx)
    result = await store.update_quantity(line_id, payload.quantity)
    return cart_response(response, store, ctx, result)


@router.delete("/{line_id}", response_model=CartResponse)
async def remove_cart_line(
    line_id: str,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    store = await load_cart(ctx)
    result = await store.remove_from_cart(line_id)
    return cart_response(response, store, ctx, result)


@router.delete("", response_model=CartResponse)
async def clear_cart(response: Response, ctx: RequestContext = Depends(get_request_context)):
    """
    Clear the entire cart.
    """
    store = CartStore(ctx.client, ctx.session, ctx.notifier)
    result = await store.clear_cart()
    return cart_response(response, store, ctx, result)


@router.post("/reorder", response_model=CartResponse)
async def reorder(
    payload: ReorderRequest,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Put the still-available lines of a past order back into the cart.
    """
    store = await load_cart(ctx)
    result = await store.reorder(payload.items)
    return cart_response(response, store, ctx, result)
