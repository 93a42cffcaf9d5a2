# storefront/routers/account.py
from fastapi import APIRouter, Depends, Response

from storefront.core.auth import RequestContext, get_request_context
from storefront.core.errors import http_status_for
from storefront.schemas.result import OperationResponse
from storefront.schemas.subscription import CanAddProductResponse, SubscriptionResponse
from storefront.schemas.usage import UsageResponse
from storefront.services.review_service import ReviewService
from storefront.services.subscription_service import SubscriptionStore
from storefront.services.usage_service import UsageStore

router = APIRouter(tags=["Account"])


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription(ctx: RequestContext = Depends(get_request_context)):
    """
    Plan gating flags. A renewal reminder shows up in `notifications`
    when a paid plan has 1 to 3 days left.
    """
    store = SubscriptionStore(ctx.client, ctx.session, ctx.notifier)
    await store.fetch_status()
    return SubscriptionResponse(status=store.status, notifications=ctx.notifier.drain())


@router.get("/subscription/can-add-product", response_model=CanAddProductResponse)
async def can_add_product(ctx: RequestContext = Depends(get_request_context)):
    store = SubscriptionStore(ctx.client, ctx.session, ctx.notifier)
    return CanAddProductResponse(can_add_product=await store.can_add_product())


@router.get("/usage", response_model=UsageResponse)
async def get_usage(ctx: RequestContext = Depends(get_request_context)):
    """
    Product usage against the plan limit, with a healthy / warning /
    critical level (75% and 90% thresholds).
    """
    store = UsageStore(ctx.client, ctx.session, ctx.notifier)
    await store.fetch_usage_stats()
    stats = store.stats
    return UsageResponse(stats=stats, usage_level=stats.usage_level if stats else None)


@router.post("/reviews/{review_id}/helpful", response_model=OperationResponse)
async def mark_review_helpful(
    review_id: str,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Vote a review as helpful. A repeated vote answers 409 "Already voted".
    """
    service = ReviewService(ctx.client, ctx.session, ctx.notifier)
    result = await service.mark_helpful(review_id)
    response.status_code = http_status_for(result)
    return OperationResponse(result=result, notifications=ctx.notifier.drain())
