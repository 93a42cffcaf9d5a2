# storefront/client.py
import asyncio
import logging

from supabase import AsyncClient

from storefront.core.config import get_settings
from storefront.core.local_storage import LocalStorage
from storefront.core.notifications import Notifier
from storefront.core.session import AuthSession
from storefront.core.supabase_client import supabase_public
from storefront.services.activity_service import ActivityService
from storefront.services.cart_service import CartStore
from storefront.services.comparison_service import ComparisonStore
from storefront.services.review_service import ReviewService
from storefront.services.saved_service import SavedForLaterStore
from storefront.services.store_analytics_service import StoreAnalyticsService
from storefront.services.subscription_service import SubscriptionStore
from storefront.services.usage_service import UsageStore
from storefront.services.wishlist_service import WishlistStore

logger = logging.getLogger(__name__)


class Storefront:
    """
    Every store of one device, wired to one AuthSession.

    Construct once at application start, `await start()`, and
    `await stop()` on shutdown; stopping cancels realtime channels and
    pending re-fetches.

        storefront = await Storefront.connect()
        await storefront.start()
        await storefront.session.sign_in(email, password)
        await storefront.cart.add_to_cart(product_id)
    """

    def __init__(self, client: AsyncClient, storage: LocalStorage, notifier: Notifier | None = None):
        self.client = client
        self.notifier = notifier or Notifier()
        self.activity = ActivityService(client)
        self.session = AuthSession(client, self.activity)

        self.cart = CartStore(client, self.session, self.notifier)
        self.wishlist = WishlistStore(client, self.session, self.notifier)
        self.saved = SavedForLaterStore(client, self.session, self.notifier, cart=self.cart)
        self.subscription = SubscriptionStore(client, self.session, self.notifier)
        self.usage = UsageStore(client, self.session, self.notifier)
        self.comparison = ComparisonStore(storage)
        self.reviews = ReviewService(client, self.session, self.notifier)
        self.analytics = StoreAnalyticsService(client)

    @classmethod
    async def connect(cls) -> "Storefront":
        settings = get_settings()
        client = await supabase_public()
        return cls(client, LocalStorage(settings.LOCAL_STORAGE_PATH))

    @property
    def remote_stores(self):
        return (self.cart, self.wishlist, self.saved, self.subscription, self.usage)

    async def start(self) -> None:
        await self.session.start()
        await asyncio.gather(*(store.start() for store in self.remote_stores))
        logger.info("storefront started (user=%s)", self.session.user.id if self.session.user else None)

    async def stop(self) -> None:
        await asyncio.gather(*(store.close() for store in self.remote_stores))
        await self.session.stop()
        logger.info("storefront stopped")
