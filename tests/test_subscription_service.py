# tests/test_subscription_service.py
import asyncio

from storefront.core.session import AuthSession
from storefront.services.subscription_service import SubscriptionStore

from conftest import OTHER_USER_ID, USER_ID, api_error, make_auth_session


def status_row(**overrides):
    row = {
        "has_active_subscription": True,
        "is_trial": False,
        "is_expired": False,
        "days_remaining": 20,
        "plan_name": "Pro",
        "max_products": 100,
        "has_analytics": True,
    }
    row.update(overrides)
    return [row]


async def test_fetch_maps_status(db, session, notifier):
    db.rpcs["get_user_subscription_status"] = status_row()
    store = SubscriptionStore(db, session, notifier)

    await store.fetch_status()

    assert store.state == "populated"
    assert store.status.has_active_subscription
    assert store.status.plan_name == "Pro"
    assert store.status.max_products == 100
    assert db.rpc_params["get_user_subscription_status"] == [{"user_id_param": USER_ID}]


async def test_no_row_means_defaults(db, session, notifier):
    db.rpcs["get_user_subscription_status"] = []
    store = SubscriptionStore(db, session, notifier)

    result = await store.fetch_status()

    assert result.ok
    assert store.status.has_active_subscription is False
    assert store.status.days_remaining == 0
    assert store.status.max_products is None


async def test_reminder_for_paid_plan_ending_soon(db, session, notifier):
    db.rpcs["get_user_subscription_status"] = status_row(days_remaining=2)
    store = SubscriptionStore(db, session, notifier)

    await store.fetch_status()
    [note] = notifier.drain()
    assert note.title == "Subscription ending soon"
    assert "2 days" in note.description

    # one per fetch, not deduplicated
    await store.fetch_status()
    assert len(notifier.drain()) == 1


async def test_no_reminder_outside_window_or_on_trial(db, session, notifier):
    store = SubscriptionStore(db, session, notifier)
    for row in (
        status_row(days_remaining=10),
        status_row(days_remaining=0),
        status_row(days_remaining=2, is_trial=True),
    ):
        db.rpcs["get_user_subscription_status"] = row
        await store.fetch_status()

    assert notifier.drain() == []


async def test_fetch_error_is_logged_not_notified(db, session, notifier):
    db.fail("get_user_subscription_status", "rpc")
    store = SubscriptionStore(db, session, notifier)

    result = await store.fetch_status()

    assert result.status == "remote_failure"
    assert store.state == "error"
    assert notifier.drain() == []


async def test_can_add_product(db, session, notifier):
    store = SubscriptionStore(db, session, notifier)

    db.rpcs["can_add_product"] = True
    assert await store.can_add_product() is True

    db.rpcs["can_add_product"] = False
    assert await store.can_add_product() is False

    db.rpcs["can_add_product"] = True
    db.fail("can_add_product", "rpc", api_error("boom"))
    assert await store.can_add_product() is False
    assert len(db.rpc_params["can_add_product"]) == 3


async def test_can_add_product_for_guest(db, guest_session, notifier):
    store = SubscriptionStore(db, guest_session, notifier)

    assert await store.can_add_product() is False
    assert db.calls == []


async def test_realtime_change_refetches(db, session, notifier):
    db.rpcs["get_user_subscription_status"] = status_row(plan_name="Basic")
    store = SubscriptionStore(db, session, notifier)
    await store.start()
    assert store.status.plan_name == "Basic"

    [channel] = db.channels
    assert channel.bindings[0]["table"] == "user_subscriptions"
    assert channel.bindings[0]["filter"] == f"user_id=eq.{USER_ID}"

    db.rpcs["get_user_subscription_status"] = status_row(plan_name="Pro")
    assert db.emit("user_subscriptions", {"user_id": USER_ID}) == 1
    await store.refetch()

    assert store.status.plan_name == "Pro"

    await store.close()
    assert db.channels == []


async def test_other_users_rows_do_not_trigger(db, session, notifier):
    db.rpcs["get_user_subscription_status"] = status_row()
    store = SubscriptionStore(db, session, notifier)
    await store.start()

    assert db.emit("user_subscriptions", {"user_id": "someone-else"}) == 0
    await store.close()


async def test_follows_user_changes(db, notifier):
    db.rpcs["get_user_subscription_status"] = lambda params: status_row(plan_name=params["user_id_param"])
    session = AuthSession(db)
    await session.start()
    store = SubscriptionStore(db, session, notifier)
    await store.start()
    assert store.state == "populated"
    assert db.channels == []

    db.auth.emit("SIGNED_IN", make_auth_session(USER_ID))
    for task in list(store._rebinds):
        await task
    await store._trigger.wait_idle()

    assert store.status.plan_name == USER_ID
    assert db.channels[0].bindings[0]["filter"] == f"user_id=eq.{USER_ID}"

    db.auth.emit("SIGNED_OUT", None)
    for task in list(store._rebinds):
        await task

    assert store.status.plan_name is None
    assert db.channels == []
    await store.close()


async def test_back_to_back_sign_ins_leave_one_watch(db, notifier):
    db.rpcs["get_user_subscription_status"] = lambda params: status_row(plan_name=params["user_id_param"])
    session = AuthSession(db)
    await session.start()
    store = SubscriptionStore(db, session, notifier)
    await store.start()

    db.auth.emit("SIGNED_IN", make_auth_session(OTHER_USER_ID))
    db.auth.emit("SIGNED_IN", make_auth_session(USER_ID))
    for task in list(store._rebinds):
        await task
    await store._trigger.wait_idle()

    assert [c.bindings[0]["filter"] for c in db.channels] == [f"user_id=eq.{USER_ID}"]
    assert store.status.plan_name == USER_ID

    await store.close()
    assert db.channels == []


async def test_close_during_rebind_removes_every_channel(db, notifier):
    session = AuthSession(db)
    await session.start()
    store = SubscriptionStore(db, session, notifier)
    await store.start()

    db.auth.emit("SIGNED_IN", make_auth_session(OTHER_USER_ID))
    db.auth.emit("SIGNED_IN", make_auth_session(USER_ID))
    # first rebind is now half-way through subscribing
    await asyncio.sleep(0)
    await store.close()

    assert db.channels == []
    assert store.watch is None


async def test_switching_accounts_drops_previous_status_at_once(db, notifier):
    db.rpcs["get_user_subscription_status"] = lambda params: status_row(plan_name=params["user_id_param"])
    db.auth.session = make_auth_session(USER_ID)
    session = AuthSession(db)
    await session.start()
    store = SubscriptionStore(db, session, notifier)
    await store.start()
    assert store.status.plan_name == USER_ID

    db.auth.emit("SIGNED_IN", make_auth_session(OTHER_USER_ID))

    assert store.status.plan_name is None
    await store.close()
