# tests/test_usage_service.py
from storefront.schemas.usage import UsageStats
from storefront.services.usage_service import UsageStore

from conftest import USER_ID


def test_percentage_derived_from_totals():
    stats = UsageStats.model_validate({"total_products": 48, "product_limit": 50})

    assert stats.usage_percentage == 96
    assert stats.usage_level == "critical"


def test_usage_levels():
    assert UsageStats(usage_percentage=74).usage_level == "healthy"
    assert UsageStats(usage_percentage=75).usage_level == "warning"
    assert UsageStats(usage_percentage=89).usage_level == "warning"
    assert UsageStats(usage_percentage=90).usage_level == "critical"


def test_zero_limit_is_unlimited():
    stats = UsageStats.model_validate({"total_products": 500, "product_limit": 0})

    assert stats.unlimited
    assert stats.usage_percentage == 0
    assert stats.usage_level == "healthy"


async def test_fetch_usage_stats(db, session, notifier):
    db.rpcs["get_user_usage_stats"] = [
        {
            "total_products": 48,
            "active_products": 40,
            "total_orders": 12,
            "total_revenue": 321.5,
            "product_limit": 50,
            "usage_percentage": 96,
        }
    ]
    store = UsageStore(db, session, notifier)

    await store.fetch_usage_stats()

    assert store.state == "populated"
    assert store.stats.usage_percentage == 96
    assert store.stats.usage_level == "critical"
    assert db.rpc_params["get_user_usage_stats"] == [{"user_id_param": USER_ID}]


async def test_fetch_error_keeps_last_stats(db, session, notifier):
    db.rpcs["get_user_usage_stats"] = [{"total_products": 1, "product_limit": 10}]
    store = UsageStore(db, session, notifier)
    await store.fetch_usage_stats()

    db.fail("get_user_usage_stats", "rpc")
    result = await store.fetch_usage_stats()

    assert result.status == "remote_failure"
    assert store.stats.total_products == 1
    assert notifier.drain() == []


async def test_any_product_change_refetches(db, session, notifier):
    counter = {"n": 0}

    def usage(params):
        counter["n"] += 1
        return [{"total_products": counter["n"], "product_limit": 10}]

    db.rpcs["get_user_usage_stats"] = usage
    store = UsageStore(db, session, notifier)
    await store.start()
    assert store.stats.total_products == 1

    [channel] = db.channels
    assert channel.bindings[0]["table"] == "products"
    assert channel.bindings[0]["filter"] is None

    # a burst of changes to anyone's products collapses into a single fetch
    for _ in range(5):
        db.emit("products", {"id": "p9", "store_id": "someone-elses-store"})
    await store._trigger.wait_idle()

    assert counter["n"] == 2
    assert store.stats.total_products == 2

    await store.close()
    assert db.channels == []
