# tests/conftest.py
"""
In-memory stand-in for supabase.AsyncClient.

Covers the subset the repositories use: table().select/insert/update/
delete with eq/order/limit, rpc(), realtime channels and the auth calls of
AuthSession. Every execute() yields to the event loop once, so overlapping
operations interleave the way real network calls do.
"""
import asyncio
import itertools
import uuid
from types import SimpleNamespace
from typing import Any, Callable

import pytest
from postgrest.exceptions import APIError

from storefront.core.notifications import Notifier
from storefront.core.session import AuthSession
from storefront.schemas.user import AuthUser

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def api_error(message: str = "boom", code: str = "XX000") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: list[tuple[str, Any]] = []
        self.order_by: tuple[str, bool] | None = None
        self.max_rows: int | None = None

    # builders

    def select(self, columns: str = "*"):
        self.op, self.columns = "select", columns
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append((column, value))
        return self

    def order(self, column: str, *, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, size: int):
        self.max_rows = size
        return self

    # execution

    def _matches(self, row: dict) -> bool:
        return all(row.get(col) == value for col, value in self.filters)

    def _expand(self, row: dict) -> dict:
        row = dict(row)
        if "products(" in self.columns:
            product = self.db.find("products", row.get("product_id"))
            if product is not None and "stores(" in self.columns:
                product = dict(product)
                product["stores"] = self.db.find("stores", product.get("store_id"))
            row["products"] = product
        return row

    async def execute(self):
        await asyncio.sleep(0)
        self.db.calls.append((self.table, self.op))
        self.db.raise_if_failing(self.table, self.op)

        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "select":
            data = [self._expand(r) for r in rows if self._matches(r)]
            if self.order_by:
                col, desc = self.order_by
                data.sort(key=lambda r: r.get(col) or "", reverse=desc)
            if self.max_rows is not None:
                data = data[: self.max_rows]
        elif self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            data = [self.db.insert_row(self.table, dict(p)) for p in payload]
        elif self.op == "update":
            data = []
            for r in rows:
                if self._matches(r):
                    r.update(self.payload)
                    data.append(dict(r))
        else:
            data = [dict(r) for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
        return SimpleNamespace(data=data, count=None)


class FakeRPC:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db = db
        self.name = name
        self.params = params

    async def execute(self):
        await asyncio.sleep(0)
        self.db.calls.append((self.name, "rpc"))
        self.db.rpc_params.setdefault(self.name, []).append(self.params)
        self.db.raise_if_failing(self.name, "rpc")
        handler = self.db.rpcs.get(self.name)
        data = handler(self.params) if callable(handler) else handler
        return SimpleNamespace(data=data, count=None)


class FakeChannel:
    def __init__(self, db: "FakeSupabase", name: str):
        self.db = db
        self.name = name
        self.bindings: list[dict] = []
        self.subscribed = False

    def on_postgres_changes(self, event, callback, table="*", schema="public", filter=None):
        self.bindings.append(
            {"event": event, "callback": callback, "table": table, "schema": schema, "filter": filter}
        )
        return self

    async def subscribe(self, callback=None):
        await asyncio.sleep(0)
        self.subscribed = True
        return self


class FakeAuth:
    def __init__(self):
        self.session = None
        self.listeners: list[Callable] = []
        self.signed_up: list[dict] = []
        self.error: Exception | None = None

    async def get_session(self):
        return self.session

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return SimpleNamespace(unsubscribe=lambda: self.listeners.remove(callback))

    def emit(self, event: str, session):
        self.session = session
        for callback in list(self.listeners):
            callback(event, session)

    async def sign_in_with_password(self, credentials):
        if self.error:
            raise self.error
        self.emit("SIGNED_IN", make_auth_session(USER_ID, credentials["email"]))

    async def sign_up(self, credentials):
        if self.error:
            raise self.error
        self.signed_up.append(credentials)
        return SimpleNamespace(user=SimpleNamespace(id=USER_ID, email=credentials["email"]), session=None)

    async def sign_out(self):
        self.emit("SIGNED_OUT", None)


def make_auth_session(user_id: str, email: str | None = None):
    return SimpleNamespace(
        user=SimpleNamespace(id=user_id, email=email),
        access_token=f"token-{user_id}",
    )


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.rpcs: dict[str, Any] = {}
        self.rpc_params: dict[str, list[dict]] = {}
        self.unique: dict[str, tuple[str, ...]] = {
            "wishlist_items": ("user_id", "product_id"),
            "review_helpful_votes": ("review_id", "user_id"),
        }
        self.failures: list[list] = []
        self.calls: list[tuple[str, str]] = []
        self.channels: list[FakeChannel] = []
        self.auth = FakeAuth()
        self._clock = itertools.count(1)

    # client API

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict | None = None) -> FakeRPC:
        return FakeRPC(self, name, params or {})

    def channel(self, name: str) -> FakeChannel:
        channel = FakeChannel(self, name)
        self.channels.append(channel)
        return channel

    async def remove_channel(self, channel: FakeChannel) -> None:
        await asyncio.sleep(0)
        self.channels.remove(channel)

    async def remove_all_channels(self) -> None:
        self.channels.clear()

    # helpers for tests

    def fail(self, target: str, op: str, error: Exception | None = None, times: int = 1) -> None:
        """Make the next `times` calls of (table|rpc, op) raise."""
        self.failures.append([target, op, error or api_error(), times])

    def raise_if_failing(self, target: str, op: str) -> None:
        for failure in self.failures:
            if failure[0] == target and failure[1] == op and failure[3] > 0:
                failure[3] -= 1
                raise failure[2]

    def insert_row(self, table: str, row: dict) -> dict:
        keys = self.unique.get(table)
        rows = self.tables.setdefault(table, [])
        if keys and any(all(r.get(k) == row.get(k) for k in keys) for r in rows):
            raise api_error("duplicate key value violates unique constraint", "23505")
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", f"2024-01-01T00:00:00.{next(self._clock):06d}+00:00")
        rows.append(row)
        return dict(row)

    def find(self, table: str, row_id: Any) -> dict | None:
        return next((dict(r) for r in self.tables.get(table, []) if r.get("id") == row_id), None)

    def rows(self, table: str, **filters) -> list[dict]:
        return [
            r for r in self.tables.get(table, [])
            if all(r.get(k) == v for k, v in filters.items())
        ]

    def emit(self, table: str, row: dict | None = None, event: str = "UPDATE") -> int:
        """Deliver a change event to matching channels; returns callbacks fired."""
        fired = 0
        for channel in list(self.channels):
            for binding in channel.bindings:
                if binding["table"] not in ("*", table):
                    continue
                if binding["filter"]:
                    column, _, value = binding["filter"].partition("=eq.")
                    if row is None or str(row.get(column)) != value:
                        continue
                binding["callback"]({"eventType": event, "table": table, "new": row or {}})
                fired += 1
        return fired


@pytest.fixture
def db() -> FakeSupabase:
    fake = FakeSupabase()
    fake.tables["stores"] = [{"id": "store-1", "name": "Corner Shop"}]
    fake.tables["products"] = [
        {"id": "p1", "name": "Mug", "price": 12.5, "is_active": True, "store_id": "store-1"},
        {"id": "p2", "name": "Tea", "price": 4.0, "is_active": True, "store_id": "store-1"},
        {"id": "p3", "name": "Kettle", "price": 30.0, "is_active": True, "store_id": "store-1"},
    ]
    return fake


@pytest.fixture
def user() -> AuthUser:
    return AuthUser(id=USER_ID, email="buyer@example.com")


@pytest.fixture
def session(db, user) -> AuthSession:
    return AuthSession.for_user(db, user)


@pytest.fixture
def guest_session(db) -> AuthSession:
    return AuthSession(db)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()
