# storefront/core/realtime.py
"""
Realtime invalidation.

A watched table pushes "something changed" events; the payload is ignored
and the owning store re-fetches its whole aggregate. Bursts of events are
collapsed: while a fetch is in flight, any number of invalidations result
in a single trailing re-fetch.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from supabase import AsyncClient

logger = logging.getLogger(__name__)


class RefetchTrigger:
    """
    Owns at most one running fetch task for a store.

    invalidate():
      - idle      => start a fetch
      - in flight => mark dirty; one more fetch runs after the current one
    """

    def __init__(self, fetch: Callable[[], Awaitable[Any]]):
        self._fetch = fetch
        self._task: asyncio.Task | None = None
        self._dirty = False
        self._closed = False

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def invalidate(self) -> None:
        if self._closed:
            return
        if self.in_flight:
            self._dirty = True
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            self._dirty = False
            try:
                await self._fetch()
            except Exception:
                # remote errors are handled inside the stores
                logger.exception("re-fetch failed")
            if not self._dirty or self._closed:
                break

    async def wait_idle(self) -> None:
        """Wait until no fetch is running (including trailing ones)."""
        while self.in_flight:
            await asyncio.shield(self._task)

    async def close(self) -> None:
        self._closed = True
        if self.in_flight:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None


class TableWatch:
    """
    Subscription handle for postgres changes on one table.

    Lifetime is owned by a store: start() on mount / user change,
    stop() on close.
    """

    def __init__(
        self,
        client: AsyncClient,
        channel_name: str,
        table: str,
        on_change: Callable[[], None],
        row_filter: str | None = None,
        schema: str = "public",
    ):
        self.client = client
        self.channel_name = channel_name
        self.table = table
        self.row_filter = row_filter
        self.schema = schema
        self._on_change = on_change
        self._channel = None

    @property
    def active(self) -> bool:
        return self._channel is not None

    def _handle(self, payload: Any) -> None:
        logger.debug("change on %s (%s)", self.table, self.channel_name)
        self._on_change()

    async def start(self) -> None:
        if self._channel is not None:
            await self.stop()
        channel = self.client.channel(self.channel_name)
        channel.on_postgres_changes(
            "*",
            callback=self._handle,
            table=self.table,
            schema=self.schema,
            filter=self.row_filter,
        )
        await channel.subscribe()
        self._channel = channel

    async def stop(self) -> None:
        if self._channel is None:
            return
        channel, self._channel = self._channel, None
        await self.client.remove_channel(channel)
