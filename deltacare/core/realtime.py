# deltacare/core/realtime.py
import asyncio
import logging
import uuid
from typing import Any, AsyncIterator, Awaitable, Callable, Literal

from sqlmodel import SQLModel
from supabase import AsyncClient

from deltacare.core.supabase_client import close_realtime, supabase_realtime

logger = logging.getLogger(__name__)

ChangeType = Literal["*", "INSERT", "UPDATE", "DELETE"]

RealtimeClientFactory = Callable[[str], Awaitable[AsyncClient]]
RealtimeClientCloser = Callable[[AsyncClient], Awaitable[None]]


class ChangeEvent(SQLModel):
    """One row change delivered by a Realtime postgres_changes channel."""

    table: str
    event_type: str
    record: dict[str, Any] = {}
    old_record: dict[str, Any] = {}

    @classmethod
    def from_payload(cls, table: str, payload: dict[str, Any]) -> "ChangeEvent":
        # newer realtime clients nest the change under "data"
        data = payload.get("data", payload)
        return cls(
            table=data.get("table") or table,
            event_type=data.get("type") or data.get("eventType") or "*",
            record=data.get("record") or data.get("new") or {},
            old_record=data.get("old_record") or data.get("old") or {},
        )


class ChangeFeed:
    """
    Async iterator over row changes of one collection.

    Each `observe()` opens its own client and channel and closes both when
    the consumer stops iterating (normal exit, `break`, cancellation or a
    disconnected client).
    """

    def __init__(
        self,
        client_factory: RealtimeClientFactory = supabase_realtime,
        client_closer: RealtimeClientCloser = close_realtime,
        max_queue_size: int = 100,
    ):
        self.client_factory = client_factory
        self.client_closer = client_closer
        self.max_queue_size = max_queue_size

    async def observe(
        self,
        table: str,
        filter: str | None = None,
        event: ChangeType = "*",
        access_token: str | None = None,
    ) -> AsyncIterator[ChangeEvent]:
        """
        Yield ChangeEvents for `table`, optionally narrowed by a PostgREST
        style `filter` (e.g. "user_id=eq.<uuid>").
        """
        client = await self.client_factory(access_token)
        queue: asyncio.Queue[ChangeEvent] = asyncio.Queue(maxsize=self.max_queue_size)

        def on_change(payload: dict[str, Any]) -> None:
            try:
                queue.put_nowait(ChangeEvent.from_payload(table, payload))
            except asyncio.QueueFull:
                logger.warning("Change feed on %s is full; dropping event", table)

        try:
            channel = client.channel(f"{table}:{uuid.uuid4().hex}")
            channel.on_postgres_changes(
                event,
                callback=on_change,
                table=table,
                schema="public",
                filter=filter,
            )
            await channel.subscribe()
            logger.info("Subscribed to %s changes (%s)", table, filter or "all rows")

            try:
                while True:
                    yield await queue.get()
            finally:
                await client.remove_channel(channel)
                logger.info("Unsubscribed from %s changes", table)
        finally:
            await self.client_closer(client)


def get_change_feed() -> ChangeFeed:
    """Dependency returning the change feed; overridden in tests."""
    return ChangeFeed()
