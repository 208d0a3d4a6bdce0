import asyncio

import pytest

from deltacare.core.realtime import ChangeEvent, ChangeFeed


class FakeChannel:
    def __init__(self, name):
        self.name = name
        self.subscription = None
        self.callback = None

    def on_postgres_changes(self, event, callback, table="*", schema="public", filter=None):
        self.subscription = (event, table, schema, filter)
        self.callback = callback
        return self

    async def subscribe(self, callback=None):
        return self


class FakeRealtimeClient:
    def __init__(self):
        self.channels = []
        self.removed = []
        self.closed = False

    def channel(self, name):
        ch = FakeChannel(name)
        self.channels.append(ch)
        return ch

    async def remove_channel(self, channel):
        self.removed.append(channel)


async def close_client(client):
    client.closed = True


def test_change_event_from_nested_payload():
    payload = {
        "data": {
            "type": "UPDATE",
            "table": "wholesale_profiles",
            "record": {"id": "1", "is_verified": True},
            "old_record": {"id": "1"},
        },
        "ids": [1],
    }

    event = ChangeEvent.from_payload("wholesale_profiles", payload)

    assert event.event_type == "UPDATE"
    assert event.record["is_verified"] is True
    assert event.old_record == {"id": "1"}


def test_change_event_from_flat_payload():
    event = ChangeEvent.from_payload("orders", {"eventType": "INSERT", "new": {"id": "9"}})
    assert (event.table, event.event_type, event.record) == ("orders", "INSERT", {"id": "9"})


async def test_observe_yields_changes_and_unsubscribes():
    client = FakeRealtimeClient()
    tokens = []

    async def factory(token):
        tokens.append(token)
        return client

    feed = ChangeFeed(client_factory=factory, client_closer=close_client)
    changes = feed.observe("wholesale_profiles", filter="user_id=eq.u1", event="UPDATE", access_token="tok")

    async def consume():
        received = []
        async for change in changes:
            received.append(change)
            if len(received) == 2:
                break
        return received

    task = asyncio.create_task(consume())
    while not client.channels or client.channels[0].callback is None:
        await asyncio.sleep(0)
    channel = client.channels[0]
    channel.callback({"data": {"type": "UPDATE", "record": {"n": 1}}})
    channel.callback({"data": {"type": "UPDATE", "record": {"n": 2}}})

    received = await asyncio.wait_for(task, timeout=1)
    await changes.aclose()

    assert [c.record["n"] for c in received] == [1, 2]
    assert channel.subscription == ("UPDATE", "wholesale_profiles", "public", "user_id=eq.u1")
    assert tokens == ["tok"]
    assert client.removed == [channel]
    assert client.closed is True


async def test_full_queue_drops_events():
    client = FakeRealtimeClient()

    async def factory(token):
        return client

    feed = ChangeFeed(client_factory=factory, client_closer=close_client, max_queue_size=1)
    changes = feed.observe("orders")
    first = asyncio.create_task(changes.__anext__())
    while not client.channels or client.channels[0].callback is None:
        await asyncio.sleep(0)

    channel = client.channels[0]
    channel.callback({"data": {"type": "INSERT", "record": {"n": 1}}})
    channel.callback({"data": {"type": "INSERT", "record": {"n": 2}}})

    event = await asyncio.wait_for(first, timeout=1)
    await changes.aclose()

    assert event.record == {"n": 1}
    assert client.removed == [channel]


async def test_client_closed_when_subscribe_fails():
    client = FakeRealtimeClient()

    async def refuse(callback=None):
        raise ConnectionError("realtime unavailable")

    def channel(name):
        ch = FakeChannel(name)
        ch.subscribe = refuse
        client.channels.append(ch)
        return ch

    client.channel = channel

    async def factory(token):
        return client

    feed = ChangeFeed(client_factory=factory, client_closer=close_client)

    with pytest.raises(ConnectionError):
        await feed.observe("orders").__anext__()

    assert client.closed is True
    assert client.removed == []
