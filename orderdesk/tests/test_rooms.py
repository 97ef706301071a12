"""Subscription router membership and endpoint queues."""

import asyncio

import anyio
import pytest

from orderdesk.app.rooms import Endpoint, SubscriptionRouter


def test_join_is_idempotent():
    router = SubscriptionRouter()
    ep = Endpoint(asyncio.Queue())
    router.join(ep, "admins")
    router.join(ep, "admins")
    assert router.members_of("admins") == frozenset({ep})
    assert router.connected() == frozenset({ep})


def test_endpoint_may_be_in_several_rooms():
    router = SubscriptionRouter()
    ep = Endpoint(asyncio.Queue())
    router.join(ep, "admins")
    router.join(ep, "customer:7")
    assert router.rooms_of(ep) == {"admins", "customer:7"}
    router.leave(ep, "admins")
    assert router.members_of("admins") == frozenset()
    assert router.rooms_of(ep) == {"customer:7"}


def test_unknown_room_has_no_members():
    router = SubscriptionRouter()
    assert router.members_of("nobody") == frozenset()
    router.leave(Endpoint(asyncio.Queue()), "nobody")


def test_disconnect_leaves_every_room():
    router = SubscriptionRouter()
    a, b = Endpoint(asyncio.Queue()), Endpoint(asyncio.Queue())
    router.join(a, "admins")
    router.join(a, "kitchen")
    router.join(b, "admins")
    router.disconnect(a)
    assert router.members_of("admins") == frozenset({b})
    assert router.members_of("kitchen") == frozenset()
    assert router.connected() == frozenset({b})


def test_connected_without_rooms():
    router = SubscriptionRouter()
    ep = Endpoint(asyncio.Queue())
    router.connect(ep)
    assert router.connected() == frozenset({ep})
    assert router.rooms_of(ep) == set()


def test_full_queue_drops_events():
    ep = Endpoint(asyncio.Queue(maxsize=1))
    assert ep.deliver({"event": "new_order", "data": {"id": 1}})
    assert not ep.deliver({"event": "new_order", "data": {"id": 2}})
    assert ep.dropped == 1
    assert ep.queue.get_nowait()["data"]["id"] == 1


@pytest.mark.anyio
async def test_delivery_from_another_thread_reaches_the_loop():
    ep = Endpoint(asyncio.Queue())
    event = {"event": "order_update", "data": {"id": 3}}
    await anyio.to_thread.run_sync(ep.deliver, event)
    assert await asyncio.wait_for(ep.queue.get(), timeout=1) == event
