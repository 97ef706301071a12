"""Connection limits and task cleanup for the /ws endpoint."""

import asyncio

import pytest
from fastapi import HTTPException

from orderdesk.app.middlewares.realtime_guard import ConnectionLimiter
from orderdesk.app.routes_realtime import _stop_tasks


def test_limiter_counts_per_ip():
    limiter = ConnectionLimiter(limit=2)
    limiter.register("1.1.1.1")
    limiter.register("1.1.1.1")
    limiter.register("2.2.2.2")
    with pytest.raises(HTTPException) as exc:
        limiter.register("1.1.1.1")
    assert exc.value.status_code == 429
    assert limiter.count("1.1.1.1") == 2

    limiter.unregister("1.1.1.1")
    limiter.register("1.1.1.1")
    limiter.unregister("1.1.1.1")
    limiter.unregister("1.1.1.1")
    limiter.unregister("1.1.1.1")
    assert limiter.count("1.1.1.1") == 0
    assert "1.1.1.1" not in limiter.connections


def test_limiters_do_not_share_counts():
    first, second = ConnectionLimiter(limit=1), ConnectionLimiter(limit=1)
    first.register("1.1.1.1")
    second.register("1.1.1.1")
    assert first.count("1.1.1.1") == second.count("1.1.1.1") == 1


@pytest.mark.anyio
async def test_stop_tasks_collects_failures_and_cancellations():
    async def failing():
        raise RuntimeError("socket gone")

    async def forever():
        await asyncio.sleep(3600)

    failed = asyncio.create_task(failing())
    sleeping = asyncio.create_task(forever())
    await asyncio.sleep(0)

    outcomes = await _stop_tasks(failed, sleeping)

    assert isinstance(outcomes[0], RuntimeError)
    assert isinstance(outcomes[1], asyncio.CancelledError)
    assert failed.done() and sleeping.cancelled()
