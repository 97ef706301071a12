"""WebSocket endpoint carrying order events to kitchen and customer screens.

Clients send JSON frames ``{"event": "join", "room": "admins"}`` or
``{"event": "leave", "room": ...}``; the server acknowledges with
``joined``/``left`` and afterwards pushes ``new_order`` and
``order_update`` frames. Room membership lasts for the connection only.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, WebSocket, status

from .middlewares import realtime_guard
from .rooms import Endpoint, SubscriptionRouter
from .routes_metrics import ws_clients_gauge, ws_messages_total

logger = logging.getLogger("realtime")

router = APIRouter()


def _handle_frame(
    rooms: SubscriptionRouter, endpoint: Endpoint, raw: Optional[str]
) -> None:
    """Apply a client control frame; anything unrecognised is ignored."""

    if raw is None:
        logger.debug("ignoring binary frame from %s", endpoint.id)
        return
    try:
        frame = json.loads(raw)
    except ValueError:
        logger.debug("ignoring non-JSON frame from %s", endpoint.id)
        return
    if not isinstance(frame, dict):
        return
    room = frame.get("room")
    if not isinstance(room, str) or not room:
        logger.debug("ignoring frame without room from %s", endpoint.id)
        return

    action = frame.get("event")
    if action == "join":
        rooms.join(endpoint, room)
        endpoint.deliver({"event": "joined", "room": room})
        logger.info("endpoint %s joined %s", endpoint.id, room)
    elif action == "leave":
        rooms.leave(endpoint, room)
        endpoint.deliver({"event": "left", "room": room})
        logger.info("endpoint %s left %s", endpoint.id, room)


async def _stop_tasks(*tasks: asyncio.Task) -> List[object]:
    """Cancel ``tasks`` and collect their outcomes, errors included."""

    for task in tasks:
        task.cancel()
    return await asyncio.gather(*tasks, return_exceptions=True)


@router.websocket("/ws")
async def order_events_ws(websocket: WebSocket) -> None:
    """Stream order events to the rooms this connection joins."""

    settings = websocket.app.state.settings
    limiter: realtime_guard.ConnectionLimiter = websocket.app.state.ws_limiter
    ip = websocket.client.host if websocket.client else "?"
    try:
        limiter.register(ip)
    except HTTPException:
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return

    rooms: SubscriptionRouter = websocket.app.state.router
    endpoint = Endpoint(realtime_guard.queue(settings.queue_max), peer=ip)
    # Connected before the client sees the accept
    rooms.connect(endpoint)
    try:
        await websocket.accept()
    except Exception:
        rooms.disconnect(endpoint)
        limiter.unregister(ip)
        raise
    ws_clients_gauge.inc()
    logger.info("endpoint %s connected from %s", endpoint.id, ip)

    async def writer() -> None:
        while True:
            event = await endpoint.queue.get()
            await websocket.send_json(event)
            ws_messages_total.inc()

    writer_task = asyncio.create_task(writer())
    hb_task = realtime_guard.heartbeat_task(websocket, settings.heartbeat_secs)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            _handle_frame(rooms, endpoint, message.get("text"))
    finally:
        # leave_all on close
        rooms.disconnect(endpoint)
        ws_clients_gauge.dec()
        limiter.unregister(ip)
        logger.info("endpoint %s disconnected", endpoint.id)
        for outcome in await _stop_tasks(writer_task, hb_task):
            if isinstance(outcome, Exception):
                logger.debug("endpoint %s task ended: %r", endpoint.id, outcome)
