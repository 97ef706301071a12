"""Utilities to guard real-time WebSocket connections.

This module centralises per-IP connection limits, heartbeat interval,
and queue bounds for the order event stream. Tunables come from
:func:`config.get_settings`:
- ``max_conn_per_ip`` (default ``20``)
- ``heartbeat_secs`` (default ``30``)
- ``queue_max`` (default ``100``)
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any

from fastapi import HTTPException
from starlette.websockets import WebSocket

from config import get_settings

logger = logging.getLogger("realtime")


class ConnectionLimiter:
    """Per-IP WebSocket connection counts for one application."""

    def __init__(self, limit: int | None = None) -> None:
        self.limit = limit if limit is not None else get_settings().max_conn_per_ip
        self.connections: dict[str, int] = defaultdict(int)

    def register(self, ip: str) -> None:
        """Increment connection count for ``ip`` or raise ``HTTPException``."""
        if self.connections[ip] >= self.limit:
            raise HTTPException(status_code=429, detail="RETRY")
        self.connections[ip] += 1

    def unregister(self, ip: str) -> None:
        """Decrement connection count for ``ip``."""
        if self.connections.get(ip, 0) > 1:
            self.connections[ip] -= 1
        else:
            self.connections.pop(ip, None)

    def count(self, ip: str) -> int:
        return self.connections.get(ip, 0)


def queue(maxsize: int | None = None) -> asyncio.Queue[Any]:
    """Return an ``asyncio.Queue`` bounded by ``queue_max`` by default."""
    return asyncio.Queue(maxsize=maxsize or get_settings().queue_max)


def heartbeat_task(websocket: WebSocket, interval: int | None = None) -> asyncio.Task:
    """Return a task sending periodic pings to ``websocket``.

    The task stops when the connection drops. Consumers cancel it on
    cleanup and await it so its outcome is collected.
    """

    period = interval or get_settings().heartbeat_secs

    async def _hb() -> None:  # pragma: no cover - network timing
        try:
            while True:
                await asyncio.sleep(period)
                await websocket.send_json({"type": "ping"})
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.debug("heartbeat stopped: %s", exc)

    return asyncio.create_task(_hb())
