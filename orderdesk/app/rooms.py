"""Named rooms of connected real-time endpoints.

The router only tracks membership; it attaches no meaning to room names.
Which room receives which event is decided by
:class:`~orderdesk.app.events.EventBroadcaster`.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, Set

from .middlewares import realtime_guard
from .routes_metrics import ws_events_dropped_total

logger = logging.getLogger("realtime")


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Endpoint:
    """A connected client and the queue its outbound events wait in.

    ``asyncio.Queue`` is not thread-safe, so events published from a thread
    other than the one serving the connection are handed over to its loop.
    """

    def __init__(self, queue: asyncio.Queue | None = None, peer: str | None = None) -> None:
        self.id = uuid.uuid4().hex[:12]
        self.peer = peer
        self.queue: asyncio.Queue = queue if queue is not None else realtime_guard.queue()
        self.dropped = 0
        self._loop = _running_loop()

    def deliver(self, event: Dict[str, Any]) -> bool:
        """Enqueue ``event`` without waiting; drop it when the queue is full."""

        if self._loop is not None and _running_loop() is not self._loop:
            try:
                self._loop.call_soon_threadsafe(self._put, event)
            except RuntimeError:
                logger.info("endpoint %s loop closed; event discarded", self.id)
                return False
            return True
        return self._put(event)

    def _put(self, event: Dict[str, Any]) -> bool:
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            ws_events_dropped_total.inc()
            logger.warning(
                "event dropped for slow endpoint %s (%s)", self.id, event.get("event")
            )
            return False
        return True

    def __repr__(self) -> str:
        return f"Endpoint({self.id!r}, peer={self.peer!r})"


class SubscriptionRouter:
    """Track connected endpoints and the rooms they have joined."""

    def __init__(self) -> None:
        self._rooms: Dict[str, Set[Endpoint]] = {}
        self._connected: Set[Endpoint] = set()

    def connect(self, endpoint: Endpoint) -> None:
        self._connected.add(endpoint)

    def disconnect(self, endpoint: Endpoint) -> None:
        """Forget ``endpoint`` entirely, including every room membership."""

        self.leave_all(endpoint)
        self._connected.discard(endpoint)

    def join(self, endpoint: Endpoint, room: str) -> None:
        """Add ``endpoint`` to ``room``. Joining twice is a no-op."""

        self._connected.add(endpoint)
        self._rooms.setdefault(room, set()).add(endpoint)

    def leave(self, endpoint: Endpoint, room: str) -> None:
        members = self._rooms.get(room)
        if not members:
            return
        members.discard(endpoint)
        if not members:
            del self._rooms[room]

    def leave_all(self, endpoint: Endpoint) -> None:
        for room in [name for name, members in self._rooms.items() if endpoint in members]:
            self.leave(endpoint, room)

    def members_of(self, room: str) -> frozenset[Endpoint]:
        return frozenset(self._rooms.get(room, ()))

    def rooms_of(self, endpoint: Endpoint) -> set[str]:
        return {name for name, members in self._rooms.items() if endpoint in members}

    def connected(self) -> frozenset[Endpoint]:
        return frozenset(self._connected)
