# events.py

"""Publish order lifecycle events to connected real-time endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable

from config import UpdateAudience

from .rooms import Endpoint, SubscriptionRouter
from .schemas import Order

logger = logging.getLogger("realtime")


class OrderEvents:
    """Event names carried in the ``event`` field of every frame."""

    ORDER_CREATED = "new_order"
    ORDER_UPDATED = "order_update"


def customer_room(customer_id: str) -> str:
    """Return the room name for the customer ``customer_id``."""

    return f"customer:{customer_id}"


def envelope(name: str, order: Order) -> Dict[str, Any]:
    return {"event": name, "data": order.model_dump(mode="json")}


class EventBroadcaster:
    """Route order events to rooms held by a :class:`SubscriptionRouter`.

    Delivery is fire-and-forget: each recipient gets the frame on its own
    queue and nothing is retried or replayed. Endpoints that are not
    connected at publish time must reload to catch up.
    """

    def __init__(
        self,
        router: SubscriptionRouter,
        admin_room: str = "admins",
        update_audience: UpdateAudience = UpdateAudience.ALL,
    ) -> None:
        self.router = router
        self.admin_room = admin_room
        self.update_audience = UpdateAudience(update_audience)

    def _send(self, recipients: Iterable[Endpoint], event: Dict[str, Any]) -> int:
        delivered = 0
        for endpoint in recipients:
            if endpoint.deliver(event):
                delivered += 1
        logger.debug(
            "published %s for order %s to %d endpoint(s)",
            event["event"],
            event["data"]["id"],
            delivered,
        )
        return delivered

    def publish_order_created(self, order: Order) -> int:
        """Send ``order`` to the admin room only.

        The submitting customer already holds the order from its HTTP
        response, so it is not echoed back.
        """

        event = envelope(OrderEvents.ORDER_CREATED, order)
        return self._send(self.router.members_of(self.admin_room), event)

    def publish_order_updated(self, order: Order) -> int:
        """Send the updated ``order`` to its audience.

        With ``UpdateAudience.ALL`` every connected endpoint receives it.
        With ``UpdateAudience.OWNER`` only the admin room and the owning
        customer's room do.
        """

        event = envelope(OrderEvents.ORDER_UPDATED, order)
        if self.update_audience is UpdateAudience.ALL:
            recipients = self.router.connected()
        else:
            recipients = set(self.router.members_of(self.admin_room))
            if order.customer_id:
                recipients |= self.router.members_of(customer_room(order.customer_id))
        return self._send(recipients, event)
