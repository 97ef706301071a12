"""Client-side view models for the kitchen dashboard and the customer screen.

Both views work on the JSON records the API and WebSocket deliver. The
admin view keeps an eventually consistent copy of every order: a full
reload is the baseline, incremental events are applied on top, and the
summary figures are recomputed from the whole cache after each change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from .domain import OrderStatus
from .events import OrderEvents

logger = logging.getLogger("client")

OrderDict = Dict[str, Any]


@dataclass(frozen=True)
class OrderStats:
    """Dashboard tiles derived from the cached orders."""

    pending: int = 0
    preparing: int = 0
    revenue: float = 0.0


def compute_stats(orders: Iterable[OrderDict]) -> OrderStats:
    pending = preparing = 0
    revenue = 0.0
    for order in orders:
        if order.get("status") == OrderStatus.PENDING.value:
            pending += 1
        elif order.get("status") == OrderStatus.PREPARING.value:
            preparing += 1
        revenue += float(order.get("total") or 0)
    return OrderStats(pending=pending, preparing=preparing, revenue=round(revenue, 2))


def _created_at(order: OrderDict) -> datetime:
    value = order.get("created_at")
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class AdminOrdersView:
    """Cached copy of all orders as seen by a kitchen/admin screen."""

    def __init__(self) -> None:
        self.orders: List[OrderDict] = []
        self.stats = OrderStats()
        # order id -> record as it was before an unconfirmed local change
        self._unconfirmed: Dict[int, OrderDict] = {}

    def _index(self, order_id: int) -> Optional[int]:
        for idx, order in enumerate(self.orders):
            if order["id"] == order_id:
                return idx
        return None

    def _refresh(self) -> None:
        self.stats = compute_stats(self.orders)

    def reload(self, orders: Iterable[OrderDict]) -> None:
        """Replace the cache with a full snapshot from ``GET /api/orders/all``."""

        self.orders = [dict(order) for order in orders]
        self._unconfirmed.clear()
        self._refresh()

    def apply_created(self, order: OrderDict) -> bool:
        """Append ``order`` unless the cache already holds its id."""

        if self._index(order["id"]) is not None:
            return False
        self.orders.append(dict(order))
        self._refresh()
        return True

    def apply_updated(self, order: OrderDict) -> bool:
        """Replace the cached record with the same id; unknown ids are ignored."""

        idx = self._index(order["id"])
        if idx is None:
            return False
        self.orders[idx] = dict(order)
        self._unconfirmed.pop(order["id"], None)
        self._refresh()
        return True

    def handle(self, message: Dict[str, Any]) -> bool:
        """Apply a WebSocket frame; frames that are not order events are ignored."""

        name = message.get("event")
        if name == OrderEvents.ORDER_CREATED:
            return self.apply_created(message["data"])
        if name == OrderEvents.ORDER_UPDATED:
            return self.apply_updated(message["data"])
        return False

    def sorted_orders(self) -> List[OrderDict]:
        """Return cached orders newest first."""

        return sorted(self.orders, key=_created_at, reverse=True)

    # Optimistic status changes

    def begin_status_change(self, order_id: int, status: OrderStatus | str) -> None:
        idx = self._index(order_id)
        if idx is None:
            raise KeyError(order_id)
        current = self.orders[idx]
        self._unconfirmed.setdefault(order_id, current)
        self.orders[idx] = {**current, "status": OrderStatus(status).value}
        self._refresh()

    def confirm(self, order_id: int) -> None:
        self._unconfirmed.pop(order_id, None)

    def rollback(self, order_id: int) -> bool:
        """Restore the record saved by :meth:`begin_status_change`."""

        previous = self._unconfirmed.pop(order_id, None)
        idx = self._index(order_id)
        if previous is None or idx is None:
            return False
        self.orders[idx] = previous
        self._refresh()
        return True

    def pending_changes(self) -> List[int]:
        return list(self._unconfirmed)

    def change_status(
        self,
        order_id: int,
        status: OrderStatus | str,
        send: Callable[[int, str], bool],
    ) -> bool:
        """Apply a status change locally, then confirm or roll back.

        ``send`` performs the server request and returns whether it was
        accepted. A rejected or failed request restores the previous record;
        exceptions from ``send`` are re-raised after the rollback.
        """

        value = OrderStatus(status).value
        self.begin_status_change(order_id, value)
        try:
            accepted = send(order_id, value)
        except Exception:
            self.rollback(order_id)
            raise
        if accepted:
            self.confirm(order_id)
        else:
            logger.info("status change for order %s rejected; rolled back", order_id)
            self.rollback(order_id)
        return accepted


class CustomerView:
    """Cart and status notifications for one customer screen."""

    def __init__(self, customer_id: Optional[str] = None) -> None:
        self.customer_id = customer_id
        self.cart: List[OrderDict] = []
        self.placed: List[int] = []
        self.notifications: List[OrderDict] = []

    def add_item(self, item: Dict[str, Any]) -> None:
        """Add one unit of the menu ``item`` to the cart."""

        for line in self.cart:
            if line["menu_item_id"] == item["id"]:
                line["quantity"] += 1
                return
        self.cart.append(
            {
                "menu_item_id": item["id"],
                "name": item["name"],
                "price": item["price"],
                "quantity": 1,
            }
        )

    def update_quantity(self, menu_item_id: int, change: int) -> None:
        """Change a line's quantity by ``change``; lines reaching zero are removed."""

        for idx, line in enumerate(self.cart):
            if line["menu_item_id"] == menu_item_id:
                line["quantity"] += change
                if line["quantity"] <= 0:
                    del self.cart[idx]
                return

    @property
    def count(self) -> int:
        return sum(line["quantity"] for line in self.cart)

    @property
    def total(self) -> float:
        return round(sum(line["price"] * line["quantity"] for line in self.cart), 2)

    def to_order_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "items": [dict(line) for line in self.cart],
            "total": self.total,
        }
        if self.customer_id:
            payload["customer_id"] = self.customer_id
        return payload

    def order_placed(self, order_id: int) -> None:
        """Remember a submitted order and empty the cart."""

        self.placed.append(order_id)
        self.cart = []

    def handle(self, message: Dict[str, Any]) -> bool:
        """Record a notification for status changes of this customer's orders."""

        if message.get("event") != OrderEvents.ORDER_UPDATED:
            return False
        order = message["data"]
        if order["id"] not in self.placed:
            return False
        self.notifications.append({"order_id": order["id"], "status": order["status"]})
        return True
