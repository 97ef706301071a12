# store.py

"""In-memory order store; the single source of truth for order state.

Orders live only in process memory and are lost on restart. Every
successful mutation is published through the attached
:class:`~orderdesk.app.events.EventBroadcaster` before the method returns.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import ValidationError as SchemaError

from .domain import OrderStatus, advance
from .errors import NotFound, ValidationError
from .events import EventBroadcaster
from .schemas import Order, OrderLine

logger = logging.getLogger("api")

LineLike = Union[OrderLine, Dict[str, Any]]


def _snapshot(items: Iterable[LineLike]) -> Tuple[OrderLine, ...]:
    """Freeze ``items`` so later edits by the caller never reach the store."""

    return tuple(
        line if isinstance(line, OrderLine) else OrderLine.model_validate(line)
        for line in items
    )


class OrderStore:
    """Hold orders keyed by id, in insertion order."""

    def __init__(self, broadcaster: Optional[EventBroadcaster] = None) -> None:
        self.broadcaster = broadcaster
        self._orders: Dict[int, Order] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._orders)

    def __iter__(self) -> Iterator[Order]:
        return iter(list(self._orders.values()))

    def create_order(
        self,
        items: Iterable[LineLike],
        total: float,
        customer_id: Optional[str] = None,
    ) -> Order:
        """Validate and store a new ``pending`` order, then announce it."""

        try:
            lines = _snapshot(items)
        except SchemaError as exc:
            raise ValidationError(
                "Malformed order line",
                details=exc.errors(include_url=False, include_context=False),
            ) from exc
        if not lines:
            raise ValidationError("Order must contain at least one item")
        expected = round(sum(line.subtotal for line in lines), 2)
        if round(float(total), 2) != expected:
            raise ValidationError(
                "Order total does not match its items",
                details={"total": total, "expected": expected},
            )

        # id assignment and insert must not interleave between threads
        with self._lock:
            order = Order(
                id=self._next_id,
                items=lines,
                total=expected,
                status=OrderStatus.PENDING,
                created_at=datetime.now(timezone.utc),
                customer_id=customer_id,
            )
            self._orders[order.id] = order
            self._next_id += 1

        logger.info("order created", extra={"order_id": order.id})
        if self.broadcaster is not None:
            self.broadcaster.publish_order_created(order)
        return order

    def get_all_orders(self) -> List[Order]:
        return list(self._orders.values())

    def get_order(self, order_id: int) -> Order:
        try:
            return self._orders[order_id]
        except KeyError:
            raise NotFound(f"Order {order_id} not found") from None

    def update_status(self, order_id: int, status: OrderStatus | str) -> Order:
        """Move an order to ``status`` if the state machine allows it."""

        try:
            requested = OrderStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown order status {status!r}") from None

        with self._lock:
            current = self.get_order(order_id)
            updated = current.model_copy(
                update={"status": advance(current.status, requested)}
            )
            self._orders[order_id] = updated

        logger.info(
            "order %s: %s -> %s",
            order_id,
            current.status.value,
            updated.status.value,
            extra={"order_id": order_id},
        )
        if self.broadcaster is not None:
            self.broadcaster.publish_order_updated(updated)
        return updated
