"""Order status enumeration and allowed transitions."""

from __future__ import annotations

from enum import Enum

from ..errors import InvalidTransition


class OrderStatus(str, Enum):
    """Enumerate the lifecycle states for an order."""

    PENDING = "pending"
    PREPARING = "preparing"
    COMPLETED = "completed"


# Forward-only, one step at a time; COMPLETED is terminal.
TRANSITIONS: dict[OrderStatus, list[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.PREPARING],
    OrderStatus.PREPARING: [OrderStatus.COMPLETED],
    OrderStatus.COMPLETED: [],
}


def can_transition(src: OrderStatus, dst: OrderStatus) -> bool:
    """Return ``True`` if an order can move from ``src`` to ``dst``."""

    return dst in TRANSITIONS.get(src, [])


def advance(current: OrderStatus, requested: OrderStatus) -> OrderStatus:
    """Return ``requested`` if moving there from ``current`` is legal.

    Raises :class:`InvalidTransition` for every other pair, including a
    request for the status the order already has.
    """

    if not can_transition(current, requested):
        raise InvalidTransition(
            f"Cannot move order from {current.value} to {requested.value}",
            details={"from": current.value, "to": requested.value},
        )
    return requested
