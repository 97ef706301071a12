"""Domain models and helpers."""

from .order_status import OrderStatus, TRANSITIONS, advance, can_transition

__all__ = ["OrderStatus", "TRANSITIONS", "advance", "can_transition"]
