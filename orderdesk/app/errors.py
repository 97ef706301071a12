"""Domain errors raised by the order store and the status state machine.

Each error carries the HTTP status and machine-readable code used when it
is rendered by the API exception handler.
"""

from __future__ import annotations

from typing import Any, Dict


class OrderDeskError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400
    code = "ERROR"

    def __init__(self, message: str, details: Dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(OrderDeskError):
    """Malformed order submission or unknown status value."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFound(OrderDeskError):
    """Unknown order identifier."""

    status_code = 404
    code = "NOT_FOUND"


class InvalidTransition(OrderDeskError):
    """Illegal status change requested for an order."""

    status_code = 400
    code = "INVALID_TRANSITION"
