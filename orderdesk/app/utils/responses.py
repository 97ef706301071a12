"""Response envelopes shared by the HTTP routes and error handlers."""

from typing import Any, Dict


def ok(data: Any) -> Dict[str, Any]:
    """Return a success envelope."""
    return {"ok": True, "data": data}


def success(**fields: Any) -> Dict[str, Any]:
    """Return the ``{"success": true, ...}`` body the web client expects."""
    return {"success": True, **fields}


def err(code: int | str, message: str, details: Any = None) -> Dict[str, Any]:
    """Return an error envelope tagged with the current request id."""
    from ..middlewares.request_id import request_id_ctx

    error: Dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details

    return {"ok": False, "request_id": request_id_ctx.get(None), "error": error}
