import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Context variable used by log filter and error envelopes
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

# Caller-supplied ids end up in logs; anything else is replaced
_VALID_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(header: str | None) -> str:
    """Return ``header`` when it is a usable id, else a fresh one."""

    if header and _VALID_ID.match(header):
        return header
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request and its response with ``X-Request-ID``."""

    async def dispatch(self, request: Request, call_next):
        req_id = resolve_request_id(request.headers.get("X-Request-ID"))
        token = request_id_ctx.set(req_id)
        request.state.request_id = req_id
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = req_id
        return response
