# main.py

"""FastAPI application for menu browsing, ordering and kitchen updates.

All order state lives in one :class:`OrderStore` owned by the application
instance; nothing is persisted and a restart starts from an empty store.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings

from .errors import OrderDeskError
from .events import EventBroadcaster
from .menu import Menu
from .middlewares import (
    LoggingMiddleware,
    PrometheusMiddleware,
    RequestIdMiddleware,
    realtime_guard,
)
from .obs import capture_exception, configure_logging, init_sentry
from .rooms import SubscriptionRouter
from .routes_metrics import router as metrics_router
from .routes_orders import router as orders_router
from .routes_realtime import router as realtime_router
from .store import OrderStore
from .utils.responses import err, ok

logger = logging.getLogger("api")


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(OrderDeskError)
    async def order_error_handler(request: Request, exc: OrderDeskError):
        logger.warning(
            exc.message, extra={"status": exc.status_code, "route": request.url.path}
        )
        return JSONResponse(
            err(exc.code, exc.message, jsonable_encoder(exc.details)),
            status_code=exc.status_code,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "invalid request body", extra={"status": 400, "route": request.url.path}
        )
        return JSONResponse(
            err("VALIDATION_ERROR", "Invalid request", jsonable_encoder(exc.errors())),
            status_code=400,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            exc.detail, extra={"status": exc.status_code, "route": request.url.path}
        )
        return JSONResponse(err(exc.status_code, exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_error", extra={"status": 500, "route": request.url.path}
        )
        capture_exception(exc)
        return JSONResponse(err(500, "Internal Server Error"), status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an application with its own store, rooms and broadcaster."""

    settings = settings or get_settings()
    configure_logging(getattr(logging, settings.log_level.upper(), logging.INFO))
    init_sentry(settings.error_dsn, env=settings.env)

    app = FastAPI(title="orderdesk")
    app.state.settings = settings
    app.state.router = SubscriptionRouter()
    app.state.broadcaster = EventBroadcaster(
        app.state.router,
        admin_room=settings.admin_room,
        update_audience=settings.update_audience,
    )
    app.state.store = OrderStore(app.state.broadcaster)
    app.state.menu = Menu(settings.menu)
    app.state.ws_limiter = realtime_guard.ConnectionLimiter(settings.max_conn_per_ip)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    _register_error_handlers(app)

    app.include_router(orders_router)
    app.include_router(realtime_router)
    app.include_router(metrics_router)

    @app.get("/health")
    async def health() -> dict:
        return ok({"status": "ok"})

    return app


app = create_app()
