"""Request dependencies resolving the per-application services."""

from fastapi import Request

from ..events import EventBroadcaster
from ..menu import Menu
from ..rooms import SubscriptionRouter
from ..store import OrderStore


def get_store(request: Request) -> OrderStore:
    return request.app.state.store


def get_menu(request: Request) -> Menu:
    return request.app.state.menu


def get_router(request: Request) -> SubscriptionRouter:
    return request.app.state.router


def get_broadcaster(request: Request) -> EventBroadcaster:
    return request.app.state.broadcaster
