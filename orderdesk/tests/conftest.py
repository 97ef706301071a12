"""Shared fixtures for API, store and real-time tests."""

import pathlib
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from config import get_settings  # noqa: E402
from orderdesk.app.main import create_app  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_client():
    """Return a factory building a fresh app and entered ``TestClient``.

    Keyword arguments override settings. Each client owns its own store,
    so tests never see each other's orders.
    """

    clients: list[TestClient] = []

    def _make(**overrides) -> TestClient:
        settings = get_settings().model_copy(update=overrides)
        client = TestClient(create_app(settings))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def beef_and_tea() -> dict:
    """Two beef rice and one iced lemon tea: 58 * 2 + 18 = 134."""

    return {
        "items": [
            {"menu_item_id": 1, "name": "招牌牛肉飯", "price": 58, "quantity": 2},
            {"menu_item_id": 4, "name": "凍檸茶", "price": 18, "quantity": 1},
        ],
        "total": 134,
    }
