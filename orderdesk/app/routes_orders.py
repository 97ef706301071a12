"""Order submission and kitchen status routes."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from .deps import get_menu, get_store
from .menu import Menu
from .routes_metrics import order_status_changes_total, orders_created_total
from .schemas import MenuItem, Order, OrderIn, StatusUpdate
from .store import OrderStore
from .utils.responses import success

router = APIRouter(prefix="/api")


@router.get("/menu", tags=["Menu"], response_model=List[MenuItem])
async def list_menu(menu: Menu = Depends(get_menu)) -> List[MenuItem]:
    """Return every menu item, including unavailable ones."""

    return menu.list_items()


@router.post("/order", tags=["Orders"], summary="Place order")
async def place_order(
    payload: OrderIn,
    store: OrderStore = Depends(get_store),
    menu: Menu = Depends(get_menu),
) -> dict:
    """Create a ``pending`` order and notify the admin room.

    Item names and prices are taken from the menu at submission time.
    """

    lines = menu.snapshot_lines(payload.items)
    order = store.create_order(lines, payload.total, customer_id=payload.customer_id)
    orders_created_total.inc()
    return success(orderId=order.id)


@router.get("/orders/all", tags=["Orders"], response_model=List[Order])
async def list_orders(store: OrderStore = Depends(get_store)) -> List[Order]:
    """Return all orders in the order they were placed."""

    return store.get_all_orders()


@router.get("/orders/{order_id}", tags=["Orders"], response_model=Order)
async def get_order(order_id: int, store: OrderStore = Depends(get_store)) -> Order:
    return store.get_order(order_id)


@router.patch("/orders/{order_id}/status", tags=["Orders"], summary="Advance order")
async def update_order_status(
    order_id: int,
    payload: StatusUpdate,
    store: OrderStore = Depends(get_store),
) -> dict:
    """Move an order to its next status and broadcast the change."""

    order = store.update_status(order_id, payload.status)
    order_status_changes_total.labels(status=order.status.value).inc()
    return success(order=order.model_dump(mode="json"))
