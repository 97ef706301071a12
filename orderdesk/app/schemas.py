# schemas.py

"""Pydantic models for API payloads, stored records and events."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .domain import OrderStatus


class MenuItem(BaseModel):
    """Read-only menu entry served to customers."""

    id: int
    category_id: Optional[int] = None
    name: str
    description: str = ""
    price: float = Field(..., ge=0)
    available: bool = True
    image_url: Optional[str] = None


class OrderLine(BaseModel):
    """Snapshot of a menu item at the time it was ordered.

    Carts posted by the web client are menu items extended with a
    ``quantity``, so the item id is also accepted as ``id`` or
    ``menuItemId``; any other menu fields are ignored.
    """

    model_config = ConfigDict(frozen=True)

    menu_item_id: int = Field(
        ...,
        validation_alias=AliasChoices("menu_item_id", "menuItemId", "id"),
        examples=[1],
    )
    name: str = Field(..., examples=["Beef rice"])
    price: float = Field(..., ge=0, examples=[58])
    quantity: int = Field(..., ge=1, examples=[2])

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class OrderIn(BaseModel):
    """Order submission payload."""

    items: List[OrderLine]
    total: float = Field(..., examples=[134])
    customer_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("customer_id", "customerId")
    )


class Order(BaseModel):
    """Order record held by the store and pushed to clients."""

    model_config = ConfigDict(frozen=True)

    id: int
    items: Tuple[OrderLine, ...]
    total: float
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime
    customer_id: Optional[str] = None


class StatusUpdate(BaseModel):
    """Payload for moving an order to its next status."""

    status: OrderStatus = Field(..., examples=["preparing"])
