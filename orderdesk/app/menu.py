# menu.py

"""Read-only menu catalogue and snapshotting of ordered lines."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .errors import ValidationError
from .schemas import MenuItem, OrderLine


class Menu:
    """Menu items keyed by id, in the order they were loaded."""

    def __init__(self, items: Iterable[MenuItem | Dict[str, Any]] = ()) -> None:
        self._items: Dict[int, MenuItem] = {}
        for item in items:
            self.upsert(item if isinstance(item, MenuItem) else MenuItem.model_validate(item))

    def upsert(self, item: MenuItem) -> None:
        self._items[item.id] = item

    def list_items(self) -> List[MenuItem]:
        return list(self._items.values())

    def get(self, item_id: int) -> MenuItem | None:
        return self._items.get(item_id)

    def snapshot_lines(self, lines: Iterable[OrderLine]) -> List[OrderLine]:
        """Return ``lines`` priced and named from the current catalogue.

        Unknown or unavailable items are rejected with
        :class:`ValidationError`; only the requested quantity is kept from
        the caller's data.
        """

        resolved: List[OrderLine] = []
        for line in lines:
            item = self._items.get(line.menu_item_id)
            if item is None:
                raise ValidationError(
                    f"Unknown menu item {line.menu_item_id}",
                    details={"menu_item_id": line.menu_item_id},
                )
            if not item.available:
                raise ValidationError(
                    f"{item.name} is not available",
                    details={"menu_item_id": item.id},
                )
            resolved.append(
                OrderLine(
                    menu_item_id=item.id,
                    name=item.name,
                    price=item.price,
                    quantity=line.quantity,
                )
            )
        return resolved
