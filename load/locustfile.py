import os
import random

from locust import HttpUser, between, events, task

MENU_PATH = "/api/menu"
ORDER_PATH = "/api/order"
ORDERS_PATH = "/api/orders/all"
STATUS_PATH = "/api/orders/[id]/status"

P95_MENU_MS = 200
P95_ORDER_MS = 400

NEXT_STATUS = {"pending": "preparing", "preparing": "completed"}


class CustomerUser(HttpUser):
    """Browse the menu and place small orders."""

    host = os.environ.get("HOST", "http://localhost:3000")
    wait_time = between(1, 5)
    _menu: list[dict] = []

    def on_start(self) -> None:
        self._menu = [m for m in self.client.get(MENU_PATH).json() if m["available"]]

    @task(3)
    def view_menu(self) -> None:
        self.client.get(MENU_PATH)

    @task
    def place_order(self) -> None:
        """Order one to three random dishes with a matching total."""

        if not self._menu:
            return
        picks = random.sample(self._menu, k=min(len(self._menu), random.randint(1, 3)))
        items = [
            {"id": m["id"], "name": m["name"], "price": m["price"], "quantity": random.randint(1, 2)}
            for m in picks
        ]
        total = sum(i["price"] * i["quantity"] for i in items)
        self.client.post(ORDER_PATH, json={"items": items, "total": total})


class KitchenUser(HttpUser):
    """Reload the order list and advance the oldest unfinished order."""

    host = os.environ.get("HOST", "http://localhost:3000")
    wait_time = between(2, 4)

    @task
    def advance_order(self) -> None:
        orders = self.client.get(ORDERS_PATH).json()
        for order in orders:
            nxt = NEXT_STATUS.get(order["status"])
            if nxt:
                self.client.patch(
                    f"/api/orders/{order['id']}/status",
                    json={"status": nxt},
                    name=STATUS_PATH,
                )
                return


@events.test_stop.add_listener
def verify_thresholds(environment, **kwargs) -> None:
    """Fail the test run when p95 targets are not met."""

    failures: list[str] = []
    menu = environment.stats.get(MENU_PATH, "GET")
    if menu and menu.get_response_time_percentile(0.95) > P95_MENU_MS:
        failures.append(f"menu p95>{P95_MENU_MS}ms")
    order = environment.stats.get(ORDER_PATH, "POST")
    if order and order.get_response_time_percentile(0.95) > P95_ORDER_MS:
        failures.append(f"order p95>{P95_ORDER_MS}ms")
    if failures:
        print("Performance thresholds not met:", ", ".join(failures))
        environment.process_exit_code = 1
