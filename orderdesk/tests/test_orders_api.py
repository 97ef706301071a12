"""HTTP surface: menu, order submission and status changes."""


def _place(client, payload):
    resp = client.post("/api/order", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()["orderId"]


def test_menu_lists_reference_items(client):
    resp = client.get("/api/menu")
    assert resp.status_code == 200
    menu = resp.json()
    assert [m["id"] for m in menu] == [1, 2, 3, 4]
    assert {"name", "description", "price", "available", "image_url"} <= set(menu[0])


def test_place_order_and_list(client, beef_and_tea):
    resp = client.post("/api/order", json=beef_and_tea)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "orderId": 1}

    orders = client.get("/api/orders/all").json()
    assert len(orders) == 1
    order = orders[0]
    assert order["id"] == 1
    assert order["status"] == "pending"
    assert order["total"] == 134
    assert [line["quantity"] for line in order["items"]] == [2, 1]
    assert order["created_at"]


def test_order_ids_increase(client, beef_and_tea):
    ids = [_place(client, beef_and_tea) for _ in range(3)]
    assert ids == [1, 2, 3]
    assert [o["id"] for o in client.get("/api/orders/all").json()] == ids


def test_cart_shaped_items_are_accepted(client):
    """The web client posts menu items extended with ``quantity``."""

    menu = {m["id"]: m for m in client.get("/api/menu").json()}
    items = [{**menu[1], "quantity": 2}, {**menu[4], "quantity": 1}]
    assert _place(client, {"items": items, "total": 134}) == 1
    order = client.get("/api/orders/1").json()
    assert [line["menu_item_id"] for line in order["items"]] == [1, 4]


def test_total_mismatch_is_rejected(client, beef_and_tea):
    resp = client.post("/api/order", json={**beef_and_tea, "total": 100})
    assert resp.status_code == 400
    body = resp.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"]["expected"] == 134
    assert client.get("/api/orders/all").json() == []


def test_empty_order_is_rejected(client):
    resp = client.post("/api/order", json={"items": [], "total": 0})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_bad_quantity_is_a_400(client):
    payload = {"items": [{"id": 1, "name": "x", "price": 58, "quantity": 0}], "total": 0}
    resp = client.post("/api/order", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_unknown_menu_item_is_rejected(client):
    payload = {"items": [{"id": 99, "name": "Ghost", "price": 1, "quantity": 1}], "total": 1}
    resp = client.post("/api/order", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"]["details"] == {"menu_item_id": 99}


def test_unavailable_item_is_rejected(make_client, beef_and_tea):
    from config import get_settings

    menu = [dict(m) for m in get_settings().menu]
    menu[3]["available"] = False
    client = make_client(menu=menu)
    resp = client.post("/api/order", json=beef_and_tea)
    assert resp.status_code == 400


def test_prices_are_snapshotted_from_the_menu(client, beef_and_tea):
    """Client-sent names and prices never override the menu."""

    tampered = {
        "items": [{"id": 1, "name": "Free beef", "price": 1, "quantity": 2}],
        "total": 2,
    }
    assert client.post("/api/order", json=tampered).status_code == 400

    order_id = _place(client, beef_and_tea)
    menu = client.app.state.menu
    beef = menu.get(1)
    menu.upsert(beef.model_copy(update={"price": 99, "name": "New beef"}))
    order = client.get(f"/api/orders/{order_id}").json()
    assert order["items"][0]["price"] == 58
    assert order["items"][0]["name"] == "招牌牛肉飯"
    assert order["total"] == 134


def test_get_unknown_order(client):
    resp = client.get("/api/orders/5")
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["request_id"] == resp.headers["X-Request-ID"]


def test_status_lifecycle(client, beef_and_tea):
    order_id = _place(client, beef_and_tea)
    url = f"/api/orders/{order_id}/status"

    resp = client.patch(url, json={"status": "completed"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_TRANSITION"

    resp = client.patch(url, json={"status": "preparing"})
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["order"]["status"] == "preparing"

    assert client.patch(url, json={"status": "preparing"}).status_code == 400
    assert client.patch(url, json={"status": "completed"}).status_code == 200
    assert client.patch(url, json={"status": "preparing"}).status_code == 400
    assert client.get(f"/api/orders/{order_id}").json()["status"] == "completed"


def test_status_of_unknown_order(client):
    resp = client.patch("/api/orders/404/status", json={"status": "preparing"})
    assert resp.status_code == 404


def test_unknown_status_value(client, beef_and_tea):
    order_id = _place(client, beef_and_tea)
    resp = client.patch(f"/api/orders/{order_id}/status", json={"status": "cooking"})
    assert resp.status_code == 400


def test_stores_are_per_application(make_client, beef_and_tea):
    first, second = make_client(), make_client()
    _place(first, beef_and_tea)
    assert second.get("/api/orders/all").json() == []
    assert _place(second, beef_and_tea) == 1


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.json() == {"ok": True, "data": {"status": "ok"}}
    assert resp.headers["X-Request-ID"] == "abc-123"


def test_metrics_exposed(client, beef_and_tea):
    _place(client, beef_and_tea)
    body = client.get("/metrics").text
    assert "orders_created_total" in body
    assert "ws_messages_total" in body


def test_unusable_request_id_is_replaced(client):
    resp = client.get("/health", headers={"X-Request-ID": "bad id with spaces"})
    assert resp.headers["X-Request-ID"] != "bad id with spaces"
    assert len(resp.headers["X-Request-ID"]) == 32


def test_errors_are_counted(client):
    client.get("/api/orders/77")
    body = client.get("/metrics").text
    assert 'http_errors_total{status="404"}' in body
