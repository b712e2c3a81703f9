import io
import json
from wsgiref.util import setup_testing_defaults

import pytest

from hotcoffee.server import build_app, error_body


@pytest.fixture
def app(tmp_path):
    return build_app(tmp_path)


def call(app, method, path, body=None):
    if body is None:
        data = b""
    elif isinstance(body, bytes):
        data = body
    else:
        data = json.dumps(body).encode("utf-8")
    environ = {}
    setup_testing_defaults(environ)
    environ.update(
        {
            "REQUEST_METHOD": method,
            "PATH_INFO": path,
            "CONTENT_LENGTH": str(len(data)),
            "wsgi.input": io.BytesIO(data),
        }
    )
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = int(status.split()[0])
        captured["headers"] = dict(headers)

    chunks = app(environ, start_response)
    return captured["status"], captured["headers"], b"".join(chunks)


LATTE = {
    "product_id": "latte",
    "name": "Latte",
    "description": "Milk coffee",
    "price": 4,
    "ingredients": [{"ingredient_id": "milk", "quantity": 10}],
}

MILK = {"ingredient_id": "milk", "name": "Milk", "quantity": 100, "unit": "ml"}


def test_error_body_is_json_object():
    assert json.loads(error_body("Invalid JSON", 400)) == {
        "Error": "Invalid JSON",
        "Status": 400,
    }


def test_empty_menu_lists_nothing(app):
    status, headers, body = call(app, "GET", "/menu")
    assert status == 200
    assert headers["Content-type" if "Content-type" in headers else "Content-Type"] == "application/json"
    assert json.loads(body) == []


def test_menu_add_then_get_round_trip(app):
    status, _, body = call(app, "POST", "/menu", LATTE)
    assert status == 201
    assert body == b""
    status, _, body = call(app, "GET", "/menu/latte")
    assert status == 200
    assert json.loads(body) == LATTE


def test_menu_add_invalid_item_fails(app):
    status, _, body = call(app, "POST", "/menu", {"name": "No id"})
    assert status == 500
    assert json.loads(body) == {"Error": "Failed to add menu item", "Status": 500}


def test_menu_get_missing_is_not_found(app):
    status, _, body = call(app, "GET", "/menu/missing")
    assert status == 404
    assert json.loads(body)["Error"] == "Menu item not found"


def test_menu_update_rejects_bad_json(app):
    call(app, "POST", "/menu", LATTE)
    status, _, body = call(app, "PUT", "/menu/latte", b"{not json")
    assert status == 400
    assert json.loads(body)["Error"] == "Invalid JSON"


def test_menu_update_replaces_item(app):
    call(app, "POST", "/menu", LATTE)
    changed = dict(LATTE, name="Big Latte")
    status, _, _ = call(app, "PUT", "/menu/latte", changed)
    assert status == 200
    _, _, body = call(app, "GET", "/menu/latte")
    assert json.loads(body)["name"] == "Big Latte"


def test_menu_delete_removes_item(app):
    call(app, "POST", "/menu", LATTE)
    status, _, body = call(app, "DELETE", "/menu/latte")
    assert status == 204
    assert body == b""
    status, _, _ = call(app, "GET", "/menu/latte")
    assert status == 404


def test_inventory_add_invalid_answers_ok_but_stores_nothing(app):
    status, _, body = call(app, "POST", "/inventory", {"ingredient_id": "milk"})
    assert status == 200
    assert body == b""
    _, _, listing = call(app, "GET", "/inventory")
    assert json.loads(listing) == []


def test_inventory_update_truncates_quantity(app):
    call(app, "POST", "/inventory", MILK)
    status, _, _ = call(app, "PUT", "/inventory/milk", dict(MILK, quantity=12.7))
    assert status == 200
    _, _, body = call(app, "GET", "/inventory/milk")
    assert json.loads(body)["quantity"] == 12


def test_inventory_delete_missing_is_not_found(app):
    status, _, body = call(app, "DELETE", "/inventory/none")
    assert status == 404
    assert json.loads(body)["Error"] == "Inventory item not found"


def test_order_flow_closes_and_reports(app):
    call(app, "POST", "/inventory", MILK)
    call(app, "POST", "/menu", LATTE)
    request = {"customer_name": "alice", "items": [{"product_id": "latte", "quantity": 2}]}
    status, _, _ = call(app, "POST", "/orders", request)
    assert status == 201

    _, _, body = call(app, "GET", "/orders")
    orders = json.loads(body)
    assert len(orders) == 1
    assert orders[0]["status"] == "open"
    assert orders[0]["customer_name"] == "alice"
    order_id = orders[0]["order_id"]

    status, _, _ = call(app, "POST", f"/orders/{order_id}/close")
    assert status == 200
    _, _, body = call(app, "GET", f"/orders/{order_id}")
    assert json.loads(body)["status"] == "closed"

    _, _, body = call(app, "GET", "/inventory/milk")
    assert json.loads(body)["quantity"] == 80

    status, _, body = call(app, "GET", "/reports/total-sales")
    assert status == 200
    assert json.loads(body) == 8

    status, _, body = call(app, "GET", "/reports/popular-items")
    assert status == 200
    assert json.loads(body) == "latte"

    status, _, body = call(app, "POST", f"/orders/{order_id}/close")
    assert status == 404
    assert json.loads(body)["Error"] == "Order item not found"


def test_order_for_unknown_product_fails(app):
    request = {"customer_name": "bob", "items": [{"product_id": "ghost", "quantity": 1}]}
    status, _, body = call(app, "POST", "/orders", request)
    assert status == 500
    assert json.loads(body)["Error"] == "Failed to add order item"


def test_order_add_rejects_bad_json(app):
    status, _, body = call(app, "POST", "/orders", b"[")
    assert status == 400
    assert json.loads(body)["Error"] == "Invalid JSON"


def test_reports_without_orders(app):
    _, _, total = call(app, "GET", "/reports/total-sales")
    _, _, popular = call(app, "GET", "/reports/popular-items")
    assert json.loads(total) == 0
    assert json.loads(popular) == ""


def test_unknown_path_is_not_found(app):
    status, _, body = call(app, "GET", "/nowhere")
    assert status == 404
    assert body == b"404 page not found\n"


def test_wrong_method_is_not_allowed(app):
    status, headers, body = call(app, "PATCH", "/menu/latte")
    assert status == 405
    assert body == b"Method Not Allowed\n"
    allowed = {method.strip() for method in headers["Allow"].split(",")}
    assert {"GET", "PUT", "DELETE"} <= allowed


def test_head_has_no_body(app):
    status, _, body = call(app, "HEAD", "/menu")
    assert status == 200
    assert body == b""