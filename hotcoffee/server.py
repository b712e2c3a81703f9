"""WSGI application exposing the coffee shop's HTTP API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from pathlib import Path
from typing import Any, Callable, Iterable

from hotcoffee.inventory import InventoryService
from hotcoffee.menu import MenuService
from hotcoffee.models import (
    CreateOrderRequest,
    InventoryItem,
    MenuItem,
    Order,
    ServiceError,
)
from hotcoffee.orders import OrderService
from hotcoffee.reports import ReportsService
from hotcoffee.storage import (
    INVENTORY_FILE,
    MENU_FILE,
    ORDERS_FILE,
    inventory_repository,
    menu_repository,
    order_repository,
    prepare_data_dir,
)

logger = logging.getLogger(__name__)

JSON_TYPE = "application/json"
TEXT_TYPE = "text/plain; charset=utf-8"

_FAILURES = (ServiceError, OSError, ValueError)


def _plain(value: Any) -> Any:
    """Render whole floats as integers, the way the API has always sent numbers."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    if isinstance(value, dict):
        return {key: _plain(entry) for key, entry in value.items()}
    if isinstance(value, list):
        return [_plain(entry) for entry in value]
    return value


def _encode(value: Any, newline: bool = False) -> bytes:
    text = json.dumps(_plain(value), separators=(",", ":"), ensure_ascii=False)
    if newline:
        text += "\n"
    return text.encode("utf-8")


def error_body(message: str, status: int) -> bytes:
    """Return the JSON body sent with an error response."""
    return _encode({"Error": message, "Status": int(status)})


def _decode(body: bytes, record_type: Any) -> Any:
    data = json.loads(body)
    if data is None:
        data = {}
    return record_type.from_dict(data)


@dataclass
class _Response:
    status: int = HTTPStatus.OK
    body: bytes = b""
    headers: list[tuple[str, str]] = field(default_factory=list)


def _error(message: str, status: int) -> _Response:
    logger.error(message)
    return _Response(status, error_body(message, status), [("Content-Type", JSON_TYPE)])


def _json(value: Any) -> _Response:
    return _Response(HTTPStatus.OK, _encode(value, newline=True), [("Content-Type", JSON_TYPE)])


def _records(items: Iterable[Any]) -> list[dict]:
    return [item.to_dict() for item in items]


_Handler = Callable[[dict, bytes], _Response]


def _match(pattern: tuple[str, ...], segments: tuple[str, ...]) -> dict | None:
    if len(pattern) != len(segments):
        return None
    params: dict[str, str] = {}
    for literal, segment in zip(pattern, segments):
        if literal.startswith("{") and literal.endswith("}"):
            if not segment:
                return None
            params[literal[1:-1]] = segment
        elif literal != segment:
            return None
    return params


class CoffeeShopApp:
    """Routes HTTP requests to the menu, inventory, order and report services."""

    def __init__(
        self,
        menu: MenuService,
        inventory: InventoryService,
        orders: OrderService,
        reports: ReportsService,
    ) -> None:
        self.menu = menu
        self.inventory = inventory
        self.orders = orders
        self.reports = reports
        self._routes: list[tuple[str, tuple[str, ...], _Handler]] = [
            ("POST", ("menu",), self._menu_add),
            ("GET", ("menu",), self._menu_list),
            ("GET", ("menu", "{id}"), self._menu_get),
            ("PUT", ("menu", "{id}"), self._menu_update),
            ("DELETE", ("menu", "{id}"), self._menu_delete),
            ("POST", ("orders",), self._order_add),
            ("GET", ("orders",), self._order_list),
            ("GET", ("orders", "{id}"), self._order_get),
            ("PUT", ("orders", "{id}"), self._order_update),
            ("DELETE", ("orders", "{id}"), self._order_delete),
            ("POST", ("orders", "{id}", "close"), self._order_close),
            ("POST", ("inventory",), self._inventory_add),
            ("GET", ("inventory",), self._inventory_list),
            ("GET", ("inventory", "{id}"), self._inventory_get),
            ("PUT", ("inventory", "{id}"), self._inventory_update),
            ("DELETE", ("inventory", "{id}"), self._inventory_delete),
            ("GET", ("reports", "total-sales"), self._total_sales),
            ("GET", ("reports", "popular-items"), self._popular_items),
        ]

    def __call__(self, environ: dict, start_response: Callable) -> list[bytes]:
        method = str(environ.get("REQUEST_METHOD", "GET")).upper()
        path = environ.get("PATH_INFO") or "/"
        response = self._dispatch(method, path, _read_body(environ))
        status = HTTPStatus(response.status)
        headers = list(response.headers)
        if status >= 200 and status not in (HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED):
            headers.append(("Content-Length", str(len(response.body))))
        start_response(f"{status.value} {status.phrase}", headers)
        if method == "HEAD":
            return [b""]
        return [response.body]

    def _dispatch(self, method: str, path: str, body: bytes) -> _Response:
        segments = tuple(path.split("/")[1:]) if path.startswith("/") else ()
        allowed: set[str] = set()
        for route_method, pattern, handler in self._routes:
            params = _match(pattern, segments)
            if params is None:
                continue
            if route_method == method or (method == "HEAD" and route_method == "GET"):
                return handler(params, body)
            allowed.add(route_method)
            if route_method == "GET":
                allowed.add("HEAD")
        if allowed:
            return _Response(
                HTTPStatus.METHOD_NOT_ALLOWED,
                b"Method Not Allowed\n",
                [
                    ("Content-Type", TEXT_TYPE),
                    ("X-Content-Type-Options", "nosniff"),
                    ("Allow", ", ".join(sorted(allowed))),
                ],
            )
        return _Response(
            HTTPStatus.NOT_FOUND,
            b"404 page not found\n",
            [("Content-Type", TEXT_TYPE), ("X-Content-Type-Options", "nosniff")],
        )

    # menu

    def _menu_add(self, params: dict, body: bytes) -> _Response:
        try:
            item = _decode(body, MenuItem)
        except ValueError:
            item = MenuItem()
        try:
            self.menu.add(item)
        except _FAILURES:
            return _error("Failed to add menu item", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _Response(HTTPStatus.CREATED)

    def _menu_list(self, params: dict, body: bytes) -> _Response:
        try:
            items = self.menu.get_all()
        except _FAILURES:
            return _error("Failed to load menu", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json(_records(items))

    def _menu_get(self, params: dict, body: bytes) -> _Response:
        try:
            item = self.menu.get(params["id"])
        except _FAILURES:
            return _error("Menu item not found", HTTPStatus.NOT_FOUND)
        return _json(item.to_dict())

    def _menu_update(self, params: dict, body: bytes) -> _Response:
        try:
            item = _decode(body, MenuItem)
        except ValueError:
            return _error("Invalid JSON", HTTPStatus.BAD_REQUEST)
        try:
            self.menu.update(params["id"], item)
        except _FAILURES:
            return _error("Menu item not found", HTTPStatus.NOT_FOUND)
        return _Response()

    def _menu_delete(self, params: dict, body: bytes) -> _Response:
        try:
            self.menu.delete(params["id"])
        except _FAILURES:
            return _error("Menu item not found", HTTPStatus.NOT_FOUND)
        return _Response(HTTPStatus.NO_CONTENT)

    # orders

    def _order_add(self, params: dict, body: bytes) -> _Response:
        try:
            request = _decode(body, CreateOrderRequest)
        except ValueError:
            return _error("Invalid JSON", HTTPStatus.BAD_REQUEST)
        try:
            self.orders.add(request)
        except _FAILURES:
            return _error("Failed to add order item", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _Response(HTTPStatus.CREATED, b"", [("Content-Type", JSON_TYPE)])

    def _order_list(self, params: dict, body: bytes) -> _Response:
        try:
            orders = self.orders.get_all()
        except _FAILURES:
            return _error("Failed to load orders", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json(_records(orders))

    def _order_get(self, params: dict, body: bytes) -> _Response:
        try:
            order = self.orders.get(params["id"])
        except _FAILURES:
            return _error("Order item not found", HTTPStatus.NOT_FOUND)
        return _json(order.to_dict())

    def _order_update(self, params: dict, body: bytes) -> _Response:
        try:
            order = _decode(body, Order)
        except ValueError:
            return _error("Invalid JSON", HTTPStatus.BAD_REQUEST)
        try:
            self.orders.update(params["id"], order)
        except _FAILURES:
            return _error("Order item not found", HTTPStatus.NOT_FOUND)
        return _Response(HTTPStatus.OK, b"", [("Content-Type", JSON_TYPE)])

    def _order_delete(self, params: dict, body: bytes) -> _Response:
        try:
            self.orders.delete(params["id"])
        except _FAILURES:
            return _error("Order item not found", HTTPStatus.NOT_FOUND)
        return _Response(HTTPStatus.NO_CONTENT, b"", [("Content-Type", JSON_TYPE)])

    def _order_close(self, params: dict, body: bytes) -> _Response:
        try:
            self.orders.close(params["id"])
        except _FAILURES:
            return _error("Order item not found", HTTPStatus.NOT_FOUND)
        return _Response()

    # inventory

    def _inventory_add(self, params: dict, body: bytes) -> _Response:
        # This endpoint answers 200 with an empty body whether or not the item was stored.
        try:
            self.inventory.add(_decode(body, InventoryItem))
        except _FAILURES:
            pass
        return _Response()

    def _inventory_list(self, params: dict, body: bytes) -> _Response:
        try:
            items = self.inventory.get_all()
        except _FAILURES:
            return _error("Failed to load inventory", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json(_records(items))

    def _inventory_get(self, params: dict, body: bytes) -> _Response:
        try:
            item = self.inventory.get(params["id"])
        except _FAILURES:
            return _error("Inventory item not found", HTTPStatus.NOT_FOUND)
        return _json(item.to_dict())

    def _inventory_update(self, params: dict, body: bytes) -> _Response:
        try:
            item = _decode(body, InventoryItem)
        except ValueError:
            return _error("Invalid JSON", HTTPStatus.BAD_REQUEST)
        try:
            self.inventory.update(params["id"], item, item.quantity)
        except _FAILURES:
            return _error("Inventory item not found", HTTPStatus.NOT_FOUND)
        return _Response()

    def _inventory_delete(self, params: dict, body: bytes) -> _Response:
        try:
            self.inventory.delete(params["id"])
        except _FAILURES:
            return _error("Inventory item not found", HTTPStatus.NOT_FOUND)
        return _Response(HTTPStatus.NO_CONTENT, b"", [("Content-Type", JSON_TYPE)])

    # reports

    def _total_sales(self, params: dict, body: bytes) -> _Response:
        try:
            total = self.reports.total_sales()
        except _FAILURES as exc:
            return _Response(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                f"{exc}\n".encode("utf-8"),
                [("Content-Type", TEXT_TYPE), ("X-Content-Type-Options", "nosniff")],
            )
        return _Response(HTTPStatus.OK, _encode(total), [("Content-Type", JSON_TYPE)])

    def _popular_items(self, params: dict, body: bytes) -> _Response:
        status = HTTPStatus.OK
        try:
            name = self.reports.popular_item()
        except _FAILURES:
            status, name = HTTPStatus.BAD_REQUEST, ""
        return _Response(status, _encode(name), [("Content-Type", JSON_TYPE)])


def _read_body(environ: dict) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    stream = environ.get("wsgi.input")
    if stream is None or length <= 0:
        return b""
    return stream.read(length)


def build_app(data_dir: str | Path) -> CoffeeShopApp:
    """Prepare the data directory and wire the services into an application."""
    directory = Path(data_dir)
    prepare_data_dir(directory)
    price_list: dict[str, float] = {}
    menu = MenuService(menu_repository(directory / MENU_FILE))
    inventory = InventoryService(inventory_repository(directory / INVENTORY_FILE))
    orders = OrderService(
        order_repository(directory / ORDERS_FILE), menu, inventory, price_list
    )
    reports = ReportsService(order_repository(directory / ORDERS_FILE), price_list)
    return CoffeeShopApp(menu, inventory, orders, reports)