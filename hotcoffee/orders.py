"""Order placement, editing and closing."""

from __future__ import annotations

import logging
import time
from collections.abc import MutableMapping
from datetime import datetime

from hotcoffee.inventory import InventoryService
from hotcoffee.menu import MenuService
from hotcoffee.models import (
    CreateOrderRequest,
    MenuItem,
    NotFoundError,
    Order,
    ServiceError,
    ValidationError,
)
from hotcoffee.storage import JsonRepository

logger = logging.getLogger(__name__)

STATUS_OPEN = "open"
STATUS_CLOSED = "closed"


def generate_order_id() -> str:
    """Return a new order identifier built from the current time in nanoseconds."""
    return str(time.time_ns())


def _timestamp() -> str:
    stamp = datetime.now().astimezone().replace(microsecond=0).isoformat()
    if stamp.endswith("+00:00"):
        stamp = stamp[: -len("+00:00")] + "Z"
    return stamp


def _fail(error_type: type[ServiceError], message: str) -> ServiceError:
    logger.error(message)
    return error_type(message)


class OrderService:
    """Places, reads, edits, removes and closes customer orders."""

    def __init__(
        self,
        repository: JsonRepository[Order],
        menu: MenuService,
        inventory: InventoryService,
        price_list: MutableMapping[str, float],
    ) -> None:
        self.repository = repository
        self.menu = menu
        self.inventory = inventory
        self.price_list = price_list

    def _menu_item(self, product_id: str) -> MenuItem:
        try:
            return self.menu.get(product_id)
        except NotFoundError:
            raise _fail(
                NotFoundError, f"product with ID {product_id} not found in menu"
            ) from None

    def _stock(self, ingredient_id: str):
        try:
            return self.inventory.get(ingredient_id)
        except NotFoundError:
            raise _fail(
                NotFoundError, f"ingredient with ID {ingredient_id} not found in inventory"
            ) from None

    def add(self, request: CreateOrderRequest) -> Order:
        """Validate a request against menu and stock and store it as an open order."""
        if not request.customer_name:
            raise _fail(ValidationError, "invalid order data")

        for order_item in request.items:
            if order_item.quantity <= 0:
                raise _fail(ValidationError, "quantity can not be less or equal to 0")
            menu_item = self._menu_item(order_item.product_id)
            for ingredient in menu_item.ingredients:
                stock = self._stock(ingredient.ingredient_id)
                required = order_item.quantity * ingredient.quantity
                if stock.quantity < required:
                    raise _fail(
                        ValidationError,
                        f"not enough stock for ingredient {ingredient.ingredient_id}",
                    )

        orders = self.repository.load()
        taken = {order.order_id for order in orders}
        order_id = generate_order_id()
        while order_id in taken:
            order_id = generate_order_id()

        order = Order(
            order_id=order_id,
            customer_name=request.customer_name,
            items=list(request.items),
            status=STATUS_OPEN,
            created_at=_timestamp(),
        )
        orders.append(order)
        self.repository.save(orders)
        return order

    def get_all(self) -> list[Order]:
        return self.repository.load()

    def get(self, order_id: str) -> Order:
        for order in self.repository.load():
            if order.order_id == order_id:
                return order
        logger.info("order not found")
        raise NotFoundError("order not found")

    def update(self, order_id: str, order: Order) -> None:
        orders = self.repository.load()
        for index, existing in enumerate(orders):
            if existing.order_id == order_id:
                orders[index] = order
                self.repository.save(orders)
                return
        logger.info("order not found")
        raise NotFoundError("order not found")

    def delete(self, order_id: str) -> None:
        orders = self.repository.load()
        remaining = [order for order in orders if order.order_id != order_id]
        if len(remaining) == len(orders):
            logger.info("order not found")
            raise NotFoundError("order not found")
        self.repository.save(remaining)

    def close(self, order_id: str) -> None:
        """Close an open order, taking its ingredients out of the inventory."""
        orders = self.repository.load()
        index = next(
            (i for i, order in enumerate(orders) if order.order_id == order_id), None
        )
        if index is None:
            logger.info("order not found")
            raise NotFoundError("order not found")
        order = orders[index]
        if order.status == STATUS_CLOSED:
            logger.info("already closed")
            raise ValidationError("already closed")

        for order_item in order.items:
            menu_item = self._menu_item(order_item.product_id)
            self.price_list[menu_item.product_id] = menu_item.price
            for ingredient in menu_item.ingredients:
                stock = self._stock(ingredient.ingredient_id)
                required = order_item.quantity * ingredient.quantity
                if stock.quantity < required:
                    raise _fail(
                        ValidationError,
                        f"not enough stock for ingredient {ingredient.ingredient_id}",
                    )
                try:
                    self.inventory.update(
                        ingredient.ingredient_id, stock, stock.quantity - required
                    )
                except (ServiceError, OSError) as exc:
                    raise ServiceError(
                        f"failed to update inventory for ingredient {ingredient.ingredient_id}"
                    ) from exc

        order.status = STATUS_CLOSED
        self.repository.save(orders)