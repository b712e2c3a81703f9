"""Menu management."""

from __future__ import annotations

import logging

from hotcoffee.models import MenuItem, NotFoundError, ValidationError
from hotcoffee.storage import JsonRepository

logger = logging.getLogger(__name__)


def _invalid(message: str) -> ValidationError:
    logger.error(message)
    return ValidationError(message)


class MenuService:
    """Adds, reads, updates and removes menu items."""

    def __init__(self, repository: JsonRepository[MenuItem]) -> None:
        self.repository = repository

    def add(self, item: MenuItem) -> None:
        """Store a new menu item after validating it."""
        if not item.product_id:
            raise _invalid("menu ID can not be empty")
        if not item.name:
            raise _invalid("name can not be empty. Please write name")
        if item.price < 0:
            raise _invalid("price can not be lower than 0 (price >= 0)")
        for ingredient in item.ingredients:
            if not ingredient.ingredient_id:
                raise _invalid(
                    "ingredient ID can not be empty. Please write ingredient ID"
                )
            if ingredient.quantity <= 0:
                raise _invalid(
                    "quantity of ingredient can not be equal or lesser than 0 (quantity > 0)"
                )
        items = self.repository.load()
        if any(existing.product_id == item.product_id for existing in items):
            raise _invalid("menu Id can not be same")
        items.append(item)
        self.repository.save(items)

    def get_all(self) -> list[MenuItem]:
        return self.repository.load()

    def get(self, product_id: str) -> MenuItem:
        for item in self.repository.load():
            if item.product_id == product_id:
                return item
        logger.info("menu item not found")
        raise NotFoundError("menu item not found")

    def update(self, product_id: str, item: MenuItem) -> None:
        items = self.repository.load()
        for index, existing in enumerate(items):
            if existing.product_id == product_id:
                items[index] = item
                self.repository.save(items)
                return
        logger.info("menu item not found")
        raise NotFoundError("menu item not found")

    def delete(self, product_id: str) -> None:
        items = self.repository.load()
        remaining = [item for item in items if item.product_id != product_id]
        if len(remaining) == len(items):
            logger.info("menu item not found")
            raise NotFoundError("menu item not found")
        self.repository.save(remaining)