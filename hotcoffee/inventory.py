"""Inventory management."""

from __future__ import annotations

import logging
from dataclasses import replace

from hotcoffee.models import InventoryItem, NotFoundError, ServiceError, ValidationError
from hotcoffee.storage import JsonRepository

logger = logging.getLogger(__name__)


def _invalid(message: str) -> ValidationError:
    logger.error(message)
    return ValidationError(message)


class InventoryService:
    """Adds, reads, updates and removes inventory items."""

    def __init__(self, repository: JsonRepository[InventoryItem]) -> None:
        self.repository = repository

    def add(self, item: InventoryItem) -> None:
        """Store a new ingredient after validating it."""
        if not item.ingredient_id:
            raise _invalid("ingredient ID can not be empty")
        if not item.name:
            raise _invalid("ingredient name can not be empty")
        if not item.unit:
            raise _invalid("ingredient unit can not be empty")
        if item.quantity <= 0:
            raise _invalid(
                "ingredient quantity can not be equal or lower than 0 (quantity > 0)"
            )
        try:
            items = self.repository.load()
        except (OSError, ValueError) as exc:
            raise ServiceError("could not get data") from exc
        if any(existing.ingredient_id == item.ingredient_id for existing in items):
            raise _invalid("ingredient ID can not be same")
        items.append(item)
        self.repository.save(items)

    def get_all(self) -> list[InventoryItem]:
        return self.repository.load()

    def get(self, ingredient_id: str) -> InventoryItem:
        for item in self.repository.load():
            if item.ingredient_id == ingredient_id:
                return item
        logger.info("inventory item not found")
        raise NotFoundError("inventory item not found")

    def update(self, ingredient_id: str, item: InventoryItem, new_quantity: float) -> None:
        """Replace an item; its quantity becomes new_quantity truncated to a whole number."""
        items = self.repository.load()
        for index, existing in enumerate(items):
            if existing.ingredient_id == ingredient_id:
                items[index] = replace(item, quantity=float(int(new_quantity)))
                self.repository.save(items)
                return
        logger.info("inventory item not found")
        raise NotFoundError("inventory item not found")

    def delete(self, ingredient_id: str) -> None:
        items = self.repository.load()
        remaining = [item for item in items if item.ingredient_id != ingredient_id]
        if len(remaining) == len(items):
            logger.info("inventory item not found")
            raise NotFoundError("inventory item not found")
        self.repository.save(remaining)