"""Domain records of the coffee shop and the errors its services raise."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class ServiceError(Exception):
    """Base class for errors reported by the shop services."""


class ValidationError(ServiceError):
    """Raised when submitted data breaks a business rule."""


class NotFoundError(ServiceError):
    """Raised when a requested record does not exist."""


def _require_mapping(data: Any, name: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"{name} must be a JSON object")
    return data


def _text(data: Mapping, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _number(data: Mapping, key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {key!r} must be a number")
    return float(value)


def _integer(data: Mapping, key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer")
    return value


def _records(data: Mapping, key: str, record_type: Any) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list")
    return [record_type.from_dict(entry) for entry in value]


@dataclass
class InventoryItem:
    """A stocked ingredient."""

    ingredient_id: str = ""
    name: str = ""
    quantity: float = 0.0
    unit: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "InventoryItem":
        data = _require_mapping(data, "inventory item")
        return cls(
            ingredient_id=_text(data, "ingredient_id"),
            name=_text(data, "name"),
            quantity=_number(data, "quantity"),
            unit=_text(data, "unit"),
        )

    def to_dict(self) -> dict:
        return {
            "ingredient_id": self.ingredient_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
        }


@dataclass
class MenuItemIngredient:
    """An ingredient and the amount of it one menu item consumes."""

    ingredient_id: str = ""
    quantity: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> "MenuItemIngredient":
        data = _require_mapping(data, "menu item ingredient")
        return cls(
            ingredient_id=_text(data, "ingredient_id"),
            quantity=_number(data, "quantity"),
        )

    def to_dict(self) -> dict:
        return {"ingredient_id": self.ingredient_id, "quantity": self.quantity}


@dataclass
class MenuItem:
    """A product that can be ordered."""

    product_id: str = ""
    name: str = ""
    description: str = ""
    price: float = 0.0
    ingredients: list[MenuItemIngredient] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "MenuItem":
        data = _require_mapping(data, "menu item")
        return cls(
            product_id=_text(data, "product_id"),
            name=_text(data, "name"),
            description=_text(data, "description"),
            price=_number(data, "price"),
            ingredients=_records(data, "ingredients", MenuItemIngredient),
        )

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "ingredients": [ingredient.to_dict() for ingredient in self.ingredients],
        }


@dataclass
class OrderItem:
    """A product and how many of it an order holds."""

    product_id: str = ""
    quantity: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "OrderItem":
        data = _require_mapping(data, "order item")
        return cls(
            product_id=_text(data, "product_id"),
            quantity=_integer(data, "quantity"),
        )

    def to_dict(self) -> dict:
        return {"product_id": self.product_id, "quantity": self.quantity}


@dataclass
class Order:
    """A customer order as it is stored."""

    order_id: str = ""
    customer_name: str = ""
    items: list[OrderItem] = field(default_factory=list)
    status: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Order":
        data = _require_mapping(data, "order")
        return cls(
            order_id=_text(data, "order_id"),
            customer_name=_text(data, "customer_name"),
            items=_records(data, "items", OrderItem),
            status=_text(data, "status"),
            created_at=_text(data, "created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "customer_name": self.customer_name,
            "items": [item.to_dict() for item in self.items],
            "status": self.status,
            "created_at": self.created_at,
        }


@dataclass
class CreateOrderRequest:
    """The data a client sends to place a new order."""

    customer_name: str = ""
    items: list[OrderItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "CreateOrderRequest":
        data = _require_mapping(data, "order request")
        return cls(
            customer_name=_text(data, "customer_name"),
            items=_records(data, "items", OrderItem),
        )

    def to_dict(self) -> dict:
        return {
            "customer_name": self.customer_name,
            "items": [item.to_dict() for item in self.items],
        }