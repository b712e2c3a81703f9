"""Sales reports computed from stored orders."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping

from hotcoffee.models import Order
from hotcoffee.storage import JsonRepository

_CLOSED = "closed"


class ReportsService:
    """Answers questions about closed orders."""

    def __init__(
        self, repository: JsonRepository[Order], price_list: Mapping[str, float]
    ) -> None:
        self.repository = repository
        self.price_list = price_list

    def _closed_orders(self) -> list[Order]:
        return [order for order in self.repository.load() if order.status == _CLOSED]

    def total_sales(self) -> float:
        """Sum of known prices times quantities over all closed orders."""
        return sum(
            (
                self.price_list.get(item.product_id, 0.0) * item.quantity
                for order in self._closed_orders()
                for item in order.items
            ),
            0.0,
        )

    def popular_item(self) -> str:
        """The product appearing in the most order lines of closed orders, or ""."""
        counts: Counter[str] = Counter()
        best = ""
        best_count = 0
        for order in self._closed_orders():
            for item in order.items:
                counts[item.product_id] += 1
                if counts[item.product_id] > best_count:
                    best_count = counts[item.product_id]
                    best = item.product_id
        return best