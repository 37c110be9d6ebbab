"""
Movement Aggregator — stock IN and four-way stock OUT for a product.

For a product and an inclusive date window, consumption is collected from:
- Direct stock-out movements posted with ``source=sale``
- Waste log rows
- Staff meals, decomposed through the dish's product lines
- POS sales, decomposed through the dish's product lines

A sale or meal whose dish has been deleted, or whose dish does not use the
product, contributes zero. Historical windows stay reconcilable after
catalog edits.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from kitchenledger.models.catalog import Dish
from kitchenledger.models.dataset import KitchenDataset
from kitchenledger.models.ledger import MovementSource

logger = logging.getLogger("kitchenledger.analyzers.movements")


def month_window(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12 (got {month})")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _in_window(day: date, start: date | None, end: date | None) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


@dataclass(frozen=True)
class MovementSummary:
    """Stock IN and decomposed stock OUT for one product over a window."""

    product_id: str
    total_in: float
    sales_out: float
    waste_out: float
    personal_meals_out: float
    dish_sales_out: float

    @property
    def total_out(self) -> float:
        return self.sales_out + self.waste_out + self.personal_meals_out + self.dish_sales_out

    @property
    def net_movement(self) -> float:
        return self.total_in - self.total_out

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "total_in": self.total_in,
            "total_out": self.total_out,
            "sales_out": self.sales_out,
            "waste_out": self.waste_out,
            "personal_meals_out": self.personal_meals_out,
            "dish_sales_out": self.dish_sales_out,
        }


class MovementAggregator:
    """Aggregate ledger rows into per-product stock movement totals.

    Usage::

        aggregator = MovementAggregator(dataset)
        start, end = month_window(2025, 3)
        summary = aggregator.aggregate("mozzarella", start, end)
        print(summary.total_in, summary.total_out)

    The aggregator only reads the dataset; repeated calls over the same
    records return identical totals.
    """

    def __init__(self, dataset: KitchenDataset) -> None:
        self.dataset = dataset
        self.dishes: dict[str, Dish] = dataset.dish_index()
        self._reported_missing: set[str] = set()

    def aggregate(
        self,
        product_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> MovementSummary:
        """Aggregate IN and OUT quantities for ``product_id`` in ``[start, end]``.

        Either bound may be ``None`` for an open window.
        """
        return MovementSummary(
            product_id=product_id,
            total_in=self.total_in(product_id, start, end),
            sales_out=self.sales_out(product_id, start, end),
            waste_out=self.waste_out(product_id, start, end),
            personal_meals_out=self.personal_meals_out(product_id, start, end),
            dish_sales_out=self.dish_sales_out(product_id, start, end),
        )

    def aggregate_all(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> dict[str, MovementSummary]:
        """Aggregate every product of the dataset."""
        return {
            product.id: self.aggregate(product.id, start, end)
            for product in self.dataset.products
        }

    def total_in(self, product_id: str, start: date | None = None, end: date | None = None) -> float:
        return sum(
            m.quantity for m in self.dataset.stock_movements
            if m.product_id == product_id
            and m.is_in
            and _in_window(m.movement_date, start, end)
        )

    def total_in_value(self, start: date | None = None, end: date | None = None) -> float:
        """Value of every IN movement in the window, across all products.

        Uses the movement's own ``total_cost`` when posted, then
        ``quantity × unit_price``, then the product's current price.
        """
        products = self.dataset.product_index()
        total = 0.0
        for movement in self.dataset.stock_movements:
            if not movement.is_in or not _in_window(movement.movement_date, start, end):
                continue
            if movement.total_cost is not None:
                total += movement.total_cost
            elif movement.unit_price is not None:
                total += movement.quantity * movement.unit_price
            elif movement.product_id in products:
                total += movement.quantity * products[movement.product_id].price_per_unit
        return total

    def sales_out(self, product_id: str, start: date | None = None, end: date | None = None) -> float:
        return sum(
            m.quantity for m in self.dataset.stock_movements
            if m.product_id == product_id
            and m.is_out
            and m.source == MovementSource.SALE
            and _in_window(m.movement_date, start, end)
        )

    def waste_out(self, product_id: str, start: date | None = None, end: date | None = None) -> float:
        return sum(
            w.quantity for w in self.dataset.waste
            if w.product_id == product_id and _in_window(w.date, start, end)
        )

    def personal_meals_out(self, product_id: str, start: date | None = None, end: date | None = None) -> float:
        total = 0.0
        for meal in self.dataset.personal_meals:
            if not _in_window(meal.date, start, end):
                continue
            total += self._dish_usage(meal.dish_id, product_id) * meal.quantity
        return total

    def dish_sales_out(self, product_id: str, start: date | None = None, end: date | None = None) -> float:
        total = 0.0
        for sale in self.dataset.sales:
            if not _in_window(sale.sale_date, start, end):
                continue
            total += self._dish_usage(sale.dish_id, product_id) * sale.quantity_sold
        return total

    def _dish_usage(self, dish_id: str, product_id: str) -> float:
        """Quantity of ``product_id`` used by one serving of ``dish_id``.

        Only direct product lines count; 0 when the dish is gone.
        """
        dish = self.dishes.get(dish_id)
        if dish is None:
            if dish_id not in self._reported_missing:
                self._reported_missing.add(dish_id)
                logger.warning("Ledger references missing dish %s; counted as zero", dish_id)
            return 0.0
        return sum(line.quantity for line in dish.product_lines(product_id))
