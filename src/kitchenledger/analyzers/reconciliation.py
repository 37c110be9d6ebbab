"""
Inventory Reconciliation — physical counts vs ledger movements.

Combines the manually counted initial/final quantities of each product with
the aggregated stock IN/OUT to produce a variance, and compares the real
food cost implied by the counts with the theoretical food cost recorded on
POS sales.

The counts come from the single editable-inventory row of each product.
That row is not keyed by period: it is the latest snapshot the operator
entered, so callers must make sure it belongs to the window they reconcile.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from kitchenledger.analyzers.cost_model import food_cost_percentage
from kitchenledger.analyzers.movements import MovementAggregator, MovementSummary, month_window
from kitchenledger.models.dataset import KitchenDataset

logger = logging.getLogger("kitchenledger.analyzers.reconciliation")


def stock_variance(initial: float, total_in: float, total_out: float, final: float) -> float:
    """Expected stock minus counted stock: ``initial + in - out - final``."""
    return initial + total_in - total_out - final


@dataclass
class InventoryReconciliation:
    """Reconciliation of one product over a window."""

    product_id: str
    product_name: str
    unit: str
    price_per_unit: float
    initial_quantity: float
    final_quantity: float
    movements: MovementSummary
    has_count: bool = True

    @property
    def total_in(self) -> float:
        return self.movements.total_in

    @property
    def total_out(self) -> float:
        return self.movements.total_out

    @property
    def variance(self) -> float:
        return stock_variance(
            self.initial_quantity, self.total_in, self.total_out, self.final_quantity
        )

    @property
    def final_value(self) -> float:
        return self.final_quantity * self.price_per_unit

    @property
    def variance_value(self) -> float:
        return self.variance * self.price_per_unit

    @property
    def is_balanced(self) -> bool:
        return abs(self.variance) < 1e-9

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "initial_quantity": self.initial_quantity,
            "final_quantity": self.final_quantity,
            "variance": self.variance,
            "total_in": self.total_in,
            "total_out": self.total_out,
            "final_value": self.final_value,
            "variance_value": self.variance_value,
            "out_breakdown": {
                "sales": self.movements.sales_out,
                "waste": self.movements.waste_out,
                "personal_meals": self.movements.personal_meals_out,
                "dish_sales": self.movements.dish_sales_out,
            },
        }


@dataclass
class ReconciliationReport:
    """Summary of an inventory reconciliation across all products."""

    period_start: date | None
    period_end: date | None
    items: list[InventoryReconciliation] = field(default_factory=list)

    @property
    def total_final_value(self) -> float:
        return sum(i.final_value for i in self.items)

    @property
    def total_variance_value(self) -> float:
        return sum(i.variance_value for i in self.items)

    @property
    def discrepancies(self) -> list[InventoryReconciliation]:
        """Products whose counted stock does not match the ledger."""
        return [i for i in self.items if not i.is_balanced]

    @property
    def uncounted(self) -> list[InventoryReconciliation]:
        return [i for i in self.items if not i.has_count]

    def to_dict(self) -> dict[str, Any]:
        return {
            "period_start": self.period_start.isoformat() if self.period_start else None,
            "period_end": self.period_end.isoformat() if self.period_end else None,
            "total_final_value": self.total_final_value,
            "total_variance_value": self.total_variance_value,
            "items": [i.to_dict() for i in self.items],
        }


@dataclass
class FoodCostMetrics:
    """Real vs theoretical food cost for a calendar month.

    A 0% figure with no sales means "no data" for the month.
    """

    year: int
    month: int
    total_food_sales: float
    total_cost_of_sales: float
    total_food_cost: float
    food_cost_percentage: float
    theoretical_food_cost_percentage: float
    initial_value: float = 0.0
    in_value: float = 0.0
    final_value: float = 0.0
    calculated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def real_vs_theoretical_diff(self) -> float:
        """Positive when real consumption exceeds what recipes predict."""
        return self.food_cost_percentage - self.theoretical_food_cost_percentage

    @property
    def has_sales(self) -> bool:
        return self.total_food_sales > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "total_food_sales": self.total_food_sales,
            "total_food_cost": self.total_food_cost,
            "food_cost_percentage": self.food_cost_percentage,
            "theoretical_food_cost_percentage": self.theoretical_food_cost_percentage,
            "real_vs_theoretical_diff": self.real_vs_theoretical_diff,
            "calculated_at": self.calculated_at.isoformat(),
        }


class ReconciliationEngine:
    """
    Reconcile counted stock with the stock ledgers.

    Example usage:
        engine = ReconciliationEngine(dataset)
        start, end = month_window(2025, 3)
        row = engine.product_variance("mozzarella", start, end)
        print(row.variance, row.variance_value)

        metrics = engine.food_cost_metrics(2025, 3)
        print(f"Real vs theoretical: {metrics.real_vs_theoretical_diff:+.1f} pts")
    """

    def __init__(self, dataset: KitchenDataset) -> None:
        self.dataset = dataset
        self.aggregator = MovementAggregator(dataset)
        self.products = dataset.product_index()
        self.counts = dataset.inventory_index()

    def product_variance(
        self,
        product_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> InventoryReconciliation:
        """Reconcile one product; a product never counted uses zero counts."""
        product = self.products.get(product_id)
        if product is None:
            raise KeyError(f"Product {product_id} not found")

        count = self.counts.get(product_id)
        return InventoryReconciliation(
            product_id=product.id,
            product_name=product.name,
            unit=product.unit.value,
            price_per_unit=product.price_per_unit,
            initial_quantity=count.initial_quantity if count else 0.0,
            final_quantity=count.final_quantity if count else 0.0,
            movements=self.aggregator.aggregate(product_id, start, end),
            has_count=count is not None,
        )

    def reconcile(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> ReconciliationReport:
        """Reconcile every product of the dataset."""
        report = ReconciliationReport(period_start=start, period_end=end)
        for product in self.dataset.products:
            report.items.append(self.product_variance(product.id, start, end))

        logger.info(
            "Reconciled %d products: %d discrepancies, variance value %.2f",
            len(report.items), len(report.discrepancies), report.total_variance_value,
        )
        return report

    def reconcile_month(self, year: int, month: int) -> ReconciliationReport:
        start, end = month_window(year, month)
        return self.reconcile(start, end)

    def food_cost_metrics(self, year: int, month: int) -> FoodCostMetrics:
        """Real and theoretical food cost % for a calendar month.

        Theoretical cost is the nominal cost recorded on the month's sales.
        Real cost is ``initial value + IN value - final value`` across the
        whole inventory, with counts valued at each product's current price.
        Only the latest count row per product is used.
        """
        start, end = month_window(year, month)
        monthly_sales = [
            s for s in self.dataset.sales if start <= s.sale_date <= end
        ]

        total_food_sales = sum(s.total_revenue or 0.0 for s in monthly_sales)
        total_cost_of_sales = sum(s.total_cost or 0.0 for s in monthly_sales)

        initial_value = 0.0
        final_value = 0.0
        for count in self.counts.values():
            product = self.products.get(count.product_id)
            if product is None:
                logger.warning(
                    "Inventory count references missing product %s; counted as zero",
                    count.product_id,
                )
                continue
            initial_value += count.initial_quantity * product.price_per_unit
            final_value += count.final_quantity * product.price_per_unit

        in_value = self.aggregator.total_in_value(start, end)
        total_food_cost = initial_value + in_value - final_value

        metrics = FoodCostMetrics(
            year=year,
            month=month,
            total_food_sales=total_food_sales,
            total_cost_of_sales=total_cost_of_sales,
            total_food_cost=total_food_cost,
            food_cost_percentage=food_cost_percentage(total_food_cost, total_food_sales),
            theoretical_food_cost_percentage=food_cost_percentage(
                total_cost_of_sales, total_food_sales
            ),
            initial_value=initial_value,
            in_value=in_value,
            final_value=final_value,
        )
        if not metrics.has_sales:
            logger.info("No sales recorded for %04d-%02d; food cost reported as 0%%", year, month)
        return metrics
