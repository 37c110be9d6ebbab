"""
Kitchen dataset — everything a connector produces and the analyzers consume.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from kitchenledger.models.catalog import Dish, Product, Recipe
from kitchenledger.models.ledger import (
    EditableInventory,
    Order,
    PersonalMeal,
    Sale,
    StockMovement,
    Waste,
)


class KitchenDataset(BaseModel):
    """Complete set of catalog and ledger records for analysis."""

    products: list[Product] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)
    dishes: list[Dish] = Field(default_factory=list)
    stock_movements: list[StockMovement] = Field(default_factory=list)
    waste: list[Waste] = Field(default_factory=list)
    personal_meals: list[PersonalMeal] = Field(default_factory=list)
    sales: list[Sale] = Field(default_factory=list)
    editable_inventory: list[EditableInventory] = Field(default_factory=list)
    orders: list[Order] = Field(default_factory=list)
    source: str = "unknown"
    metadata: dict[str, Any] = Field(default_factory=dict)

    def product_index(self) -> dict[str, Product]:
        return {p.id: p for p in self.products}

    def recipe_index(self) -> dict[str, Recipe]:
        return {r.id: r for r in self.recipes}

    def dish_index(self) -> dict[str, Dish]:
        return {d.id: d for d in self.dishes}

    def inventory_index(self) -> dict[str, EditableInventory]:
        """Counts keyed by product id; a later row for the same product wins."""
        return {row.product_id: row for row in self.editable_inventory}

    @property
    def period_start(self) -> date | None:
        dates = self._ledger_dates()
        return min(dates) if dates else None

    @property
    def period_end(self) -> date | None:
        dates = self._ledger_dates()
        return max(dates) if dates else None

    def _ledger_dates(self) -> list[date]:
        return (
            [m.movement_date for m in self.stock_movements]
            + [w.date for w in self.waste]
            + [m.date for m in self.personal_meals]
            + [s.sale_date for s in self.sales]
        )
