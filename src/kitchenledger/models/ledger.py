"""
Ledger models — stock movements, waste, staff meals, sales, counts, orders.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class MovementType(str, Enum):
    """Direction of a stock movement."""

    IN = "in"
    OUT = "out"


class MovementSource(str, Enum):
    """What posted a stock movement."""

    ORDER = "order"
    SALE = "sale"
    WASTE = "waste"
    PERSONAL_MEAL = "personal_meal"
    ADJUSTMENT = "adjustment"


class StockMovement(BaseModel):
    """A single append-only stock ledger row."""

    id: str
    product_id: str
    movement_type: MovementType
    quantity: float = Field(ge=0.0)
    unit_price: float | None = Field(default=None, ge=0.0)
    total_cost: float | None = Field(default=None, ge=0.0)
    source: MovementSource
    source_id: str | None = None
    movement_date: date
    notes: str | None = None

    @property
    def is_in(self) -> bool:
        return self.movement_type == MovementType.IN

    @property
    def is_out(self) -> bool:
        return self.movement_type == MovementType.OUT


class Waste(BaseModel):
    """One discard event for a product."""

    id: str
    product_id: str
    quantity: float = Field(ge=0.0)
    cost: float = Field(default=0.0, ge=0.0)
    date: date
    notes: str | None = None


class PersonalMeal(BaseModel):
    """Staff consumption of a finished dish."""

    id: str
    dish_id: str
    quantity: float = Field(default=1.0, ge=0.0)
    cost: float = Field(default=0.0, ge=0.0)
    date: date
    notes: str | None = None


class Sale(BaseModel):
    """Point-of-sale row: the source of truth for dishes sold."""

    id: str
    dish_id: str
    dish_name: str = ""
    quantity_sold: float = Field(ge=0.0)
    unit_cost: float = Field(default=0.0, ge=0.0)
    unit_revenue: float = Field(default=0.0, ge=0.0)
    total_cost: float | None = Field(default=None, ge=0.0)
    total_revenue: float | None = Field(default=None, ge=0.0)
    sale_date: date
    notes: str | None = None

    @model_validator(mode="after")
    def _derive_totals(self) -> Sale:
        if self.total_cost is None:
            self.total_cost = self.unit_cost * self.quantity_sold
        if self.total_revenue is None:
            self.total_revenue = self.unit_revenue * self.quantity_sold
        return self


class EditableInventory(BaseModel):
    """Manually counted initial/final quantities for one product.

    There is a single row per product and it is not keyed by period: it holds
    the latest count the operator entered.
    """

    id: str
    product_id: str
    initial_quantity: float = Field(default=0.0, ge=0.0)
    final_quantity: float = Field(default=0.0, ge=0.0)
    notes: str | None = None


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    product_id: str
    quantity: float = Field(ge=0.0)
    unit_price: float = Field(default=0.0, ge=0.0)
    total_price: float | None = Field(default=None, ge=0.0)

    @model_validator(mode="after")
    def _derive_total(self) -> OrderItem:
        if self.total_price is None:
            self.total_price = self.unit_price * self.quantity
        return self


class Order(BaseModel):
    """A supplier order; confirming it receives the goods into stock."""

    id: str
    supplier: str
    order_date: date
    items: list[OrderItem] = Field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    operator_name: str | None = None
    notes: str | None = None

    @property
    def total_amount(self) -> float:
        return sum(item.total_price or 0.0 for item in self.items)
