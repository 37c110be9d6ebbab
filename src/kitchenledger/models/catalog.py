"""
Catalog models — products, recipes, dishes.

Products are purchased goods, recipes are costing templates built from
products, and dishes are menu items built from products and recipes.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from kitchenledger.analyzers.cost_model import (
    DEFAULT_VAT_RATE,
    food_cost_percentage,
    net_price,
    real_recipe_unit_cost,
    real_unit_cost,
)


class Unit(str, Enum):
    """Units a product is purchased and stocked in."""

    KILOGRAM = "kg"  # mass
    LITER = "l"  # volume
    PIECE = "pezzo"  # count


class Product(BaseModel):
    """A purchased product / raw ingredient."""

    id: str
    code: str
    name: str
    quantity: float = Field(default=0.0, ge=0.0, description="Quantity on hand (informational)")
    unit: Unit = Unit.KILOGRAM
    price_per_unit: float = Field(ge=0.0, description="Gross purchase price per unit")
    waste: float = Field(default=0.0, ge=0.0, lt=100.0, description="Unusable share of purchased quantity, %")
    supplier: str | None = None
    notes: str | None = None

    @property
    def real_unit_cost(self) -> float:
        """Cost per usable unit once waste is removed."""
        return real_unit_cost(self.price_per_unit, self.waste)

    @property
    def effective_price_per_unit(self) -> float:
        return self.real_unit_cost


class RecipeIngredient(BaseModel):
    """A product line inside a recipe."""

    product_id: str
    quantity: float = Field(ge=0.0)
    cost: float = Field(default=0.0, ge=0.0, description="Nominal cost snapshot taken when the line was added")
    weight_adjustment: float = Field(default=0.0, gt=-100.0, description="Yield change of this ingredient, %")


class Recipe(BaseModel):
    """A costing template: no stock of its own."""

    id: str
    name: str
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    weight_adjustment: float = Field(default=0.0, gt=-100.0, description="Net yield change of the batch, %")
    total_cost: float = Field(default=0.0, ge=0.0, description="Cached nominal sum of ingredient costs")

    @property
    def nominal_cost(self) -> float:
        return sum(i.cost for i in self.ingredients)

    @property
    def real_unit_cost(self) -> float:
        """Nominal cost per finished unit after the recipe-level yield change."""
        return real_recipe_unit_cost(self.total_cost, self.weight_adjustment)

    def add_ingredient(self, ingredient: RecipeIngredient) -> None:
        """Append an ingredient line and refresh the cached total."""
        self.ingredients.append(ingredient)
        self.total_cost = self.nominal_cost

    def remove_ingredient(self, index: int) -> RecipeIngredient:
        """Remove the ingredient line at ``index`` and refresh the cached total."""
        removed = self.ingredients.pop(index)
        self.total_cost = self.nominal_cost
        return removed


class ProductLine(BaseModel):
    """Dish ingredient referencing a product directly."""

    type: Literal["product"] = "product"
    product_id: str
    quantity: float = Field(ge=0.0)
    cost: float = Field(default=0.0, ge=0.0)


class RecipeLine(BaseModel):
    """Dish ingredient referencing a recipe (per finished unit)."""

    type: Literal["recipe"] = "recipe"
    recipe_id: str
    quantity: float = Field(ge=0.0)
    cost: float = Field(default=0.0, ge=0.0)


DishIngredient = Annotated[Union[ProductLine, RecipeLine], Field(discriminator="type")]


class Dish(BaseModel):
    """A menu item."""

    id: str
    name: str
    ingredients: list[DishIngredient] = Field(default_factory=list)
    total_cost: float = Field(default=0.0, ge=0.0, description="Nominal sum of ingredient snapshots")
    selling_price: float = Field(default=0.0, ge=0.0, description="Gross selling price, VAT included")
    vat_rate: float | None = Field(
        default=None, ge=0.0, description="Dish-specific VAT; None uses the configured rate"
    )

    @property
    def net_price(self) -> float:
        """Net price at the dish's own VAT rate, or the default rate when unset."""
        return net_price(self.selling_price, self.effective_vat_rate(DEFAULT_VAT_RATE))

    def effective_vat_rate(self, fallback: float) -> float:
        return fallback if self.vat_rate is None else self.vat_rate

    @property
    def food_cost(self) -> float:
        """Nominal cost as a percentage of the net price (0 when unpriced)."""
        return food_cost_percentage(self.total_cost, self.net_price)

    def add_ingredient(self, line: ProductLine | RecipeLine) -> None:
        self.ingredients.append(line)
        self.total_cost = sum(i.cost for i in self.ingredients)

    def remove_ingredient(self, index: int) -> ProductLine | RecipeLine:
        removed = self.ingredients.pop(index)
        self.total_cost = sum(i.cost for i in self.ingredients)
        return removed

    def product_lines(self, product_id: str) -> list[ProductLine]:
        """Direct product lines referencing ``product_id``."""
        return [
            line for line in self.ingredients
            if isinstance(line, ProductLine) and line.product_id == product_id
        ]
