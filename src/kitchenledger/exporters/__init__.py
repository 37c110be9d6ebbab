"""Exporters package — convert results to various output formats."""
from kitchenledger.exporters.markdown import (
    render_dish_costs_markdown,
    render_food_cost_markdown,
    render_inventory_markdown,
)

__all__ = [
    "render_dish_costs_markdown",
    "render_food_cost_markdown",
    "render_inventory_markdown",
]
