"""
KitchenLedger Analyzers — pure costing and reconciliation engines.

These modules only read the records they are given; nothing here talks to
storage or the network.
"""

# cost_model has no model imports and must load first.
from kitchenledger.analyzers.cost_model import (
    DEFAULT_TARGET_FOOD_COST_PCT,
    DEFAULT_VAT_RATE,
    CostingError,
    food_cost_percentage,
    format_price,
    gross_price,
    net_price,
    real_recipe_unit_cost,
    real_unit_cost,
    recipe_suggested_price,
    suggested_price,
)
from kitchenledger.analyzers.composition import (
    CompositionResolver,
    DishCostAnalysis,
    ScaledIngredient,
    ScaledRecipe,
    dish_real_food_cost,
    product_line,
    real_recipe_total_cost,
    recipe_ingredient,
    recipe_line,
    scale_recipe_to_yield,
)
from kitchenledger.analyzers.movements import (
    MovementAggregator,
    MovementSummary,
    month_window,
)
from kitchenledger.analyzers.reconciliation import (
    FoodCostMetrics,
    InventoryReconciliation,
    ReconciliationEngine,
    ReconciliationReport,
    stock_variance,
)

__all__ = [
    # Cost model
    "DEFAULT_TARGET_FOOD_COST_PCT",
    "DEFAULT_VAT_RATE",
    "CostingError",
    "real_unit_cost",
    "real_recipe_unit_cost",
    "suggested_price",
    "recipe_suggested_price",
    "food_cost_percentage",
    "net_price",
    "gross_price",
    "format_price",
    # Composition
    "CompositionResolver",
    "DishCostAnalysis",
    "ScaledIngredient",
    "ScaledRecipe",
    "real_recipe_total_cost",
    "dish_real_food_cost",
    "scale_recipe_to_yield",
    "product_line",
    "recipe_line",
    "recipe_ingredient",
    # Movements
    "MovementAggregator",
    "MovementSummary",
    "month_window",
    # Reconciliation
    "ReconciliationEngine",
    "ReconciliationReport",
    "InventoryReconciliation",
    "FoodCostMetrics",
    "stock_variance",
]
