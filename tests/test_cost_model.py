"""Tests for the cost model primitives."""

import math

import pytest
from pydantic import ValidationError

from kitchenledger.analyzers.cost_model import (
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
from kitchenledger.models.catalog import Dish, Product, Recipe, RecipeIngredient


class TestRealUnitCost:
    def test_waste_scenario(self) -> None:
        assert real_unit_cost(1.20, 2) == pytest.approx(1.2245, abs=1e-4)

    def test_zero_waste_is_identity(self) -> None:
        assert real_unit_cost(4.50, 0) == 4.50

    @pytest.mark.parametrize("price,waste", [(1.0, 0.5), (3.2, 10), (0.8, 50), (12.0, 99)])
    def test_never_below_price(self, price: float, waste: float) -> None:
        assert real_unit_cost(price, waste) > price

    def test_near_total_waste_is_finite(self) -> None:
        cost = real_unit_cost(1.0, 99.999)
        assert math.isfinite(cost)
        assert cost > 10_000

    def test_total_waste_rejected(self) -> None:
        with pytest.raises(CostingError, match="below 100%"):
            real_unit_cost(1.0, 100)

    def test_negative_waste_rejected(self) -> None:
        with pytest.raises(CostingError):
            real_unit_cost(1.0, -1)

    def test_costing_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            real_unit_cost(1.0, 150)


class TestRealRecipeUnitCost:
    def test_weight_loss_scenario(self) -> None:
        assert real_recipe_unit_cost(6.40, -50) == pytest.approx(12.80)

    def test_weight_gain_lowers_cost(self) -> None:
        assert real_recipe_unit_cost(10.0, 70) < 10.0

    def test_no_adjustment(self) -> None:
        assert real_recipe_unit_cost(10.0, 0) == 10.0

    @pytest.mark.parametrize("adjustment", [-100, -100.5, -250])
    def test_non_positive_yield_rejected(self, adjustment: float) -> None:
        with pytest.raises(CostingError, match="-100% or lower"):
            real_recipe_unit_cost(10.0, adjustment)


class TestSuggestedPrice:
    def test_default_target(self) -> None:
        assert suggested_price(3.0) == pytest.approx(10.0)

    def test_custom_target(self) -> None:
        assert suggested_price(2.5, 25) == pytest.approx(10.0)

    @pytest.mark.parametrize("target", [0, -5, 100, 120])
    def test_target_out_of_range(self, target: float) -> None:
        with pytest.raises(CostingError):
            suggested_price(3.0, target)

    def test_recipe_suggested_price(self) -> None:
        # 6.40 over a -50% yield is 12.80 per finished unit
        assert recipe_suggested_price(6.40, -50, 32) == pytest.approx(40.0)


class TestFoodCostPercentage:
    def test_basic(self) -> None:
        assert food_cost_percentage(3.0, 10.0) == pytest.approx(30.0)

    @pytest.mark.parametrize("price", [0, -1])
    def test_unpriced_returns_zero(self, price: float) -> None:
        assert food_cost_percentage(5.0, price) == 0.0


class TestVat:
    def test_net_price(self) -> None:
        assert net_price(13.20) == pytest.approx(12.0)

    def test_gross_price_inverts_net(self) -> None:
        assert gross_price(net_price(9.90, 0.22), 0.22) == pytest.approx(9.90)

    def test_format_price(self) -> None:
        assert format_price(1234.5) == "€1,234.50"
        assert format_price(3, "$") == "$3.00"


class TestModelBounds:
    def test_product_effective_price(self, flour: Product) -> None:
        assert flour.effective_price_per_unit == pytest.approx(1.20 / 0.98)
        assert flour.real_unit_cost == flour.effective_price_per_unit

    def test_product_rejects_total_waste(self) -> None:
        with pytest.raises(ValidationError):
            Product(id="x", code="X", name="X", price_per_unit=1.0, waste=100)

    def test_product_rejects_negative_price(self) -> None:
        with pytest.raises(ValidationError):
            Product(id="x", code="X", name="X", price_per_unit=-1.0)

    def test_recipe_rejects_total_weight_loss(self) -> None:
        with pytest.raises(ValidationError):
            Recipe(id="r", name="R", weight_adjustment=-100)

    def test_recipe_real_unit_cost(self) -> None:
        recipe = Recipe(id="r", name="R", weight_adjustment=-50, total_cost=6.40)
        assert recipe.real_unit_cost == pytest.approx(12.80)

    def test_recipe_total_follows_ingredients(self) -> None:
        recipe = Recipe(id="r", name="R")
        recipe.add_ingredient(RecipeIngredient(product_id="a", quantity=1, cost=2.0))
        recipe.add_ingredient(RecipeIngredient(product_id="b", quantity=1, cost=3.0))
        assert recipe.total_cost == pytest.approx(5.0)

        recipe.remove_ingredient(0)
        assert recipe.total_cost == pytest.approx(3.0)

    def test_dish_food_cost(self, carbonara: Dish) -> None:
        assert carbonara.net_price == pytest.approx(12.0)
        assert carbonara.food_cost == pytest.approx(2.48 / 12.0 * 100)

    def test_unpriced_dish_food_cost_is_zero(self) -> None:
        assert Dish(id="d", name="D", total_cost=3.0).food_cost == 0.0
