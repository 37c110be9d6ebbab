"""Tests for the composition resolver."""

import pytest

from kitchenledger.analyzers.composition import (
    CompositionResolver,
    dish_real_food_cost,
    product_line,
    real_recipe_total_cost,
    recipe_ingredient,
    recipe_line,
    scale_recipe_to_yield,
)
from kitchenledger.analyzers.cost_model import CostingError
from kitchenledger.models.catalog import (
    Dish,
    Product,
    ProductLine,
    Recipe,
    RecipeIngredient,
    RecipeLine,
)
from kitchenledger.models.dataset import KitchenDataset

FLOUR_REAL = 1.20 / 0.98
GUANCIALE_REAL = 20.0 / 0.9
DOUGH_REAL = (FLOUR_REAL * 0.5 + 0.30 * 4) / 1.2


@pytest.fixture
def resolver(kitchen_dataset: KitchenDataset) -> CompositionResolver:
    return CompositionResolver(kitchen_dataset)


class TestRealRecipeTotalCost:
    def test_recipe_level_adjustment(self, kitchen_dataset: KitchenDataset, pasta_dough: Recipe) -> None:
        cost = real_recipe_total_cost(pasta_dough, kitchen_dataset.product_index())
        assert cost == pytest.approx(DOUGH_REAL)

    def test_ingredient_adjustment_applies_before_recipe(self) -> None:
        products = {"pork": Product(id="pork", code="P", name="Pork", price_per_unit=10.0)}
        recipe = Recipe(
            id="roast",
            name="Roast",
            weight_adjustment=25,
            ingredients=[RecipeIngredient(product_id="pork", quantity=1, cost=10.0, weight_adjustment=-50)],
        )
        # 10 / 0.5 for the ingredient, then / 1.25 for the batch
        assert real_recipe_total_cost(recipe, products) == pytest.approx(16.0)

    def test_missing_product_counts_as_zero(self, kitchen_dataset: KitchenDataset) -> None:
        recipe = Recipe(
            id="r",
            name="R",
            ingredients=[
                RecipeIngredient(product_id="eggs", quantity=2),
                RecipeIngredient(product_id="truffle", quantity=1),
            ],
        )
        assert real_recipe_total_cost(recipe, kitchen_dataset.product_index()) == pytest.approx(0.6)

    def test_empty_recipe(self) -> None:
        assert real_recipe_total_cost(Recipe(id="r", name="R", weight_adjustment=-30), {}) == 0.0


class TestDishRealFoodCost:
    def test_mixed_lines(self, kitchen_dataset: KitchenDataset, carbonara: Dish) -> None:
        cost = dish_real_food_cost(
            carbonara, kitchen_dataset.product_index(), kitchen_dataset.recipe_index()
        )
        expected = GUANCIALE_REAL * 0.1 + FLOUR_REAL * 0.1 + DOUGH_REAL * 0.2
        assert cost == pytest.approx(expected)

    def test_real_cost_differs_from_nominal(self, resolver: CompositionResolver, carbonara: Dish) -> None:
        assert resolver.dish_real_food_cost("carbonara") != pytest.approx(carbonara.total_cost)

    def test_missing_recipe_counts_as_zero(self, kitchen_dataset: KitchenDataset) -> None:
        dish = Dish(
            id="d",
            name="D",
            ingredients=[
                RecipeLine(recipe_id="gone", quantity=1),
                ProductLine(product_id="eggs", quantity=2),
            ],
        )
        cost = dish_real_food_cost(dish, kitchen_dataset.product_index(), kitchen_dataset.recipe_index())
        assert cost == pytest.approx(0.6)

    def test_lines_parse_from_tagged_dicts(self) -> None:
        dish = Dish.model_validate({
            "id": "d",
            "name": "D",
            "ingredients": [
                {"type": "product", "product_id": "eggs", "quantity": 1},
                {"type": "recipe", "recipe_id": "pasta_dough", "quantity": 0.2},
            ],
        })
        assert isinstance(dish.ingredients[0], ProductLine)
        assert isinstance(dish.ingredients[1], RecipeLine)


class TestScaleRecipe:
    def test_raw_and_finished_quantities(self, pasta_dough: Recipe) -> None:
        scaled = scale_recipe_to_yield(pasta_dough, 6)
        flour, eggs = scaled.ingredients

        # +20% yield: 6 finished units need 5 batches of raw product
        assert flour.raw_quantity == pytest.approx(2.5)
        assert flour.finished_quantity == pytest.approx(3.0)
        assert eggs.raw_quantity == pytest.approx(20.0)
        assert eggs.finished_quantity == pytest.approx(24.0)
        assert scaled.total_cost == pytest.approx(9.0)
        assert scaled.total_raw_quantity == pytest.approx(22.5)
        assert flour.has_weight_adjustment is True

    def test_weight_loss_needs_more_raw(self) -> None:
        recipe = Recipe(
            id="ragu",
            name="Ragu",
            weight_adjustment=-50,
            ingredients=[RecipeIngredient(product_id="beef", quantity=1, cost=8.0)],
        )
        scaled = scale_recipe_to_yield(recipe, 5)
        assert scaled.ingredients[0].raw_quantity == pytest.approx(10.0)
        assert scaled.ingredients[0].finished_quantity == pytest.approx(5.0)
        assert scaled.total_cost == pytest.approx(80.0)

    @pytest.mark.parametrize("target", [0, -2])
    def test_non_positive_target_rejected(self, pasta_dough: Recipe, target: float) -> None:
        with pytest.raises(CostingError):
            scale_recipe_to_yield(pasta_dough, target)

    def test_missing_products_dropped_with_index(self, pasta_dough: Recipe, flour: Product) -> None:
        scaled = scale_recipe_to_yield(pasta_dough, 1, {"flour": flour})
        assert [i.product_id for i in scaled.ingredients] == ["flour"]
        assert scaled.ingredients[0].product_name == "Flour 00"

    def test_resolver_unknown_recipe(self, resolver: CompositionResolver) -> None:
        with pytest.raises(KeyError):
            resolver.scale_recipe("nope", 2)


class TestSnapshots:
    def test_product_line_snapshot(self, flour: Product) -> None:
        line = product_line(flour, 0.25)
        assert line.type == "product"
        assert line.cost == pytest.approx(0.30)

    def test_recipe_line_snapshot(self, pasta_dough: Recipe) -> None:
        assert recipe_line(pasta_dough, 0.5).cost == pytest.approx(0.9)

    def test_snapshot_survives_price_change(self, flour: Product) -> None:
        ingredient = recipe_ingredient(flour, 2, weight_adjustment=-10)
        flour.price_per_unit = 5.0
        assert ingredient.cost == pytest.approx(2.40)
        assert ingredient.weight_adjustment == -10


class TestCompositionResolver:
    def test_suggested_price(self, resolver: CompositionResolver) -> None:
        real = resolver.dish_real_food_cost("carbonara")
        assert resolver.dish_suggested_price("carbonara") == pytest.approx(real / 0.30)
        assert resolver.dish_suggested_price("carbonara", 25) == pytest.approx(real / 0.25)

    def test_unknown_dish(self, resolver: CompositionResolver) -> None:
        with pytest.raises(KeyError):
            resolver.dish_real_food_cost("ghost")

    def test_analyze_dish(self, resolver: CompositionResolver) -> None:
        analysis = resolver.analyze_dish("carbonara")

        assert analysis.net_price == pytest.approx(12.0)
        assert analysis.nominal_food_cost_pct == pytest.approx(2.48 / 12.0 * 100)
        assert analysis.real_food_cost_pct == pytest.approx(analysis.real_cost / 12.0 * 100)
        assert analysis.suggested_gross_price == pytest.approx(analysis.suggested_net_price * 1.1)
        assert analysis.adjustment_overhead == pytest.approx(analysis.real_cost - 2.48)
        assert analysis.is_priced
        assert analysis.to_dict()["dish_id"] == "carbonara"

    def test_analyze_all_sorted(self, resolver: CompositionResolver) -> None:
        analyses = resolver.analyze_all_dishes()
        assert {a.dish_id for a in analyses} == {"carbonara", "bruschetta"}
        pcts = [a.real_food_cost_pct for a in analyses]
        assert pcts == sorted(pcts, reverse=True)

    def test_configured_target(self, kitchen_dataset: KitchenDataset) -> None:
        resolver = CompositionResolver(kitchen_dataset, target_food_cost_pct=20, vat_rate=0.22)
        analysis = resolver.analyze_dish("bruschetta")
        assert analysis.target_food_cost_pct == 20
        assert analysis.net_price == pytest.approx(5.50 / 1.22)

    def test_dish_vat_overrides_configured_rate(self, kitchen_dataset: KitchenDataset) -> None:
        kitchen_dataset.dishes[1].vat_rate = 0.04
        analysis = CompositionResolver(kitchen_dataset, vat_rate=0.22).analyze_dish("bruschetta")
        assert analysis.net_price == pytest.approx(5.50 / 1.04)
        assert analysis.suggested_gross_price == pytest.approx(analysis.suggested_net_price * 1.04)

    def test_zero_target_rejected(self, resolver: CompositionResolver) -> None:
        with pytest.raises(CostingError):
            resolver.dish_suggested_price("carbonara", 0)
        with pytest.raises(CostingError):
            resolver.analyze_dish("carbonara", 0)
        with pytest.raises(CostingError):
            resolver.analyze_all_dishes(0)
