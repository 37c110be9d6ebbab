"""
Composition Resolver — real costs across products → recipes → dishes.

Restaurant costing module for:
- Real recipe cost with ingredient- and batch-level yield adjustments
- Real dish food cost from mixed product/recipe bills of materials
- Suggested menu pricing at a target food cost %
- Scaling a recipe to a finished yield (raw-to-buy vs finished quantities)
- Nominal cost snapshots for new recipe/dish lines
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from kitchenledger.analyzers.cost_model import (
    DEFAULT_TARGET_FOOD_COST_PCT,
    DEFAULT_VAT_RATE,
    CostingError,
    food_cost_percentage,
    gross_price,
    net_price,
    real_unit_cost,
    suggested_price,
    yield_multiplier,
)
from kitchenledger.models.catalog import (
    Dish,
    Product,
    ProductLine,
    Recipe,
    RecipeIngredient,
    RecipeLine,
)
from kitchenledger.models.dataset import KitchenDataset

logger = logging.getLogger("kitchenledger.analyzers.composition")


def product_line(product: Product, quantity: float) -> ProductLine:
    """Dish line for a product, snapshotting its current nominal cost."""
    return ProductLine(
        product_id=product.id,
        quantity=quantity,
        cost=quantity * product.price_per_unit,
    )


def recipe_line(recipe: Recipe, quantity: float) -> RecipeLine:
    """Dish line for a recipe, snapshotting the recipe's current nominal total."""
    return RecipeLine(
        recipe_id=recipe.id,
        quantity=quantity,
        cost=quantity * recipe.total_cost,
    )


def recipe_ingredient(
    product: Product,
    quantity: float,
    weight_adjustment: float = 0.0,
) -> RecipeIngredient:
    """Recipe line for a product, snapshotting its current nominal cost."""
    return RecipeIngredient(
        product_id=product.id,
        quantity=quantity,
        cost=quantity * product.price_per_unit,
        weight_adjustment=weight_adjustment,
    )


def real_recipe_total_cost(recipe: Recipe, product_index: dict[str, Product]) -> float:
    """Real cost of a recipe batch.

    Each line is waste-adjusted and then divided by its own yield multiplier
    (when it has one); the recipe-level multiplier is applied to the sum.
    Lines whose product no longer exists contribute nothing.

    Raises:
        CostingError: If any waste or weight adjustment is out of range.
    """
    total = 0.0
    for ingredient in recipe.ingredients:
        product = product_index.get(ingredient.product_id)
        if product is None:
            logger.warning(
                "Recipe %s references missing product %s; counted as zero",
                recipe.id, ingredient.product_id,
            )
            continue
        line_cost = real_unit_cost(product.price_per_unit, product.waste) * ingredient.quantity
        if ingredient.weight_adjustment:
            line_cost /= yield_multiplier(
                ingredient.weight_adjustment, label="Ingredient weight adjustment"
            )
        total += line_cost

    return total / yield_multiplier(recipe.weight_adjustment, label="Recipe weight adjustment")


def dish_real_food_cost(
    dish: Dish,
    product_index: dict[str, Product],
    recipe_index: dict[str, Recipe],
) -> float:
    """Real food cost of one serving of a dish.

    Differs from ``dish.total_cost``, which is the nominal snapshot sum.
    """
    total = 0.0
    for line in dish.ingredients:
        if isinstance(line, ProductLine):
            product = product_index.get(line.product_id)
            if product is None:
                logger.warning(
                    "Dish %s references missing product %s; counted as zero",
                    dish.id, line.product_id,
                )
                continue
            total += real_unit_cost(product.price_per_unit, product.waste) * line.quantity
        elif isinstance(line, RecipeLine):
            recipe = recipe_index.get(line.recipe_id)
            if recipe is None:
                logger.warning(
                    "Dish %s references missing recipe %s; counted as zero",
                    dish.id, line.recipe_id,
                )
                continue
            total += real_recipe_total_cost(recipe, product_index) * line.quantity
        else:
            raise TypeError(f"Unknown dish ingredient type: {type(line).__name__}")
    return total


@dataclass
class ScaledIngredient:
    """One ingredient of a recipe scaled to a target yield."""

    product_id: str
    product_name: str | None
    raw_quantity: float  # what to buy / weigh out before preparation
    finished_quantity: float  # what the ingredient amounts to in the result
    cost: float
    has_weight_adjustment: bool


@dataclass
class ScaledRecipe:
    """A recipe scaled to a target finished quantity."""

    recipe_id: str
    recipe_name: str
    target_quantity: float
    weight_adjustment: float
    ingredients: list[ScaledIngredient] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return sum(i.cost for i in self.ingredients)

    @property
    def total_raw_quantity(self) -> float:
        return sum(i.raw_quantity for i in self.ingredients)


def scale_recipe_to_yield(
    recipe: Recipe,
    target_quantity: float,
    product_index: dict[str, Product] | None = None,
) -> ScaledRecipe:
    """Scale a recipe so that it yields ``target_quantity`` finished units.

    Raw quantities are divided by the yield multiplier (a recipe that loses
    half its weight needs twice the raw product), while finished quantities
    are the plain ``quantity × target``. Both are reported.

    When ``product_index`` is given, lines whose product is missing are
    dropped.

    Raises:
        CostingError: If ``target_quantity <= 0`` or the recipe yield is
            non-positive.
    """
    if target_quantity <= 0:
        raise CostingError(f"Target quantity must be positive (got {target_quantity})")

    raw_multiplier = target_quantity / yield_multiplier(recipe.weight_adjustment)
    scaled = ScaledRecipe(
        recipe_id=recipe.id,
        recipe_name=recipe.name,
        target_quantity=target_quantity,
        weight_adjustment=recipe.weight_adjustment,
    )

    for ingredient in recipe.ingredients:
        product_name = None
        if product_index is not None:
            product = product_index.get(ingredient.product_id)
            if product is None:
                logger.warning(
                    "Skipping missing product %s while scaling recipe %s",
                    ingredient.product_id, recipe.id,
                )
                continue
            product_name = product.name

        scaled.ingredients.append(ScaledIngredient(
            product_id=ingredient.product_id,
            product_name=product_name,
            raw_quantity=ingredient.quantity * raw_multiplier,
            finished_quantity=ingredient.quantity * target_quantity,
            cost=ingredient.cost * raw_multiplier,
            has_weight_adjustment=recipe.weight_adjustment != 0,
        ))

    return scaled


@dataclass
class DishCostAnalysis:
    """Nominal vs real cost breakdown for a dish."""

    dish_id: str
    dish_name: str
    nominal_cost: float
    real_cost: float
    selling_price: float
    net_price: float
    nominal_food_cost_pct: float
    real_food_cost_pct: float
    suggested_net_price: float
    suggested_gross_price: float
    target_food_cost_pct: float

    @property
    def adjustment_overhead(self) -> float:
        """Extra cost introduced by waste and yield adjustments."""
        return self.real_cost - self.nominal_cost

    @property
    def is_priced(self) -> bool:
        return self.net_price > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "dish_id": self.dish_id,
            "dish_name": self.dish_name,
            "nominal_cost": self.nominal_cost,
            "real_cost": self.real_cost,
            "selling_price": self.selling_price,
            "net_price": self.net_price,
            "nominal_food_cost_pct": self.nominal_food_cost_pct,
            "real_food_cost_pct": self.real_food_cost_pct,
            "suggested_net_price": self.suggested_net_price,
            "suggested_gross_price": self.suggested_gross_price,
            "target_food_cost_pct": self.target_food_cost_pct,
        }


class CompositionResolver:
    """Resolve real costs for the recipes and dishes of a dataset.

    Usage::

        resolver = CompositionResolver(dataset)
        real = resolver.dish_real_food_cost("carbonara")
        price = resolver.dish_suggested_price("carbonara", target_food_cost_pct=28)
        scaled = resolver.scale_recipe("ragu", target_quantity=5)

    Index maps are built once, when the resolver is created.
    """

    def __init__(
        self,
        dataset: KitchenDataset,
        target_food_cost_pct: float = DEFAULT_TARGET_FOOD_COST_PCT,
        vat_rate: float = DEFAULT_VAT_RATE,
    ) -> None:
        self.dataset = dataset
        self.target_food_cost_pct = target_food_cost_pct
        self.vat_rate = vat_rate
        self.products = dataset.product_index()
        self.recipes = dataset.recipe_index()
        self.dishes = dataset.dish_index()

    def _recipe(self, recipe_id: str) -> Recipe:
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            raise KeyError(f"Recipe {recipe_id} not found")
        return recipe

    def _dish(self, dish_id: str) -> Dish:
        dish = self.dishes.get(dish_id)
        if dish is None:
            raise KeyError(f"Dish {dish_id} not found")
        return dish

    def _target(self, target_food_cost_pct: float | None) -> float:
        # Only None falls back; an explicit 0 must still be rejected.
        if target_food_cost_pct is None:
            return self.target_food_cost_pct
        return target_food_cost_pct

    def real_recipe_total_cost(self, recipe_id: str) -> float:
        return real_recipe_total_cost(self._recipe(recipe_id), self.products)

    def dish_real_food_cost(self, dish_id: str) -> float:
        return dish_real_food_cost(self._dish(dish_id), self.products, self.recipes)

    def dish_suggested_price(
        self,
        dish_id: str,
        target_food_cost_pct: float | None = None,
    ) -> float:
        """Suggested net price for a dish from its real food cost."""
        target = self._target(target_food_cost_pct)
        return suggested_price(self.dish_real_food_cost(dish_id), target)

    def scale_recipe(self, recipe_id: str, target_quantity: float) -> ScaledRecipe:
        return scale_recipe_to_yield(self._recipe(recipe_id), target_quantity, self.products)

    def analyze_dish(
        self,
        dish_id: str,
        target_food_cost_pct: float | None = None,
    ) -> DishCostAnalysis:
        """Nominal and real cost analysis for one dish."""
        dish = self._dish(dish_id)
        target = self._target(target_food_cost_pct)
        real_cost = dish_real_food_cost(dish, self.products, self.recipes)
        vat = dish.effective_vat_rate(self.vat_rate)
        net = net_price(dish.selling_price, vat)
        suggested = suggested_price(real_cost, target)

        return DishCostAnalysis(
            dish_id=dish.id,
            dish_name=dish.name,
            nominal_cost=dish.total_cost,
            real_cost=real_cost,
            selling_price=dish.selling_price,
            net_price=net,
            nominal_food_cost_pct=food_cost_percentage(dish.total_cost, net),
            real_food_cost_pct=food_cost_percentage(real_cost, net),
            suggested_net_price=suggested,
            suggested_gross_price=gross_price(suggested, vat),
            target_food_cost_pct=target,
        )

    def analyze_all_dishes(
        self,
        target_food_cost_pct: float | None = None,
    ) -> list[DishCostAnalysis]:
        """Analyze every dish, highest real food cost % first."""
        analyses = [
            self.analyze_dish(dish_id, target_food_cost_pct)
            for dish_id in self.dishes
        ]
        return sorted(analyses, key=lambda a: a.real_food_cost_pct, reverse=True)
