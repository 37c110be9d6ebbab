"""
Cost Model — real unit costs from waste and yield adjustments.

Pure functions over primitive values:
- Product real cost per usable unit (waste-adjusted)
- Recipe real cost per finished unit (weight-adjusted)
- Suggested selling price at a target food cost %
- Food cost percentage and VAT conversions

Impossible cost bases raise :class:`CostingError`; a missing price yields a
0% food cost, which callers read as "unknown" rather than "free".
"""

from __future__ import annotations

DEFAULT_TARGET_FOOD_COST_PCT = 30.0
DEFAULT_VAT_RATE = 0.10


class CostingError(ValueError):
    """Raised when an input describes a logically impossible cost basis."""


def yield_multiplier(weight_adjustment: float, label: str = "Weight adjustment") -> float:
    """Return ``1 + weight_adjustment/100``, rejecting non-positive yields."""
    if weight_adjustment <= -100:
        raise CostingError(
            f"{label} cannot be -100% or lower (got {weight_adjustment}%)"
        )
    return 1 + weight_adjustment / 100


def real_unit_cost(price_per_unit: float, waste: float) -> float:
    """Cost per usable unit of a product.

    A 5% waste leaves 95% usable, so every usable unit carries
    ``price / 0.95``.

    Args:
        price_per_unit: Gross purchase price per unit.
        waste: Unusable share of the purchased quantity, in percent.

    Raises:
        CostingError: If ``waste`` is outside ``[0, 100)``.
    """
    if waste >= 100:
        raise CostingError(f"Waste must be below 100% (got {waste}%)")
    if waste < 0:
        raise CostingError(f"Waste cannot be negative (got {waste}%)")
    usable_fraction = (100 - waste) / 100
    return price_per_unit / usable_fraction


def real_recipe_unit_cost(total_cost: float, weight_adjustment: float) -> float:
    """Cost per finished unit of a recipe.

    -50% means half the raw weight survives preparation, doubling the cost
    per finished unit; +70% means the batch gains weight and the cost per
    unit drops.

    Raises:
        CostingError: If ``weight_adjustment <= -100``.
    """
    return total_cost / yield_multiplier(weight_adjustment)


def suggested_price(
    real_cost: float,
    target_food_cost_pct: float = DEFAULT_TARGET_FOOD_COST_PCT,
) -> float:
    """Net selling price that puts ``real_cost`` at the target food cost %."""
    if target_food_cost_pct <= 0 or target_food_cost_pct >= 100:
        raise CostingError(
            f"Target food cost percentage must be between 0 and 100 (got {target_food_cost_pct})"
        )
    return real_cost / (target_food_cost_pct / 100)


def recipe_suggested_price(
    total_cost: float,
    weight_adjustment: float,
    target_food_cost_pct: float = DEFAULT_TARGET_FOOD_COST_PCT,
) -> float:
    """Suggested price per finished unit of a recipe."""
    real_cost = real_recipe_unit_cost(total_cost, weight_adjustment)
    return suggested_price(real_cost, target_food_cost_pct)


def food_cost_percentage(cost: float, net_price: float) -> float:
    """Cost as a percentage of the net price; 0 when the price is not positive."""
    if net_price <= 0:
        return 0.0
    return cost / net_price * 100


def net_price(gross_price: float, vat_rate: float = DEFAULT_VAT_RATE) -> float:
    """Strip VAT from a VAT-inclusive price."""
    return gross_price / (1 + vat_rate)


def gross_price(net: float, vat_rate: float = DEFAULT_VAT_RATE) -> float:
    """Add VAT to a net price."""
    return net * (1 + vat_rate)


def format_price(price: float, symbol: str = "€") -> str:
    return f"{symbol}{price:,.2f}"
