"""
In-memory store — an in-process record source with the write paths of the
back office.

Writes compute the same derived fields the back office stores alongside
each record: sale totals, staff meal cost, recipe and dish totals. Editable
inventory counts are upserted per product with last-write-wins semantics and
no locking; concurrent editors of the same product overwrite each other.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any

from kitchenledger.connectors.base import BaseConnector
from kitchenledger.models.catalog import Dish, Product, Recipe
from kitchenledger.models.dataset import KitchenDataset
from kitchenledger.models.ledger import (
    EditableInventory,
    MovementSource,
    MovementType,
    Order,
    OrderStatus,
    PersonalMeal,
    Sale,
    StockMovement,
    Waste,
)

logger = logging.getLogger("kitchenledger.connectors.memory")


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryStore(BaseConnector):
    """Keep kitchen records in memory.

    Usage::

        store = InMemoryStore()
        store.add_product(Product(id="flour", code="F01", name="Flour", price_per_unit=1.2))
        store.upsert_editable_inventory("flour", initial_quantity=25, final_quantity=20)
        dataset = store.snapshot()
    """

    name = "memory"
    description = "In-process record store"

    def __init__(
        self,
        credentials: dict[str, Any] | None = None,
        dataset: KitchenDataset | None = None,
        **options: Any,
    ) -> None:
        super().__init__(credentials, **options)
        seed = dataset or KitchenDataset()
        self.products: dict[str, Product] = seed.product_index()
        self.recipes: dict[str, Recipe] = seed.recipe_index()
        self.dishes: dict[str, Dish] = seed.dish_index()
        self.stock_movements: list[StockMovement] = list(seed.stock_movements)
        self.waste: list[Waste] = list(seed.waste)
        self.personal_meals: list[PersonalMeal] = list(seed.personal_meals)
        self.sales: list[Sale] = list(seed.sales)
        self.editable_inventory: dict[str, EditableInventory] = seed.inventory_index()
        self.orders: dict[str, Order] = {o.id: o for o in seed.orders}

    async def pull(self) -> KitchenDataset:
        return self.snapshot()

    async def validate_credentials(self) -> bool:
        return True

    def snapshot(self) -> KitchenDataset:
        """Copy of the current records as a KitchenDataset."""
        return KitchenDataset(
            products=list(self.products.values()),
            recipes=list(self.recipes.values()),
            dishes=list(self.dishes.values()),
            stock_movements=list(self.stock_movements),
            waste=list(self.waste),
            personal_meals=list(self.personal_meals),
            sales=list(self.sales),
            editable_inventory=list(self.editable_inventory.values()),
            orders=list(self.orders.values()),
            source="memory",
        ).model_copy(deep=True)

    # -- catalog -------------------------------------------------------------

    def add_product(self, product: Product) -> Product:
        """Add or replace a product."""
        self.products[product.id] = product
        return product

    def update_product(self, product_id: str, **changes: Any) -> Product:
        """Update product fields.

        Recipe and dish lines keep the cost snapshot taken when they were
        added; a price change here does not touch them.
        """
        product = self.products.get(product_id)
        if not product:
            raise ValueError(f"Product {product_id} not found")
        updated = Product.model_validate({**product.model_dump(), **changes})
        self.products[product_id] = updated
        return updated

    def delete_product(self, product_id: str) -> bool:
        return self.products.pop(product_id, None) is not None

    def add_recipe(self, recipe: Recipe) -> Recipe:
        """Add or replace a recipe, refreshing its cached nominal total."""
        recipe.total_cost = recipe.nominal_cost
        self.recipes[recipe.id] = recipe
        return recipe

    def delete_recipe(self, recipe_id: str) -> bool:
        return self.recipes.pop(recipe_id, None) is not None

    def add_dish(self, dish: Dish) -> Dish:
        """Add or replace a dish, refreshing its nominal total."""
        dish.total_cost = sum(line.cost for line in dish.ingredients)
        self.dishes[dish.id] = dish
        return dish

    def delete_dish(self, dish_id: str) -> bool:
        """Delete a dish; ledger rows that reference it are left in place."""
        return self.dishes.pop(dish_id, None) is not None

    # -- ledgers -------------------------------------------------------------

    def record_movement(self, movement: StockMovement) -> StockMovement:
        self.stock_movements.append(movement)
        return movement

    def record_waste(self, waste: Waste) -> Waste:
        self.waste.append(waste)
        return waste

    def record_personal_meal(self, meal: PersonalMeal) -> PersonalMeal:
        """Record a staff meal; an unset cost is taken from the dish's nominal cost."""
        dish = self.dishes.get(meal.dish_id)
        if meal.cost == 0 and dish is not None:
            meal = meal.model_copy(update={"cost": meal.quantity * dish.total_cost})
        self.personal_meals.append(meal)
        return meal

    def record_sale(self, sale: Sale) -> Sale:
        """Record a POS sale, filling the dish name from the catalog when blank."""
        dish = self.dishes.get(sale.dish_id)
        if not sale.dish_name and dish is not None:
            sale = sale.model_copy(update={"dish_name": dish.name})
        self.sales.append(sale)
        return sale

    def delete_waste(self, waste_id: str) -> bool:
        return self._remove(self.waste, waste_id)

    def delete_personal_meal(self, meal_id: str) -> bool:
        return self._remove(self.personal_meals, meal_id)

    def delete_sale(self, sale_id: str) -> bool:
        return self._remove(self.sales, sale_id)

    @staticmethod
    def _remove(rows: list[Any], row_id: str) -> bool:
        # Stock movements are append-only and have no delete.
        for i, row in enumerate(rows):
            if row.id == row_id:
                del rows[i]
                return True
        return False

    def upsert_editable_inventory(
        self,
        product_id: str,
        initial_quantity: float,
        final_quantity: float,
        notes: str | None = None,
    ) -> EditableInventory:
        """Create or overwrite the counted quantities of a product."""
        if product_id not in self.products:
            raise ValueError(f"Product {product_id} not found")

        existing = self.editable_inventory.get(product_id)
        row = EditableInventory(
            id=existing.id if existing else _new_id(),
            product_id=product_id,
            initial_quantity=initial_quantity,
            final_quantity=final_quantity,
            notes=notes or f"Updated {date.today().isoformat()}",
        )
        self.editable_inventory[product_id] = row
        logger.debug(
            "%s inventory count for %s: initial=%s final=%s",
            "Updated" if existing else "Created", product_id, initial_quantity, final_quantity,
        )
        return row

    # -- orders --------------------------------------------------------------

    def add_order(self, order: Order) -> Order:
        self.orders[order.id] = order
        return order

    def delete_order(self, order_id: str) -> bool:
        """Delete an order; stock it already received stays in the ledger."""
        return self.orders.pop(order_id, None) is not None

    def confirm_order(self, order_id: str) -> list[StockMovement]:
        """Confirm an order and receive its items into stock.

        Posts one IN movement per item. An order that already has order
        movements posts nothing again; a cancelled order raises ValueError.
        """
        order = self.orders.get(order_id)
        if not order:
            raise ValueError(f"Order {order_id} not found")

        if order.status == OrderStatus.CANCELLED:
            raise ValueError(f"Order {order_id} is cancelled and cannot be received")

        already_confirmed = order.status == OrderStatus.CONFIRMED
        order.status = OrderStatus.CONFIRMED
        if already_confirmed:
            return []

        existing = [
            m for m in self.stock_movements
            if m.source == MovementSource.ORDER and m.source_id == order_id
        ]
        if existing:
            logger.warning(
                "Order %s already has %d stock movements; skipping receipt",
                order_id, len(existing),
            )
            return []

        movements = []
        for item in order.items:
            movements.append(self.record_movement(StockMovement(
                id=_new_id(),
                product_id=item.product_id,
                movement_type=MovementType.IN,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_cost=item.total_price,
                source=MovementSource.ORDER,
                source_id=order.id,
                movement_date=order.order_date,
                notes=f"Received from {order.supplier} - {order.operator_name or 'system'}",
            )))

        logger.info(
            "Order %s confirmed: %d IN movements, total %.2f",
            order_id, len(movements), order.total_amount,
        )
        return movements
