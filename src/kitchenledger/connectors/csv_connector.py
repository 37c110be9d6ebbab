"""
CSV Connector — load catalog and ledger records from a directory of CSV files.

Expected files (any may be missing; a missing file yields no records):

    products.csv            id,code,name,quantity,unit,price_per_unit,waste
    recipes.csv             id,name,weight_adjustment[,total_cost]
    recipe_ingredients.csv  recipe_id,product_id,quantity[,cost,weight_adjustment]
    dishes.csv              id,name,selling_price[,total_cost]
    dish_ingredients.csv    dish_id,type,product_id|recipe_id,quantity[,cost]
    stock_movements.csv     id,product_id,movement_type,quantity,source,movement_date,...
    waste.csv               id,product_id,quantity,cost,date
    personal_meals.csv      id,dish_id,quantity,cost,date
    sales.csv               id,dish_id,quantity_sold,unit_cost,unit_revenue,sale_date
    editable_inventory.csv  id,product_id,initial_quantity,final_quantity

Ingredient lines without a ``cost`` column get a nominal cost snapshot from
the current product price or recipe total at load time.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import BaseModel, ValidationError

from kitchenledger.connectors.base import BaseConnector
from kitchenledger.models.catalog import (
    Dish,
    Product,
    ProductLine,
    Recipe,
    RecipeIngredient,
    RecipeLine,
)
from kitchenledger.models.dataset import KitchenDataset
from kitchenledger.models.ledger import (
    EditableInventory,
    PersonalMeal,
    Sale,
    StockMovement,
    Waste,
)

logger = logging.getLogger("kitchenledger.connectors.csv")

_LEDGER_FILES: dict[str, tuple[str, type[BaseModel]]] = {
    "stock_movements": ("stock_movements.csv", StockMovement),
    "waste": ("waste.csv", Waste),
    "personal_meals": ("personal_meals.csv", PersonalMeal),
    "sales": ("sales.csv", Sale),
    "editable_inventory": ("editable_inventory.csv", EditableInventory),
}


class CSVConnector(BaseConnector):
    """Import kitchen records from CSV exports.

    Usage::

        connector = CSVConnector(data_dir="exports/2025-03")
        dataset = await connector.pull()
    """

    name = "csv"
    description = "Import kitchen records from a directory of CSV files"

    def __init__(
        self,
        credentials: dict[str, Any] | None = None,
        data_dir: str | None = None,
        **options: Any,
    ) -> None:
        super().__init__(credentials, **options)
        creds = credentials or {}
        self.data_dir = (
            data_dir
            or options.get("data_dir")
            or creds.get("data_dir", "")
        )
        self.encoding = options.get("encoding", "utf-8")
        self.delimiter = options.get("delimiter", ",")

    async def pull(self) -> KitchenDataset:
        """Read every known CSV file into a KitchenDataset."""
        root = Path(self.data_dir)
        if not root.is_dir():
            raise FileNotFoundError(f"Data directory not found: {self.data_dir}")

        products = self._parse_models(self._read(root / "products.csv"), Product, "products")
        product_index = {p.id: p for p in products}
        recipes = self._parse_recipes(root, product_index)
        dishes = self._parse_dishes(root, product_index, {r.id: r for r in recipes})

        ledgers = {
            attr: self._parse_models(self._read(root / filename), model, filename)
            for attr, (filename, model) in _LEDGER_FILES.items()
        }

        dataset = KitchenDataset(
            products=products,
            recipes=recipes,
            dishes=dishes,
            source=f"csv:{root.name}",
            **ledgers,
        )
        logger.info(
            "Loaded %d products, %d recipes, %d dishes, %d movements, %d sales from %s",
            len(products), len(recipes), len(dishes),
            len(dataset.stock_movements), len(dataset.sales), root,
        )
        return dataset

    async def validate_credentials(self) -> bool:
        """Check that the data directory exists."""
        return Path(self.data_dir).is_dir()

    def _read(self, path: Path) -> list[dict[str, Any]]:
        """Read a CSV file as row dicts with empty cells removed."""
        if not path.exists():
            logger.debug("No %s in data directory; skipping", path.name)
            return []

        df = pd.read_csv(
            path,
            encoding=self.encoding,
            delimiter=self.delimiter,
            dtype=str,
            keep_default_na=False,
        )
        df.columns = df.columns.str.strip().str.lower()
        return [
            {key: value.strip() for key, value in row.items() if value.strip() != ""}
            for row in df.to_dict(orient="records")
        ]

    def _parse_models(self, rows: list[dict[str, Any]], model: type[Any], label: str) -> list[Any]:
        records = []
        for i, row in enumerate(rows, start=1):
            try:
                records.append(model.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping invalid row %d in %s: %s", i, label, e)
        return records

    def _parse_recipes(self, root: Path, product_index: dict[str, Product]) -> list[Recipe]:
        lines: dict[str, list[RecipeIngredient]] = defaultdict(list)
        for i, row in enumerate(self._read(root / "recipe_ingredients.csv"), start=1):
            recipe_id = row.pop("recipe_id", None)
            if not recipe_id:
                logger.warning("Skipping recipe ingredient row %d without recipe_id", i)
                continue
            if "cost" not in row and row.get("product_id") in product_index:
                price = product_index[row["product_id"]].price_per_unit
                row["cost"] = float(row.get("quantity", 0)) * price
            try:
                lines[recipe_id].append(RecipeIngredient.model_validate(row))
            except (ValidationError, ValueError) as e:
                logger.warning("Skipping invalid recipe ingredient row %d: %s", i, e)

        recipes = []
        for i, row in enumerate(self._read(root / "recipes.csv"), start=1):
            row["ingredients"] = lines.get(row.get("id", ""), [])
            try:
                recipe = Recipe.model_validate(row)
            except ValidationError as e:
                logger.warning("Skipping invalid row %d in recipes: %s", i, e)
                continue
            if "total_cost" not in row:
                recipe.total_cost = recipe.nominal_cost
            recipes.append(recipe)
        return recipes

    def _parse_dishes(
        self,
        root: Path,
        product_index: dict[str, Product],
        recipe_index: dict[str, Recipe],
    ) -> list[Dish]:
        lines: dict[str, list[ProductLine | RecipeLine]] = defaultdict(list)
        for i, row in enumerate(self._read(root / "dish_ingredients.csv"), start=1):
            dish_id = row.pop("dish_id", None)
            if not dish_id:
                logger.warning("Skipping dish ingredient row %d without dish_id", i)
                continue
            row.setdefault("type", "recipe" if "recipe_id" in row else "product")
            try:
                if "cost" not in row:
                    row["cost"] = self._snapshot_cost(row, product_index, recipe_index)
                line = ProductLine if row["type"] == "product" else RecipeLine
                lines[dish_id].append(line.model_validate(row))
            except (ValidationError, ValueError) as e:
                logger.warning("Skipping invalid dish ingredient row %d: %s", i, e)

        dishes = []
        for i, row in enumerate(self._read(root / "dishes.csv"), start=1):
            row["ingredients"] = lines.get(row.get("id", ""), [])
            try:
                dish = Dish.model_validate(row)
            except ValidationError as e:
                logger.warning("Skipping invalid row %d in dishes: %s", i, e)
                continue
            if "total_cost" not in row:
                dish.total_cost = sum(line.cost for line in dish.ingredients)
            dishes.append(dish)
        return dishes

    @staticmethod
    def _snapshot_cost(
        row: dict[str, Any],
        product_index: dict[str, Product],
        recipe_index: dict[str, Recipe],
    ) -> float:
        quantity = float(row.get("quantity", 0))
        if row["type"] == "product" and row.get("product_id") in product_index:
            return quantity * product_index[row["product_id"]].price_per_unit
        if row["type"] == "recipe" and row.get("recipe_id") in recipe_index:
            return quantity * recipe_index[row["recipe_id"]].total_cost
        return 0.0
