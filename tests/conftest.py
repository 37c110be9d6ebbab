"""Shared fixtures: a small trattoria with one month of ledger activity."""

from datetime import date
from pathlib import Path

import pytest

from kitchenledger.models.catalog import (
    Dish,
    Product,
    ProductLine,
    Recipe,
    RecipeIngredient,
    RecipeLine,
    Unit,
)
from kitchenledger.models.dataset import KitchenDataset
from kitchenledger.models.ledger import (
    EditableInventory,
    MovementSource,
    MovementType,
    PersonalMeal,
    Sale,
    StockMovement,
    Waste,
)


@pytest.fixture
def flour() -> Product:
    return Product(id="flour", code="F01", name="Flour 00", quantity=25, price_per_unit=1.20, waste=2)


@pytest.fixture
def guanciale() -> Product:
    return Product(id="guanciale", code="G01", name="Guanciale", quantity=1, price_per_unit=20.0, waste=10)


@pytest.fixture
def eggs() -> Product:
    return Product(id="eggs", code="E01", name="Eggs", quantity=60, unit=Unit.PIECE, price_per_unit=0.30)


@pytest.fixture
def pasta_dough() -> Recipe:
    return Recipe(
        id="pasta_dough",
        name="Pasta dough",
        weight_adjustment=20,
        ingredients=[
            RecipeIngredient(product_id="flour", quantity=0.5, cost=0.6),
            RecipeIngredient(product_id="eggs", quantity=4, cost=1.2),
        ],
        total_cost=1.8,
    )


@pytest.fixture
def carbonara() -> Dish:
    return Dish(
        id="carbonara",
        name="Carbonara",
        selling_price=13.20,
        ingredients=[
            ProductLine(product_id="guanciale", quantity=0.1, cost=2.0),
            ProductLine(product_id="flour", quantity=0.1, cost=0.12),
            RecipeLine(recipe_id="pasta_dough", quantity=0.2, cost=0.36),
        ],
        total_cost=2.48,
    )


@pytest.fixture
def bruschetta() -> Dish:
    return Dish(
        id="bruschetta",
        name="Bruschetta",
        selling_price=5.50,
        ingredients=[ProductLine(product_id="flour", quantity=0.05, cost=0.06)],
        total_cost=0.06,
    )


@pytest.fixture
def kitchen_dataset(flour, guanciale, eggs, pasta_dough, carbonara, bruschetta) -> KitchenDataset:
    """March 2025: flour and guanciale counted, eggs never counted."""
    return KitchenDataset(
        products=[flour, guanciale, eggs],
        recipes=[pasta_dough],
        dishes=[carbonara, bruschetta],
        stock_movements=[
            StockMovement(
                id="m1", product_id="flour", movement_type=MovementType.IN, quantity=10,
                unit_price=1.20, total_cost=12.0, source=MovementSource.ORDER,
                source_id="o1", movement_date=date(2025, 3, 5),
            ),
            StockMovement(
                id="m2", product_id="guanciale", movement_type=MovementType.IN, quantity=2,
                unit_price=20.0, source=MovementSource.ORDER, source_id="o2",
                movement_date=date(2025, 3, 10),
            ),
            StockMovement(
                id="m3", product_id="flour", movement_type=MovementType.IN, quantity=5,
                unit_price=1.20, total_cost=6.0, source=MovementSource.ORDER,
                source_id="o3", movement_date=date(2025, 4, 2),
            ),
        ],
        waste=[Waste(id="w1", product_id="flour", quantity=2, cost=2.40, date=date(2025, 3, 12))],
        personal_meals=[
            PersonalMeal(id="pm1", dish_id="carbonara", quantity=1, cost=2.48, date=date(2025, 3, 15)),
        ],
        sales=[
            Sale(
                id="s1", dish_id="carbonara", dish_name="Carbonara", quantity_sold=10,
                unit_cost=2.48, unit_revenue=12.0, sale_date=date(2025, 3, 20),
            ),
            Sale(
                id="s2", dish_id="ghost", dish_name="Deleted dish", quantity_sold=3,
                unit_cost=1.0, unit_revenue=8.0, sale_date=date(2025, 3, 21),
            ),
        ],
        editable_inventory=[
            EditableInventory(id="inv1", product_id="flour", initial_quantity=25, final_quantity=20),
            EditableInventory(id="inv2", product_id="guanciale", initial_quantity=1, final_quantity=1.5),
        ],
        source="fixture",
    )


CSV_FILES = {
    "products.csv": """id,code,name,quantity,unit,price_per_unit,waste
flour,F01,Flour 00,25,kg,1.20,2
guanciale,G01,Guanciale,1,kg,20.00,10
eggs,E01,Eggs,60,pezzo,0.30,0
broken,B01,Broken,1,kg,5.00,100
""",
    "recipes.csv": """id,name,weight_adjustment
pasta_dough,Pasta dough,20
""",
    "recipe_ingredients.csv": """recipe_id,product_id,quantity
pasta_dough,flour,0.5
pasta_dough,eggs,4
""",
    "dishes.csv": """id,name,selling_price
carbonara,Carbonara,13.20
bruschetta,Bruschetta,5.50
""",
    "dish_ingredients.csv": """dish_id,type,product_id,recipe_id,quantity
carbonara,product,guanciale,,0.1
carbonara,product,flour,,0.1
carbonara,recipe,,pasta_dough,0.2
bruschetta,,flour,,0.05
""",
    "stock_movements.csv": """id,product_id,movement_type,quantity,unit_price,total_cost,source,source_id,movement_date
m1,flour,in,10,1.20,12.00,order,o1,2025-03-05
m2,guanciale,in,2,20.00,,order,o2,2025-03-10
m3,flour,in,5,1.20,6.00,order,o3,2025-04-02
""",
    "waste.csv": """id,product_id,quantity,cost,date
w1,flour,2,2.40,2025-03-12
""",
    "personal_meals.csv": """id,dish_id,quantity,cost,date
pm1,carbonara,1,2.48,2025-03-15
""",
    "sales.csv": """id,dish_id,dish_name,quantity_sold,unit_cost,unit_revenue,sale_date
s1,carbonara,Carbonara,10,2.48,12.00,2025-03-20
s2,ghost,Deleted dish,3,1.00,8.00,2025-03-21
""",
    "editable_inventory.csv": """id,product_id,initial_quantity,final_quantity
inv1,flour,25,20
inv2,guanciale,1,1.5
""",
}


@pytest.fixture
def csv_dir(tmp_path: Path) -> Path:
    """The March 2025 fixture exported as CSV files (plus one invalid product)."""
    data_dir = tmp_path / "exports"
    data_dir.mkdir()
    for filename, content in CSV_FILES.items():
        (data_dir / filename).write_text(content)
    return data_dir
