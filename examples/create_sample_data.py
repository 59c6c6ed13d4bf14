"""Crée des cartes de démonstration et une config pour MenuConcorde."""

import json
from decimal import Decimal
from pathlib import Path

from menuconcorde.io_excel import catalog_to_df
from menuconcorde.matching.schema import Category, Record

DATA_DIR = Path(__file__).parent / "data"
DATA_DIR.mkdir(exist_ok=True)


def menu(*categories: tuple[str, str, list[tuple[str, str, str, str]]]) -> list[Category]:
    return [
        Category(cid, cname, [Record(i, n, d, Decimal(p)) for i, n, d, p in items])
        for cid, cname, items in categories
    ]


source = menu(
    ("appetizers", "Appetizers", [
        ("s1", "Chicken Wings", "Spicy buffalo wings", "12.99"),
        ("s2", "Mozzarella Sticks", "Breaded cheese sticks", "8.99"),
        ("s3", "Caesar Salad", "Fresh romaine lettuce", "9.99"),
        ("s4", "French Fries", "Crispy golden fries", "5.99"),
    ]),
    ("entrees", "Main Course", [
        ("s5", "Grilled Salmon", "Atlantic salmon with vegetables", "24.99"),
        ("s6", "Beef Burger", "Angus beef burger with cheese", "15.99"),
        ("s7", "Margherita Pizza", "Classic pizza with basil", "16.99"),
        ("s8", "Chicken Pasta", "Pasta with grilled chicken", "18.99"),
        ("s9", "Vegetable Stir Fry", "Mixed vegetables in sauce", "14.99"),
    ]),
    ("desserts", "Desserts", [
        ("s10", "Chocolate Cake", "Rich chocolate layer cake", "7.99"),
        ("s11", "Ice Cream Sundae", "Vanilla ice cream with toppings", "6.99"),
        ("s12", "Apple Pie", "Warm apple pie with cinnamon", "6.49"),
    ]),
)

target = menu(
    ("appetizers", "Appetizers", [
        ("t1", "Chicken Wings", "Buffalo style wings", "12.99"),
        ("t2", "Cheese Sticks", "Fried mozzarella", "8.99"),
        ("t3", "Caesar Side Salad", "Romaine with caesar dressing", "9.99"),
        ("t4", "Onion Rings", "Crispy onion rings", "6.99"),
    ]),
    ("entrees", "Main Course", [
        ("t5", "Grilled Salmon Fillet", "Fresh salmon", "24.99"),
        ("t6", "Classic Burger", "Beef burger", "15.99"),
        ("t7", "Spaghetti with Chicken", "Italian pasta", "18.99"),
    ]),
    ("desserts", "Desserts", [
        ("t8", "Chocolate Lava Cake", "Molten chocolate cake", "7.99"),
        ("t9", "Tiramisu", "Italian coffee dessert", "8.99"),
    ]),
)

catalog_to_df(source).to_excel(DATA_DIR / "source.xlsx", index=False, engine="openpyxl")
catalog_to_df(target).to_excel(DATA_DIR / "target.xlsx", index=False, engine="openpyxl")
(DATA_DIR / "config.json").write_text(
    json.dumps({"source_file": "source.xlsx", "target_file": "target.xlsx"}, indent=2),
    encoding="utf-8",
)
print(f"Fichiers créés dans {DATA_DIR}")
