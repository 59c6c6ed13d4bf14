"""Cartes de démonstration partagées par les tests."""

from decimal import Decimal

import pytest

from menuconcorde.matching.engine import MatchEngine
from menuconcorde.matching.schema import Category, Record


def _r(id: str, name: str, description: str, price: str) -> Record:
    return Record(id=id, name=name, description=description, price=Decimal(price))


@pytest.fixture
def source_menu() -> list[Category]:
    return [
        Category(
            "appetizers",
            "Appetizers",
            [
                _r("s1", "Chicken Wings", "Spicy buffalo wings", "12.99"),
                _r("s2", "Mozzarella Sticks", "Breaded cheese sticks", "8.99"),
                _r("s3", "Caesar Salad", "Fresh romaine lettuce", "9.99"),
                _r("s4", "French Fries", "Crispy golden fries", "5.99"),
            ],
        ),
        Category(
            "entrees",
            "Main Course",
            [
                _r("s5", "Grilled Salmon", "Atlantic salmon with vegetables", "24.99"),
                _r("s6", "Beef Burger", "Angus beef burger with cheese", "15.99"),
                _r("s7", "Margherita Pizza", "Classic pizza with basil", "16.99"),
                _r("s8", "Chicken Pasta", "Pasta with grilled chicken", "18.99"),
                _r("s9", "Vegetable Stir Fry", "Mixed vegetables in sauce", "14.99"),
            ],
        ),
        Category(
            "desserts",
            "Desserts",
            [
                _r("s10", "Chocolate Cake", "Rich chocolate layer cake", "7.99"),
                _r("s11", "Ice Cream Sundae", "Vanilla ice cream with toppings", "6.99"),
                _r("s12", "Apple Pie", "Warm apple pie with cinnamon", "6.49"),
            ],
        ),
    ]


@pytest.fixture
def target_menu() -> list[Category]:
    return [
        Category(
            "appetizers",
            "Appetizers",
            [
                _r("t1", "Chicken Wings", "Buffalo style wings", "12.99"),
                _r("t2", "Cheese Sticks", "Fried mozzarella", "8.99"),
                _r("t3", "Caesar Side Salad", "Romaine with caesar dressing", "9.99"),
                _r("t4", "Onion Rings", "Crispy onion rings", "6.99"),
            ],
        ),
        Category(
            "entrees",
            "Main Course",
            [
                _r("t5", "Grilled Salmon Fillet", "Fresh salmon", "24.99"),
                _r("t6", "Classic Burger", "Beef burger", "15.99"),
                _r("t7", "Spaghetti with Chicken", "Italian pasta", "18.99"),
            ],
        ),
        Category(
            "desserts",
            "Desserts",
            [
                _r("t8", "Chocolate Lava Cake", "Molten chocolate cake", "7.99"),
                _r("t9", "Tiramisu", "Italian coffee dessert", "8.99"),
            ],
        ),
    ]


@pytest.fixture
def engine(source_menu: list[Category], target_menu: list[Category]) -> MatchEngine:
    return MatchEngine(source_menu, target_menu)
