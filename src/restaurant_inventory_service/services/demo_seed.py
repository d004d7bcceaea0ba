"""Demo data: a pizza kitchen with six ingredients and two recipes."""

import logging
from datetime import date
from decimal import Decimal

from restaurant_inventory_service.models.inventory_models import (
    BaseUnit,
    Money,
    NewInventoryItem,
    NewRecipe,
    RecipeIngredient,
)
from restaurant_inventory_service.models.menu_models import MenuItem
from restaurant_inventory_service.services.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)

PEPPERONI_PIZZA_ID = "1"
MARGHERITA_PIZZA_ID = "2"

# (sku, name, category, stock, minimum, reorder, unit, unit cost, restocked, supplier)
DEMO_INVENTORY = [
    ("ING-001", "Flour", "Dry Goods", "25000", "5000", "10000", BaseUnit.GRAM, "0.10",
     date(2024, 10, 18), "Grain Suppliers Co."),
    ("ING-002", "Cheese (Mozzarella)", "Dairy", "2500", "500", "1000", BaseUnit.GRAM, "0.60",
     date(2024, 10, 19), "Dairy Delights"),
    ("ING-003", "Tomato Sauce", "Sauces", "2500", "500", "1000", BaseUnit.GRAM, "0.20",
     date(2024, 10, 20), "Italian Imports"),
    ("ING-004", "Pepperoni", "Meat", "5000", "1000", "2000", BaseUnit.GRAM, "0.75",
     date(2024, 10, 18), "Fresh Meats Co."),
    ("ING-005", "Olive Oil", "Oils", "5000", "1000", "2000", BaseUnit.MILLILITER, "0.40",
     date(2024, 10, 15), "Mediterranean Imports"),
    ("ING-006", "Basil (Fresh)", "Herbs", "200", "50", "100", BaseUnit.GRAM, "2.50",
     date(2024, 10, 21), "Farm Fresh Produce"),
]

# Quantities per pizza, by SKU
DEMO_RECIPES = {
    PEPPERONI_PIZZA_ID: [("ING-001", "250"), ("ING-002", "25"), ("ING-003", "25"),
                         ("ING-004", "50"), ("ING-005", "10")],
    MARGHERITA_PIZZA_ID: [("ING-001", "250"), ("ING-002", "30"), ("ING-003", "30"),
                          ("ING-006", "5"), ("ING-005", "10")],
}

DEMO_MENU_ITEMS = [
    MenuItem(
        id=PEPPERONI_PIZZA_ID,
        name="Pepperoni Pizza",
        description="Classic pizza with pepperoni, mozzarella, and tomato sauce",
        category="Main Course",
        price=Decimal("750.00"),
    ),
    MenuItem(
        id=MARGHERITA_PIZZA_ID,
        name="Margherita Pizza",
        description="Traditional pizza with fresh mozzarella, tomato sauce, and basil",
        category="Main Course",
        price=Decimal("650.00"),
    ),
]


def seed_demo_data(ledger: InventoryLedger, currency: str = "PHP") -> None:
    """Load the demo ingredients, menu items and recipes into a ledger.

    Args:
        ledger: Ledger to populate
        currency: Currency of ingredient costs
    """
    items_by_sku = {}
    for sku, name, category, stock, minimum, reorder, unit, cost, restocked, supplier in DEMO_INVENTORY:
        items_by_sku[sku] = ledger.add_inventory_item(
            NewInventoryItem(
                sku=sku,
                name=name,
                category=category,
                current_stock=Decimal(stock),
                minimum_stock=Decimal(minimum),
                reorder_level=Decimal(reorder),
                unit=unit,
                unit_cost=Money(amount=Decimal(cost), currency=currency),
                last_restocked=restocked,
                supplier=supplier,
            )
        )

    ledger.register_menu_items(DEMO_MENU_ITEMS)

    for menu_item_id, lines in DEMO_RECIPES.items():
        ledger.add_recipe(
            NewRecipe(
                menu_item_id=menu_item_id,
                ingredients=[
                    RecipeIngredient(
                        inventory_item_id=items_by_sku[sku].id,
                        quantity=Decimal(quantity),
                        unit=items_by_sku[sku].unit,
                    )
                    for sku, quantity in lines
                ],
            )
        )

    logger.info(
        f"Seeded demo data: {len(DEMO_INVENTORY)} inventory items, "
        f"{len(DEMO_MENU_ITEMS)} menu items"
    )
