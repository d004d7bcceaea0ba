"""Stateless queries derived from inventory data.

None of these values are stored on the items: they are recomputed from the
ledger's current data so they can never drift from it.
"""

from collections.abc import Iterable
from decimal import Decimal

from restaurant_inventory_service.models.inventory_models import (
    BaseUnit,
    CategoryValue,
    InventoryItem,
    InventoryValue,
    Money,
    Recipe,
    StockStatus,
)

DEFAULT_CURRENCY = "PHP"


def stock_status(item: InventoryItem) -> StockStatus:
    """Classify an item's stock against its thresholds.

    Args:
        item: Inventory item to classify

    Returns:
        CRITICAL below minimum stock, LOW below reorder level, GOOD otherwise
    """
    if item.current_stock < item.minimum_stock:
        return StockStatus.CRITICAL
    if item.current_stock < item.reorder_level:
        return StockStatus.LOW
    return StockStatus.GOOD


def stock_percentage(item: InventoryItem) -> Decimal:
    """Current stock as a percentage of the reorder level.

    Items with a zero reorder level are reported at 100%.
    """
    if item.reorder_level == 0:
        return Decimal(100)
    return item.current_stock / item.reorder_level * 100


def filter_inventory_items(
    items: Iterable[InventoryItem],
    search: str | None = None,
    category: str | None = None,
    status: StockStatus | None = None,
) -> list[InventoryItem]:
    """Filter items by a name/SKU search term, category and stock status.

    Args:
        items: Items to filter
        search: Case-insensitive substring matched against name or SKU
        category: Exact category to keep
        status: Stock status to keep

    Returns:
        list: Matching items in input order
    """
    term = search.lower() if search else None
    result = []
    for item in items:
        if term and term not in item.name.lower() and term not in item.sku.lower():
            continue
        if category and item.category != category:
            continue
        if status and stock_status(item) != status:
            continue
        result.append(item)
    return result


def low_stock_items(items: Iterable[InventoryItem]) -> list[InventoryItem]:
    """Items whose stock is LOW or CRITICAL."""
    return [item for item in items if stock_status(item) != StockStatus.GOOD]


def inventory_value(
    items: Iterable[InventoryItem], currency: str = DEFAULT_CURRENCY
) -> InventoryValue:
    """Total value of stock on hand, overall and per category.

    Args:
        items: Items to value
        currency: Currency to report when there are no items

    Returns:
        InventoryValue with per-category breakdown

    Raises:
        ValueError: If items are costed in more than one currency
    """
    items = list(items)
    currencies = {item.unit_cost.currency for item in items}
    if len(currencies) > 1:
        raise ValueError(f"Cannot total stock valued in several currencies: {sorted(currencies)}")
    if currencies:
        currency = currencies.pop()

    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    for item in items:
        value = item.current_stock * item.unit_cost.amount
        totals[item.category] = totals.get(item.category, Decimal(0)) + value
        counts[item.category] = counts.get(item.category, 0) + 1

    return InventoryValue(
        total_value=Money(amount=sum(totals.values(), Decimal(0)), currency=currency),
        item_count=len(items),
        categories=[
            CategoryValue(
                category=category,
                value=Money(amount=total, currency=currency),
                item_count=counts[category],
            )
            for category, total in totals.items()
        ],
    )


def recipe_cost(
    recipe: Recipe, items: Iterable[InventoryItem], currency: str = DEFAULT_CURRENCY
) -> Money:
    """Ingredient cost of producing one unit of a recipe.

    Ingredients whose inventory item is unknown contribute nothing.
    """
    by_id = {item.id: item for item in items}
    total = Decimal(0)
    for ingredient in recipe.ingredients:
        item = by_id.get(ingredient.inventory_item_id)
        if item is not None:
            total += ingredient.quantity * item.unit_cost.amount
            currency = item.unit_cost.currency
    return Money(amount=total, currency=currency)


def format_stock(value: Decimal, unit: BaseUnit | str) -> str:
    """Render a base-unit quantity in a readable unit.

    Grams and milliliters switch to kg and L from 1000 upwards.
    """
    unit = BaseUnit(unit)
    if unit == BaseUnit.GRAM:
        if value >= 1000:
            return f"{value / 1000:.2f} kg"
        return f"{value:.0f} g"
    if unit == BaseUnit.MILLILITER:
        if value >= 1000:
            return f"{value / 1000:.2f} L"
        return f"{value:.0f} ml"
    return f"{value:.2f} {unit.value}"
