"""Conversion of data-entry units to the base units stored by the ledger."""

from datetime import date
from decimal import Decimal

from restaurant_inventory_service.models.inventory_models import (
    BaseUnit,
    InventoryItemInput,
    Money,
    NewInventoryItem,
    UnitOfMeasure,
)

# Multiplicative factor and target base unit for every entry unit
UNIT_CONVERSIONS: dict[UnitOfMeasure, tuple[BaseUnit, Decimal]] = {
    UnitOfMeasure.GRAM: (BaseUnit.GRAM, Decimal("1")),
    UnitOfMeasure.KILOGRAM: (BaseUnit.GRAM, Decimal("1000")),
    UnitOfMeasure.POUND: (BaseUnit.GRAM, Decimal("453.592")),
    UnitOfMeasure.OUNCE: (BaseUnit.GRAM, Decimal("28.3495")),
    UnitOfMeasure.MILLILITER: (BaseUnit.MILLILITER, Decimal("1")),
    UnitOfMeasure.LITER: (BaseUnit.MILLILITER, Decimal("1000")),
    UnitOfMeasure.GALLON: (BaseUnit.MILLILITER, Decimal("3785.41")),
    UnitOfMeasure.PIECE: (BaseUnit.PIECE, Decimal("1")),
}


def get_base_unit(unit: UnitOfMeasure | str) -> BaseUnit:
    """Return the base unit an entry unit is stored in.

    Args:
        unit: Entry unit (enum member or case-insensitive string)

    Returns:
        BaseUnit the quantity is converted to

    Raises:
        ValueError: If the unit is not supported
    """
    return UNIT_CONVERSIONS[UnitOfMeasure(unit)][0]


def get_conversion_factor(unit: UnitOfMeasure | str) -> Decimal:
    """Return the factor converting one entry unit to its base unit."""
    return UNIT_CONVERSIONS[UnitOfMeasure(unit)][1]


def convert_to_base_unit(value: Decimal, unit: UnitOfMeasure | str) -> Decimal:
    """Convert a quantity expressed in an entry unit to its base unit.

    Quantities already in a base unit are returned unchanged.

    Args:
        value: Quantity in the entry unit
        unit: Entry unit of the quantity

    Returns:
        Quantity in the base unit
    """
    factor = get_conversion_factor(unit)
    if factor == 1:
        return value
    return value * factor


def convert_cost_to_base_unit(cost: Decimal, unit: UnitOfMeasure | str) -> Decimal:
    """Re-express a cost per entry unit as a cost per base unit."""
    factor = get_conversion_factor(unit)
    if factor == 1:
        return cost
    return cost / factor


def normalize_inventory_input(item: InventoryItemInput) -> NewInventoryItem:
    """Normalize user-entered inventory data to base units.

    Stock quantities are multiplied by the unit's factor and the unit cost is
    divided by it, so stock value is unchanged by the conversion.

    Args:
        item: Inventory item as entered

    Returns:
        NewInventoryItem ready to be added to the ledger

    Raises:
        pydantic.ValidationError: If the normalized thresholds are inconsistent
    """
    return NewInventoryItem(
        sku=item.sku,
        name=item.name,
        category=item.category,
        current_stock=convert_to_base_unit(item.current_stock, item.unit),
        minimum_stock=convert_to_base_unit(item.minimum_stock, item.unit),
        reorder_level=convert_to_base_unit(item.reorder_level, item.unit),
        unit=get_base_unit(item.unit),
        unit_cost=Money(
            amount=convert_cost_to_base_unit(item.unit_cost, item.unit),
            currency=item.currency,
        ),
        last_restocked=item.last_restocked or date.today(),
        supplier=item.supplier,
    )
