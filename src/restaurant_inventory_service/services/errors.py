"""Exceptions raised by the inventory ledger.

Insufficient stock is not an error: it is reported through boolean results
and AvailabilityCheck. These exceptions cover unknown ids and requests the
ledger refuses outright.
"""


class InventoryError(Exception):
    """Base class for inventory ledger errors."""


class InventoryNotFoundError(InventoryError):
    """Raised when an operation references an id the ledger does not hold."""

    entity = "entity"

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} {entity_id} not found")


class InventoryItemNotFoundError(InventoryNotFoundError):
    entity = "Inventory item"


class RecipeNotFoundError(InventoryNotFoundError):
    entity = "Recipe"


class MenuItemNotFoundError(InventoryNotFoundError):
    entity = "Menu item"


class DuplicateSkuError(InventoryError):
    """Raised when an inventory item is added with a SKU already in use."""

    def __init__(self, sku: str) -> None:
        self.sku = sku
        super().__init__(f"SKU {sku} is already in use")


class DuplicateRecipeError(InventoryError):
    """Raised when a second recipe is registered for the same menu item."""

    def __init__(self, menu_item_id: str) -> None:
        self.menu_item_id = menu_item_id
        super().__init__(f"Menu item {menu_item_id} already has a recipe")


class AvailabilityManagedError(InventoryError):
    """Raised when is_available is set directly on a menu item with a recipe."""

    def __init__(self, menu_item_id: str) -> None:
        self.menu_item_id = menu_item_id
        super().__init__(
            f"Availability of menu item {menu_item_id} is derived from its recipe "
            "and cannot be set directly"
        )


class InvalidQuantityError(InventoryError, ValueError):
    """Raised for non-positive order quantities or adjustments below zero stock."""


class UnitMismatchError(InventoryError):
    """Raised when recipe quantities and an inventory item disagree on the unit."""

    def __init__(self, inventory_item_id: str, expected: str, actual: str) -> None:
        self.inventory_item_id = inventory_item_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Recipe quantities for inventory item {inventory_item_id} are in {expected}, "
            f"not {actual}"
        )
