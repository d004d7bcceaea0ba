"""In-memory repository classes for inventory models.

Each repository is a keyed store (id -> entity) for one entity type. As with
the rest of the service we use simple return values (None/False) for expected
misses rather than raising exceptions. Repositories do no locking of their
own: the InventoryLedger that owns them serializes access.
"""

from restaurant_inventory_service.models.inventory_models import (
    InventoryItem,
    Recipe,
    StockMovement,
)
from restaurant_inventory_service.models.menu_models import MenuItem


class InventoryItemRepository:
    """Repository for inventory item records, keyed by id."""

    def __init__(self) -> None:
        """Initialize an empty repository."""
        self._items: dict[str, InventoryItem] = {}

    def get_item(self, item_id: str) -> InventoryItem | None:
        """Retrieve an inventory item by id.

        Args:
            item_id: Inventory item identifier

        Returns:
            InventoryItem if found, None otherwise
        """
        return self._items.get(item_id)

    def get_item_by_sku(self, sku: str) -> InventoryItem | None:
        """Retrieve an inventory item by its SKU.

        Args:
            sku: Business key of the item

        Returns:
            InventoryItem if found, None otherwise
        """
        for item in self._items.values():
            if item.sku == sku:
                return item
        return None

    def save_item(self, item: InventoryItem) -> bool:
        """Save or replace an inventory item.

        Args:
            item: InventoryItem to save

        Returns:
            bool: True once stored
        """
        self._items[item.id] = item
        return True

    def save_items(self, items: list[InventoryItem]) -> bool:
        """Save several inventory items in one step.

        Args:
            items: InventoryItems to save

        Returns:
            bool: True once all are stored
        """
        self._items.update({item.id: item for item in items})
        return True

    def list_items(self) -> list[InventoryItem]:
        """List all inventory items in insertion order."""
        return list(self._items.values())

    def delete_item(self, item_id: str) -> bool:
        """Delete an inventory item.

        Args:
            item_id: Inventory item identifier

        Returns:
            bool: True if the item existed, False otherwise
        """
        return self._items.pop(item_id, None) is not None


class RecipeRepository:
    """Repository for recipe records, keyed by id."""

    def __init__(self) -> None:
        """Initialize an empty repository."""
        self._recipes: dict[str, Recipe] = {}

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Retrieve a recipe by id."""
        return self._recipes.get(recipe_id)

    def get_recipe_for_menu_item(self, menu_item_id: str) -> Recipe | None:
        """Retrieve the first recipe producing a menu item.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            Recipe if found, None otherwise
        """
        for recipe in self._recipes.values():
            if recipe.menu_item_id == menu_item_id:
                return recipe
        return None

    def list_recipes_using_items(self, item_ids: set[str]) -> list[Recipe]:
        """List recipes that reference any of the given inventory items.

        Args:
            item_ids: Inventory item identifiers

        Returns:
            list: Matching recipes (empty list if none)
        """
        return [
            recipe
            for recipe in self._recipes.values()
            if any(ing.inventory_item_id in item_ids for ing in recipe.ingredients)
        ]

    def save_recipe(self, recipe: Recipe) -> bool:
        """Save or replace a recipe."""
        self._recipes[recipe.id] = recipe
        return True

    def list_recipes(self) -> list[Recipe]:
        """List all recipes in insertion order."""
        return list(self._recipes.values())

    def delete_recipe(self, recipe_id: str) -> bool:
        """Delete a recipe.

        Returns:
            bool: True if the recipe existed, False otherwise
        """
        return self._recipes.pop(recipe_id, None) is not None


class MenuItemRepository:
    """Repository for the inventory service's copy of menu items."""

    def __init__(self) -> None:
        """Initialize an empty repository."""
        self._menu_items: dict[str, MenuItem] = {}

    def get_menu_item(self, menu_item_id: str) -> MenuItem | None:
        """Retrieve a menu item by id."""
        return self._menu_items.get(menu_item_id)

    def save_menu_item(self, menu_item: MenuItem) -> bool:
        """Save or replace a menu item."""
        self._menu_items[menu_item.id] = menu_item
        return True

    def list_menu_items(self) -> list[MenuItem]:
        """List all menu items in insertion order."""
        return list(self._menu_items.values())

    def delete_menu_item(self, menu_item_id: str) -> bool:
        """Delete a menu item.

        Returns:
            bool: True if the menu item existed, False otherwise
        """
        return self._menu_items.pop(menu_item_id, None) is not None


class StockMovementRepository:
    """Append-only log of stock movements."""

    def __init__(self) -> None:
        """Initialize an empty log."""
        self._movements: list[StockMovement] = []

    def save_movements(self, movements: list[StockMovement]) -> bool:
        """Append movements to the log."""
        self._movements.extend(movements)
        return True

    def list_movements_for_item(self, inventory_item_id: str) -> list[StockMovement]:
        """List movements for one inventory item, oldest first.

        Args:
            inventory_item_id: Inventory item identifier

        Returns:
            list: StockMovements (empty list if none)
        """
        return [m for m in self._movements if m.inventory_item_id == inventory_item_id]
