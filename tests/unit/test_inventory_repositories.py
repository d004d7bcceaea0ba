"""Unit tests for the in-memory inventory repositories."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from restaurant_inventory_service.models.inventory_models import (
    BaseUnit,
    InventoryItem,
    Money,
    Recipe,
    RecipeIngredient,
    StockMovement,
    StockMovementType,
)
from restaurant_inventory_service.models.menu_models import MenuItem
from restaurant_inventory_service.repositories.inventory_repositories import (
    InventoryItemRepository,
    MenuItemRepository,
    RecipeRepository,
    StockMovementRepository,
)


def _item(item_id: str, sku: str, stock: str = "100") -> InventoryItem:
    return InventoryItem(
        id=item_id,
        sku=sku,
        name=f"Item {sku}",
        category="Dry Goods",
        current_stock=Decimal(stock),
        minimum_stock=Decimal("10"),
        reorder_level=Decimal("20"),
        unit=BaseUnit.GRAM,
        unit_cost=Money(amount=Decimal("1")),
    )


def _recipe(recipe_id: str, menu_item_id: str, *item_ids: str) -> Recipe:
    return Recipe(
        id=recipe_id,
        menu_item_id=menu_item_id,
        ingredients=[
            RecipeIngredient(inventory_item_id=item_id, quantity=Decimal("10"), unit=BaseUnit.GRAM)
            for item_id in item_ids
        ],
    )


@pytest.mark.unit
class TestInventoryItemRepository:
    """Test suite for InventoryItemRepository."""

    @pytest.fixture
    def repository(self) -> InventoryItemRepository:
        """Create an empty repository."""
        return InventoryItemRepository()

    def test_save_and_get_item(self, repository: InventoryItemRepository) -> None:
        """Test saving an item and reading it back by id and SKU."""
        item = _item("inv_1", "ING-001")

        assert repository.save_item(item) is True
        assert repository.get_item("inv_1") == item
        assert repository.get_item_by_sku("ING-001") == item

    def test_get_missing_item(self, repository: InventoryItemRepository) -> None:
        """Test that unknown ids and SKUs return None."""
        assert repository.get_item("inv_missing") is None
        assert repository.get_item_by_sku("ING-404") is None

    def test_save_items_replaces_existing(self, repository: InventoryItemRepository) -> None:
        """Test that save_items stores several items in one step."""
        repository.save_item(_item("inv_1", "ING-001", "100"))

        repository.save_items([_item("inv_1", "ING-001", "50"), _item("inv_2", "ING-002")])

        assert repository.get_item("inv_1").current_stock == Decimal("50")
        assert [i.id for i in repository.list_items()] == ["inv_1", "inv_2"]

    def test_delete_item(self, repository: InventoryItemRepository) -> None:
        """Test that delete reports whether the item existed."""
        repository.save_item(_item("inv_1", "ING-001"))

        assert repository.delete_item("inv_1") is True
        assert repository.delete_item("inv_1") is False
        assert repository.list_items() == []


@pytest.mark.unit
class TestRecipeRepository:
    """Test suite for RecipeRepository."""

    def test_get_recipe_for_menu_item(self) -> None:
        """Test looking a recipe up by its menu item."""
        repository = RecipeRepository()
        recipe = _recipe("rcp_1", "menu_1", "inv_1")
        repository.save_recipe(recipe)

        assert repository.get_recipe("rcp_1") == recipe
        assert repository.get_recipe_for_menu_item("menu_1") == recipe
        assert repository.get_recipe_for_menu_item("menu_2") is None

    def test_list_recipes_using_items(self) -> None:
        """Test finding recipes that share an inventory item."""
        repository = RecipeRepository()
        repository.save_recipe(_recipe("rcp_1", "menu_1", "inv_1", "inv_2"))
        repository.save_recipe(_recipe("rcp_2", "menu_2", "inv_2", "inv_3"))
        repository.save_recipe(_recipe("rcp_3", "menu_3", "inv_4"))

        using = repository.list_recipes_using_items({"inv_2"})

        assert [r.id for r in using] == ["rcp_1", "rcp_2"]
        assert repository.list_recipes_using_items({"inv_9"}) == []

    def test_delete_recipe(self) -> None:
        """Test deleting a recipe."""
        repository = RecipeRepository()
        repository.save_recipe(_recipe("rcp_1", "menu_1", "inv_1"))

        assert repository.delete_recipe("rcp_1") is True
        assert repository.delete_recipe("rcp_1") is False
        assert repository.list_recipes() == []


@pytest.mark.unit
class TestMenuItemRepository:
    """Test suite for MenuItemRepository."""

    def test_crud(self) -> None:
        """Test saving, listing and deleting menu items."""
        repository = MenuItemRepository()
        menu_item = MenuItem(id="1", name="Pizza", category="Main Course", price=Decimal("650"))

        repository.save_menu_item(menu_item)

        assert repository.get_menu_item("1") == menu_item
        assert repository.list_menu_items() == [menu_item]
        assert repository.delete_menu_item("1") is True
        assert repository.get_menu_item("1") is None


@pytest.mark.unit
class TestStockMovementRepository:
    """Test suite for StockMovementRepository."""

    def test_movements_filtered_by_item_in_order(self) -> None:
        """Test that movements are listed per item, oldest first."""
        repository = StockMovementRepository()
        now = datetime.now(UTC)
        movements = [
            StockMovement(
                id=f"mov_{n}",
                inventory_item_id=item_id,
                movement_type=StockMovementType.ADJUSTMENT,
                quantity=Decimal(n),
                created_at=now,
            )
            for n, item_id in enumerate(["inv_1", "inv_2", "inv_1"], start=1)
        ]

        repository.save_movements(movements)

        assert [m.id for m in repository.list_movements_for_item("inv_1")] == ["mov_1", "mov_3"]
        assert repository.list_movements_for_item("inv_9") == []
