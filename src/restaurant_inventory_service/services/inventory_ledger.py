"""Inventory ledger for reconciling ingredient stock with menu availability."""

import logging
import threading
import uuid
from collections.abc import Callable
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from restaurant_inventory_service.models.inventory_models import (
    AvailabilityCheck,
    AvailabilityStatus,
    BaseUnit,
    IngredientShortfall,
    InventoryItem,
    InventoryItemUpdate,
    NewInventoryItem,
    NewRecipe,
    Recipe,
    RecipeIngredient,
    RecipeUpdate,
    StockMovement,
    StockMovementType,
)
from restaurant_inventory_service.models.menu_models import MenuItem, MenuItemUpdate, NewMenuItem
from restaurant_inventory_service.observability.decorators import traced
from restaurant_inventory_service.observability.metrics import (
    record_availability_change,
    record_order_deduction,
    record_order_rejection,
    record_order_restoration,
)
from restaurant_inventory_service.repositories.inventory_repositories import (
    InventoryItemRepository,
    MenuItemRepository,
    RecipeRepository,
    StockMovementRepository,
)
from restaurant_inventory_service.services.errors import (
    AvailabilityManagedError,
    DuplicateRecipeError,
    DuplicateSkuError,
    InvalidQuantityError,
    InventoryItemNotFoundError,
    MenuItemNotFoundError,
    RecipeNotFoundError,
    UnitMismatchError,
)

logger = logging.getLogger(__name__)

# Called with (menu_item_id, is_available) after every availability transition
AvailabilityListener = Callable[[str, bool], None]


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class InventoryLedger:
    """Owner of ingredient stock, recipes and derived menu availability.

    The ledger is the only component allowed to change stock levels or the
    is_available flag of a menu item that has a recipe. Every operation that
    reads stock for a decision or changes state runs under a per-instance
    lock, so concurrent orders competing for the same ingredient cannot both
    pass the availability check and drive stock negative.

    Insufficient stock is reported through boolean results, never raised.
    Unknown ids raise InventoryNotFoundError subclasses.
    """

    def __init__(
        self,
        item_repository: InventoryItemRepository | None = None,
        recipe_repository: RecipeRepository | None = None,
        menu_item_repository: MenuItemRepository | None = None,
        movement_repository: StockMovementRepository | None = None,
        availability_listener: AvailabilityListener | None = None,
    ) -> None:
        """Initialize the ledger.

        Args:
            item_repository: Store for inventory items
            recipe_repository: Store for recipes
            menu_item_repository: Store for the local copy of menu items
            movement_repository: Append-only stock movement log
            availability_listener: Optional callback notified of availability transitions
        """
        self.item_repository = item_repository or InventoryItemRepository()
        self.recipe_repository = recipe_repository or RecipeRepository()
        self.menu_item_repository = menu_item_repository or MenuItemRepository()
        self.movement_repository = movement_repository or StockMovementRepository()
        self.availability_listener = availability_listener
        self._lock = threading.RLock()

    # Inventory items

    @traced("inventory.add_item")
    def add_inventory_item(self, item: NewInventoryItem) -> InventoryItem:
        """Add an inventory item under a new id.

        Quantities are stored as given; callers normalize to base units first.

        Args:
            item: Item data in base units

        Returns:
            The stored InventoryItem

        Raises:
            DuplicateSkuError: If another item already uses the SKU
        """
        with self._lock:
            if self.item_repository.get_item_by_sku(item.sku) is not None:
                raise DuplicateSkuError(item.sku)

            stored = InventoryItem(id=_new_id("inv"), **item.model_dump())
            self.item_repository.save_item(stored)

        logger.info(f"Added inventory item {stored.id} ({stored.sku})")
        return stored.model_copy(deep=True)

    def get_inventory_item(self, item_id: str) -> InventoryItem:
        """Get an inventory item by id.

        Raises:
            InventoryItemNotFoundError: If the id is unknown
        """
        with self._lock:
            return self._require_item(item_id).model_copy(deep=True)

    def get_inventory_item_by_sku(self, sku: str) -> InventoryItem:
        """Get an inventory item by SKU.

        Raises:
            InventoryItemNotFoundError: If no item has the SKU
        """
        with self._lock:
            item = self.item_repository.get_item_by_sku(sku)
            if item is None:
                raise InventoryItemNotFoundError(sku)
            return item.model_copy(deep=True)

    def list_inventory_items(self) -> list[InventoryItem]:
        """List all inventory items."""
        with self._lock:
            return [item.model_copy(deep=True) for item in self.item_repository.list_items()]

    @traced("inventory.update_item")
    def update_inventory_item(
        self, item_id: str, updates: InventoryItemUpdate | dict[str, Any]
    ) -> InventoryItem:
        """Merge partial fields into an inventory item.

        A change of current_stock is logged as an adjustment movement and
        refreshes the availability of menu items using the item.

        Args:
            item_id: Inventory item identifier
            updates: Fields to change; unset fields are left untouched

        Returns:
            The updated InventoryItem

        Raises:
            InventoryItemNotFoundError: If the id is unknown
            DuplicateSkuError: If the new SKU belongs to another item
            UnitMismatchError: If the unit changes while recipes still use the item
            pydantic.ValidationError: If the merged item is inconsistent
        """
        if not isinstance(updates, InventoryItemUpdate):
            updates = InventoryItemUpdate(**updates)
        fields = updates.model_dump(exclude_unset=True)

        with self._lock:
            item = self._require_item(item_id)

            new_sku = fields.get("sku")
            if new_sku is not None and new_sku != item.sku:
                existing = self.item_repository.get_item_by_sku(new_sku)
                if existing is not None and existing.id != item_id:
                    raise DuplicateSkuError(new_sku)

            new_unit = fields.get("unit")
            if new_unit is not None and new_unit != item.unit and self._menu_items_using({item_id}):
                raise UnitMismatchError(item_id, item.unit.value, BaseUnit(new_unit).value)

            updated = InventoryItem.model_validate({**item.model_dump(), **fields})
            self.item_repository.save_item(updated)

            delta = updated.current_stock - item.current_stock
            if delta != 0:
                self._record_movements(
                    {item_id: delta}, StockMovementType.ADJUSTMENT, reason="stock level updated"
                )
                self._notify(self._refresh_availability(self._menu_items_using({item_id})))

        return updated.model_copy(deep=True)

    def delete_inventory_item(self, item_id: str) -> None:
        """Delete an inventory item.

        Recipes referencing the item stay registered; their menu items become
        unavailable.

        Raises:
            InventoryItemNotFoundError: If the id is unknown
        """
        with self._lock:
            self._require_item(item_id)
            self.item_repository.delete_item(item_id)
            changes = self._refresh_availability(self._menu_items_using({item_id}))
            self._notify(changes)

        logger.info(f"Deleted inventory item {item_id}")

    @traced("inventory.adjust_stock")
    def adjust_stock(self, item_id: str, quantity: Decimal, reason: str) -> InventoryItem:
        """Apply a signed manual adjustment to an item's stock.

        Args:
            item_id: Inventory item identifier
            quantity: Signed change in the item's base unit
            reason: Why the stock was adjusted (e.g. "waste", "count correction")

        Returns:
            The updated InventoryItem

        Raises:
            InventoryItemNotFoundError: If the id is unknown
            InvalidQuantityError: If the change is zero or would leave negative stock
        """
        if quantity == 0:
            raise InvalidQuantityError("Stock adjustment must be non-zero")

        with self._lock:
            item = self._require_item(item_id)
            new_stock = item.current_stock + quantity
            if new_stock < 0:
                raise InvalidQuantityError(
                    f"Adjustment of {quantity} would leave {item.sku} below zero stock"
                )

            updated = item.model_copy(update={"current_stock": new_stock})
            self.item_repository.save_item(updated)
            self._record_movements({item_id: quantity}, StockMovementType.ADJUSTMENT, reason=reason)
            changes = self._refresh_availability(self._menu_items_using({item_id}))
            self._notify(changes)

        logger.info(f"Adjusted stock of {item_id} by {quantity}: {reason}")
        return updated.model_copy(deep=True)

    @traced("inventory.restock")
    def restock_inventory(
        self, item_id: str, quantity: Decimal, reference: str | None = None
    ) -> InventoryItem:
        """Add received stock to an item and stamp its restock date.

        Args:
            item_id: Inventory item identifier
            quantity: Received quantity in the item's base unit
            reference: Optional purchase order reference

        Returns:
            The updated InventoryItem

        Raises:
            InventoryItemNotFoundError: If the id is unknown
            InvalidQuantityError: If quantity is not positive
        """
        if quantity <= 0:
            raise InvalidQuantityError("Restock quantity must be positive")

        with self._lock:
            item = self._require_item(item_id)
            updated = item.model_copy(
                update={
                    "current_stock": item.current_stock + quantity,
                    "last_restocked": date.today(),
                }
            )
            self.item_repository.save_item(updated)
            self._record_movements(
                {item_id: quantity}, StockMovementType.RESTOCK, reference=reference
            )
            changes = self._refresh_availability(self._menu_items_using({item_id}))
            self._notify(changes)

        logger.info(f"Restocked {item_id} with {quantity} {item.unit.value}")
        return updated.model_copy(deep=True)

    def list_stock_movements(self, item_id: str) -> list[StockMovement]:
        """List the stock movements of an item, oldest first.

        Raises:
            InventoryItemNotFoundError: If the id is unknown
        """
        with self._lock:
            self._require_item(item_id)
            return [
                m.model_copy(deep=True)
                for m in self.movement_repository.list_movements_for_item(item_id)
            ]

    # Recipes

    def get_recipe_by_menu_item_id(self, menu_item_id: str) -> Recipe | None:
        """Return the recipe registered for a menu item, if any."""
        with self._lock:
            recipe = self.recipe_repository.get_recipe_for_menu_item(menu_item_id)
            return recipe.model_copy(deep=True) if recipe else None

    def list_recipes(self) -> list[Recipe]:
        """List all recipes."""
        with self._lock:
            return [r.model_copy(deep=True) for r in self.recipe_repository.list_recipes()]

    def add_recipe(self, recipe: NewRecipe) -> Recipe:
        """Register a recipe for a menu item.

        Raises:
            DuplicateRecipeError: If the menu item already has a recipe
            UnitMismatchError: If a line's unit differs from its inventory item's unit
        """
        with self._lock:
            stored, changes = self._insert_recipe(recipe)
            self._notify(changes)

        logger.info(f"Registered recipe {stored.id} for menu item {stored.menu_item_id}")
        return stored.model_copy(deep=True)

    def update_recipe(self, recipe_id: str, updates: RecipeUpdate) -> Recipe:
        """Merge partial fields into a recipe.

        Raises:
            RecipeNotFoundError: If the id is unknown
            DuplicateRecipeError: If moved onto a menu item that has another recipe
            UnitMismatchError: If a line's unit differs from its inventory item's unit
        """
        fields = updates.model_dump(exclude_unset=True)

        with self._lock:
            updated, changes = self._merge_recipe(recipe_id, fields)
            self._notify(changes)

        return updated.model_copy(deep=True)

    def upsert_recipe(self, menu_item_id: str, ingredients: list[RecipeIngredient]) -> Recipe:
        """Create or replace the recipe of a menu item."""
        with self._lock:
            existing = self.recipe_repository.get_recipe_for_menu_item(menu_item_id)
            if existing is None:
                recipe, changes = self._insert_recipe(
                    NewRecipe(menu_item_id=menu_item_id, ingredients=ingredients)
                )
                logger.info(f"Registered recipe {recipe.id} for menu item {menu_item_id}")
            else:
                recipe, changes = self._merge_recipe(
                    existing.id, RecipeUpdate(ingredients=ingredients).model_dump(exclude_unset=True)
                )
            self._notify(changes)

        return recipe.model_copy(deep=True)

    def delete_recipe(self, menu_item_id: str) -> None:
        """Remove the recipe of a menu item.

        The menu item keeps its last availability flag, which becomes settable
        through update_menu_item again.

        Raises:
            RecipeNotFoundError: If the menu item has no recipe
        """
        with self._lock:
            recipe = self.recipe_repository.get_recipe_for_menu_item(menu_item_id)
            if recipe is None:
                raise RecipeNotFoundError(menu_item_id)
            self.recipe_repository.delete_recipe(recipe.id)
            self._link_recipe(menu_item_id, None)

        logger.info(f"Deleted recipe {recipe.id} of menu item {menu_item_id}")

    # Menu items

    def add_menu_item(self, menu_item: NewMenuItem) -> MenuItem:
        """Register a new menu item under a new id."""
        with self._lock:
            stored = MenuItem(id=_new_id("menu"), **menu_item.model_dump())
            self.menu_item_repository.save_menu_item(stored)
        return stored.model_copy(deep=True)

    def register_menu_items(self, menu_items: list[MenuItem]) -> list[MenuItem]:
        """Register menu items that already have ids, e.g. from the menu service.

        Availability of items with a recipe is recomputed immediately.

        Args:
            menu_items: Menu items to store, replacing any with the same id

        Returns:
            The stored menu items
        """
        with self._lock:
            for menu_item in menu_items:
                recipe = self.recipe_repository.get_recipe_for_menu_item(menu_item.id)
                stored = menu_item.model_copy(update={"recipe_id": recipe.id if recipe else None})
                self.menu_item_repository.save_menu_item(stored)
            changes = self._refresh_availability([m.id for m in menu_items])
            stored_items = [self._require_menu_item(m.id).model_copy(deep=True) for m in menu_items]
            self._notify(changes)

        return stored_items

    def get_menu_item(self, menu_item_id: str) -> MenuItem:
        """Get a menu item by id.

        Raises:
            MenuItemNotFoundError: If the id is unknown
        """
        with self._lock:
            return self._require_menu_item(menu_item_id).model_copy(deep=True)

    def list_menu_items(self) -> list[MenuItem]:
        """List all menu items."""
        with self._lock:
            return [m.model_copy(deep=True) for m in self.menu_item_repository.list_menu_items()]

    def update_menu_item(self, menu_item_id: str, updates: MenuItemUpdate) -> MenuItem:
        """Merge partial fields into a menu item.

        Raises:
            MenuItemNotFoundError: If the id is unknown
            AvailabilityManagedError: If is_available is set on an item with a recipe
        """
        fields = updates.model_dump(exclude_unset=True)

        with self._lock:
            menu_item = self._require_menu_item(menu_item_id)
            if "is_available" in fields and (
                self.recipe_repository.get_recipe_for_menu_item(menu_item_id) is not None
            ):
                raise AvailabilityManagedError(menu_item_id)

            updated = MenuItem.model_validate({**menu_item.model_dump(), **fields})
            self.menu_item_repository.save_menu_item(updated)

        return updated.model_copy(deep=True)

    def delete_menu_item(self, menu_item_id: str) -> None:
        """Delete a menu item; its recipe, if any, stays registered.

        Raises:
            MenuItemNotFoundError: If the id is unknown
        """
        with self._lock:
            self._require_menu_item(menu_item_id)
            self.menu_item_repository.delete_menu_item(menu_item_id)

    # Availability and orders

    @traced("inventory.check_availability")
    def check_ingredient_availability(self, menu_item_id: str, quantity: int) -> AvailabilityCheck:
        """Check whether current stock covers a quantity of a menu item.

        Args:
            menu_item_id: Menu item to produce
            quantity: Number of units requested

        Returns:
            AvailabilityCheck telling apart a missing recipe from a shortfall

        Raises:
            InvalidQuantityError: If quantity is not positive
        """
        self._validate_quantity(quantity)
        with self._lock:
            return self._evaluate(menu_item_id, quantity)

    def check_availability(self, menu_item_id: str, quantity: int) -> bool:
        """Return True if every ingredient covers the requested quantity.

        False when the menu item has no recipe or a referenced item is missing.
        """
        return self.check_ingredient_availability(menu_item_id, quantity).available

    @traced("inventory.deduct_for_order")
    def deduct_inventory_for_order(
        self, menu_item_id: str, quantity: int, reference: str | None = None
    ) -> bool:
        """Deduct the ingredients of an order line, all or nothing.

        Availability is re-checked inside the critical section. If any
        ingredient falls short nothing changes. Otherwise every ingredient is
        reduced in one update and the availability of every menu item sharing
        those ingredients is recomputed with a single-unit check.

        Args:
            menu_item_id: Menu item ordered
            quantity: Number of units ordered
            reference: Optional order reference recorded on the movements

        Returns:
            True if stock was deducted, False if it was insufficient or there is no recipe

        Raises:
            InvalidQuantityError: If quantity is not positive
        """
        self._validate_quantity(quantity)

        with self._lock:
            check = self._evaluate(menu_item_id, quantity)
            recipe = self.recipe_repository.get_recipe_for_menu_item(menu_item_id)
            if recipe is None or not check.available:
                logger.info(
                    f"Rejected deduction of {quantity} x {menu_item_id}: {check.status.value}"
                )
                record_order_rejection(menu_item_id, check.status.value)
                return False

            required = self._required_quantities(recipe, quantity)

            updated: list[InventoryItem] = []
            for item_id, amount in required.items():
                item = self._require_item(item_id)
                updated.append(item.model_copy(update={"current_stock": item.current_stock - amount}))
            self.item_repository.save_items(updated)
            self._record_movements(
                {item_id: -amount for item_id, amount in required.items()},
                StockMovementType.ORDER_DEDUCTION,
                reference=reference,
            )
            changes = self._refresh_availability(
                [menu_item_id, *self._menu_items_using(set(required))]
            )
            self._notify(changes)

        logger.info(f"Deducted inventory for {quantity} x {menu_item_id}")
        record_order_deduction(menu_item_id, quantity)
        return True

    @traced("inventory.restore_for_order")
    def restore_inventory_for_order(
        self, menu_item_id: str, quantity: int, reference: str | None = None
    ) -> None:
        """Put back the ingredients of a cancelled order line.

        Stock is not re-validated since it only increases. Ingredients whose
        inventory item no longer exists are skipped. No-op without a recipe.

        Args:
            menu_item_id: Menu item whose order line was cancelled
            quantity: Number of units to restore
            reference: Optional order reference recorded on the movements

        Raises:
            InvalidQuantityError: If quantity is not positive
        """
        self._validate_quantity(quantity)

        with self._lock:
            recipe = self.recipe_repository.get_recipe_for_menu_item(menu_item_id)
            if recipe is None:
                logger.info(f"No recipe for menu item {menu_item_id}, nothing to restore")
                return

            updated: list[InventoryItem] = []
            restored: dict[str, Decimal] = {}
            for item_id, amount in self._required_quantities(recipe, quantity).items():
                item = self.item_repository.get_item(item_id)
                if item is None:
                    logger.warning(f"Skipping restore of missing inventory item {item_id}")
                    continue
                updated.append(item.model_copy(update={"current_stock": item.current_stock + amount}))
                restored[item_id] = amount

            self.item_repository.save_items(updated)
            self._record_movements(
                restored, StockMovementType.ORDER_RESTORATION, reference=reference
            )
            changes = self._refresh_availability(
                [menu_item_id, *self._menu_items_using(set(restored))]
            )
            self._notify(changes)

        logger.info(f"Restored inventory for {quantity} x {menu_item_id}")
        record_order_restoration(menu_item_id, quantity)

    def reconcile_availability(self) -> list[str]:
        """Recompute the availability of every menu item that has a recipe.

        Returns:
            Ids of the menu items whose flag changed
        """
        with self._lock:
            changes = self._refresh_availability(
                [m.id for m in self.menu_item_repository.list_menu_items()]
            )
            self._notify(changes)

        return [menu_item_id for menu_item_id, _ in changes]

    # Internals; callers hold the lock

    def _require_item(self, item_id: str) -> InventoryItem:
        item = self.item_repository.get_item(item_id)
        if item is None:
            raise InventoryItemNotFoundError(item_id)
        return item

    def _require_menu_item(self, menu_item_id: str) -> MenuItem:
        menu_item = self.menu_item_repository.get_menu_item(menu_item_id)
        if menu_item is None:
            raise MenuItemNotFoundError(menu_item_id)
        return menu_item

    @staticmethod
    def _validate_quantity(quantity: int) -> None:
        if quantity <= 0:
            raise InvalidQuantityError(f"Quantity must be positive, got {quantity}")

    @staticmethod
    def _required_quantities(recipe: Recipe, quantity: int) -> dict[str, Decimal]:
        """Total quantity needed per inventory item; repeated lines are summed."""
        required: dict[str, Decimal] = {}
        for ingredient in recipe.ingredients:
            item_id = ingredient.inventory_item_id
            required[item_id] = required.get(item_id, Decimal(0)) + ingredient.quantity * quantity
        return required

    def _evaluate(self, menu_item_id: str, quantity: int) -> AvailabilityCheck:
        recipe = self.recipe_repository.get_recipe_for_menu_item(menu_item_id)
        if recipe is None:
            return AvailabilityCheck(
                menu_item_id=menu_item_id, quantity=quantity, status=AvailabilityStatus.NO_RECIPE
            )

        shortfalls: list[IngredientShortfall] = []
        for item_id, required in self._required_quantities(recipe, quantity).items():
            item = self.item_repository.get_item(item_id)
            if item is None:
                shortfalls.append(
                    IngredientShortfall(
                        inventory_item_id=item_id,
                        required=required,
                        available=Decimal(0),
                        missing=True,
                    )
                )
            elif item.current_stock < required:
                shortfalls.append(
                    IngredientShortfall(
                        inventory_item_id=item_id,
                        required=required,
                        available=item.current_stock,
                    )
                )

        return AvailabilityCheck(
            menu_item_id=menu_item_id,
            quantity=quantity,
            status=(
                AvailabilityStatus.INSUFFICIENT_STOCK if shortfalls else AvailabilityStatus.AVAILABLE
            ),
            shortfalls=shortfalls,
        )

    def _menu_items_using(self, item_ids: set[str]) -> list[str]:
        return [r.menu_item_id for r in self.recipe_repository.list_recipes_using_items(item_ids)]

    def _refresh_availability(self, menu_item_ids: list[str]) -> list[tuple[str, bool]]:
        """Set is_available from a single-unit check; returns the transitions."""
        changes: list[tuple[str, bool]] = []
        for menu_item_id in dict.fromkeys(menu_item_ids):
            menu_item = self.menu_item_repository.get_menu_item(menu_item_id)
            if menu_item is None:
                continue
            if self.recipe_repository.get_recipe_for_menu_item(menu_item_id) is None:
                continue

            available = self._evaluate(menu_item_id, 1).available
            if menu_item.is_available != available:
                self.menu_item_repository.save_menu_item(
                    menu_item.model_copy(update={"is_available": available})
                )
                changes.append((menu_item_id, available))
        return changes

    def _insert_recipe(self, recipe: NewRecipe) -> tuple[Recipe, list[tuple[str, bool]]]:
        if self.recipe_repository.get_recipe_for_menu_item(recipe.menu_item_id) is not None:
            raise DuplicateRecipeError(recipe.menu_item_id)
        self._validate_recipe_units(recipe.ingredients)

        stored = Recipe(id=_new_id("rcp"), **recipe.model_dump())
        self.recipe_repository.save_recipe(stored)
        self._link_recipe(stored.menu_item_id, stored.id)
        return stored, self._refresh_availability([stored.menu_item_id])

    def _merge_recipe(
        self, recipe_id: str, fields: dict[str, Any]
    ) -> tuple[Recipe, list[tuple[str, bool]]]:
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)

        updated = Recipe.model_validate({**recipe.model_dump(), **fields})
        self._validate_recipe_units(updated.ingredients)
        if updated.menu_item_id != recipe.menu_item_id:
            if self.recipe_repository.get_recipe_for_menu_item(updated.menu_item_id) is not None:
                raise DuplicateRecipeError(updated.menu_item_id)
            self._link_recipe(recipe.menu_item_id, None)

        self.recipe_repository.save_recipe(updated)
        self._link_recipe(updated.menu_item_id, updated.id)
        return updated, self._refresh_availability([updated.menu_item_id])

    def _validate_recipe_units(self, ingredients: list[RecipeIngredient]) -> None:
        """Recipe lines must use the base unit of the item they draw from."""
        for ingredient in ingredients:
            item = self.item_repository.get_item(ingredient.inventory_item_id)
            if item is not None and ingredient.unit != item.unit:
                raise UnitMismatchError(item.id, item.unit.value, ingredient.unit.value)

    def _link_recipe(self, menu_item_id: str, recipe_id: str | None) -> None:
        menu_item = self.menu_item_repository.get_menu_item(menu_item_id)
        if menu_item is not None:
            self.menu_item_repository.save_menu_item(
                menu_item.model_copy(update={"recipe_id": recipe_id})
            )

    def _record_movements(
        self,
        deltas: dict[str, Decimal],
        movement_type: StockMovementType,
        reason: str | None = None,
        reference: str | None = None,
    ) -> None:
        now = datetime.now(UTC)
        self.movement_repository.save_movements(
            [
                StockMovement(
                    id=_new_id("mov"),
                    inventory_item_id=item_id,
                    movement_type=movement_type,
                    quantity=delta,
                    reason=reason,
                    reference=reference,
                    created_at=now,
                )
                for item_id, delta in deltas.items()
            ]
        )

    def _notify(self, changes: list[tuple[str, bool]]) -> None:
        """Report committed availability transitions.

        Called before the lock is released, so the listener sees transitions
        in commit order. Listeners must only queue work, never block.
        """
        for menu_item_id, is_available in changes:
            state = "available" if is_available else "unavailable"
            logger.info(f"Menu item {menu_item_id} is now {state}")
            record_availability_change(menu_item_id, is_available)
            if self.availability_listener is not None:
                self.availability_listener(menu_item_id, is_available)
