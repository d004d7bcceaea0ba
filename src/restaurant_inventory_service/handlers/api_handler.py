"""FastAPI application exposing the inventory ledger."""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from decimal import Decimal
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from restaurant_inventory_service.auth.api_dependencies import get_api_key_from_header
from restaurant_inventory_service.auth.api_key_validator import APIKeyValidator
from restaurant_inventory_service.handlers.event_handler import OrderEventHandler
from restaurant_inventory_service.models.inventory_models import (
    AvailabilityCheck,
    InventoryItem,
    InventoryItemInput,
    InventoryItemUpdate,
    InventoryValue,
    Money,
    Recipe,
    RecipeIngredient,
    StockMovement,
    StockStatus,
)
from restaurant_inventory_service.models.menu_models import MenuItem, MenuItemUpdate, NewMenuItem
from restaurant_inventory_service.services.availability_publisher import AvailabilityPublisher
from restaurant_inventory_service.services.errors import (
    AvailabilityManagedError,
    DuplicateRecipeError,
    DuplicateSkuError,
    InvalidQuantityError,
    InventoryNotFoundError,
    MenuItemNotFoundError,
    RecipeNotFoundError,
    UnitMismatchError,
)
from restaurant_inventory_service.services.inventory_ledger import InventoryLedger
from restaurant_inventory_service.services.stock_queries import (
    filter_inventory_items,
    format_stock,
    inventory_value,
    low_stock_items,
    recipe_cost,
    stock_percentage,
    stock_status,
)
from restaurant_inventory_service.services.unit_conversion import normalize_inventory_input

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class StockAdjustmentRequest(BaseModel):
    """Request body for a manual stock adjustment."""

    quantity: Decimal = Field(..., description="Signed change in base unit")
    reason: str = Field(..., min_length=1)


class RestockRequest(BaseModel):
    """Request body for receiving stock."""

    quantity: Decimal = Field(..., gt=0)
    reference: str | None = None


class StockLevelResponse(BaseModel):
    """Stock level of an item with its derived status."""

    inventory_item_id: str
    sku: str
    name: str
    status: StockStatus
    percentage_of_reorder_level: Decimal
    current_stock: str
    minimum_stock: str


class RecipeRequest(BaseModel):
    """Request body for creating or replacing a recipe."""

    ingredients: list[RecipeIngredient]


class RecipeCostResponse(BaseModel):
    """Ingredient cost of one unit of a menu item."""

    menu_item_id: str
    cost: Money


class ReconcileResponse(BaseModel):
    """Menu items whose availability changed during reconciliation."""

    changed_menu_item_ids: list[str]


class OrderLineRequest(BaseModel):
    """Request body for deducting or restoring an order line."""

    menu_item_id: str
    quantity: int = Field(..., gt=0)
    reference: str | None = None


class OrderInventoryResponse(BaseModel):
    """Result of deducting or restoring an order line."""

    menu_item_id: str
    quantity: int
    success: bool
    is_available: bool | None = None


class EventResponse(BaseModel):
    """Result of processing an order event."""

    status_code: int
    body: str


def _stock_level(item: InventoryItem) -> StockLevelResponse:
    return StockLevelResponse(
        inventory_item_id=item.id,
        sku=item.sku,
        name=item.name,
        status=stock_status(item),
        percentage_of_reorder_level=stock_percentage(item),
        current_stock=format_stock(item.current_stock, item.unit),
        minimum_stock=format_stock(item.minimum_stock, item.unit),
    )


def create_app(
    ledger: InventoryLedger,
    api_keys: list[str],
    order_event_handler: OrderEventHandler | None = None,
    availability_publisher: AvailabilityPublisher | None = None,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        ledger: Inventory ledger backing every endpoint
        api_keys: List of valid API keys for authentication
        order_event_handler: Handler for order events (created from the ledger if omitted)
        availability_publisher: Optional publisher flushed after order operations
        lifespan: Optional startup/shutdown context for the application

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Inventory Service API",
        description="Ingredient stock, recipes and menu availability",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.ledger = ledger
    app.state.availability_publisher = availability_publisher
    app.state.order_event_handler = order_event_handler or OrderEventHandler(
        ledger=ledger, availability_publisher=availability_publisher
    )
    app.state.api_key_validator = APIKeyValidator(api_keys=api_keys)

    @app.exception_handler(InventoryNotFoundError)
    async def not_found_handler(_request: Request, exc: InventoryNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DuplicateSkuError)
    @app.exception_handler(DuplicateRecipeError)
    @app.exception_handler(AvailabilityManagedError)
    @app.exception_handler(UnitMismatchError)
    async def conflict_handler(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(InvalidQuantityError)
    @app.exception_handler(ValidationError)
    async def invalid_data_handler(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    def validate_api_key(x_api_key: str | None = Header(None)) -> str:
        """Dependency to validate API key."""
        return get_api_key_from_header(x_api_key=x_api_key, validator=app.state.api_key_validator)

    async def flush_availability() -> None:
        if app.state.availability_publisher is not None:
            await app.state.availability_publisher.flush()

    # Inventory items

    @app.get("/inventory/items", response_model=list[InventoryItem], tags=["Inventory"])
    async def list_inventory_items(
        search: str | None = None,
        category: str | None = None,
        status: StockStatus | None = None,
        _api_key: str = Depends(validate_api_key),
    ) -> list[InventoryItem]:
        """List inventory items, optionally filtered by search term, category and status."""
        items = app.state.ledger.list_inventory_items()
        return filter_inventory_items(items, search=search, category=category, status=status)

    @app.post(
        "/inventory/items", response_model=InventoryItem, status_code=201, tags=["Inventory"]
    )
    async def add_inventory_item(
        item_input: InventoryItemInput,
        _api_key: str = Depends(validate_api_key),
    ) -> InventoryItem:
        """Add an inventory item entered in any supported unit.

        Quantities and unit cost are normalized to the base unit before storage.
        """
        item: InventoryItem = app.state.ledger.add_inventory_item(
            normalize_inventory_input(item_input)
        )
        return item

    @app.get("/inventory/items/sku/{sku}", response_model=InventoryItem, tags=["Inventory"])
    async def get_inventory_item_by_sku(
        sku: str,
        _api_key: str = Depends(validate_api_key),
    ) -> InventoryItem:
        """Get an inventory item by SKU."""
        item: InventoryItem = app.state.ledger.get_inventory_item_by_sku(sku)
        return item

    @app.get("/inventory/items/{item_id}", response_model=InventoryItem, tags=["Inventory"])
    async def get_inventory_item(
        item_id: str,
        _api_key: str = Depends(validate_api_key),
    ) -> InventoryItem:
        """Get an inventory item by id."""
        item: InventoryItem = app.state.ledger.get_inventory_item(item_id)
        return item

    @app.patch("/inventory/items/{item_id}", response_model=InventoryItem, tags=["Inventory"])
    async def update_inventory_item(
        item_id: str,
        updates: InventoryItemUpdate,
        _api_key: str = Depends(validate_api_key),
    ) -> InventoryItem:
        """Update fields of an inventory item (quantities in base unit)."""
        item: InventoryItem = app.state.ledger.update_inventory_item(item_id, updates)
        await flush_availability()
        return item

    @app.delete("/inventory/items/{item_id}", status_code=204, tags=["Inventory"])
    async def delete_inventory_item(
        item_id: str,
        _api_key: str = Depends(validate_api_key),
    ) -> None:
        """Delete an inventory item."""
        app.state.ledger.delete_inventory_item(item_id)
        await flush_availability()

    @app.post(
        "/inventory/items/{item_id}/adjust", response_model=InventoryItem, tags=["Inventory"]
    )
    async def adjust_stock(
        item_id: str,
        request: StockAdjustmentRequest,
        _api_key: str = Depends(validate_api_key),
    ) -> InventoryItem:
        """Apply a signed manual stock adjustment."""
        item: InventoryItem = app.state.ledger.adjust_stock(
            item_id, request.quantity, request.reason
        )
        await flush_availability()
        return item

    @app.post(
        "/inventory/items/{item_id}/restock", response_model=InventoryItem, tags=["Inventory"]
    )
    async def restock_inventory(
        item_id: str,
        request: RestockRequest,
        _api_key: str = Depends(validate_api_key),
    ) -> InventoryItem:
        """Record received stock for an item."""
        item: InventoryItem = app.state.ledger.restock_inventory(
            item_id, request.quantity, reference=request.reference
        )
        await flush_availability()
        return item

    @app.get(
        "/inventory/items/{item_id}/movements",
        response_model=list[StockMovement],
        tags=["Inventory"],
    )
    async def list_stock_movements(
        item_id: str,
        _api_key: str = Depends(validate_api_key),
    ) -> list[StockMovement]:
        """List the stock movements of an item, oldest first."""
        movements: list[StockMovement] = app.state.ledger.list_stock_movements(item_id)
        return movements

    @app.get("/inventory/low-stock", response_model=list[StockLevelResponse], tags=["Inventory"])
    async def get_low_stock_items(
        _api_key: str = Depends(validate_api_key),
    ) -> list[StockLevelResponse]:
        """List items at or below their reorder level."""
        return [_stock_level(item) for item in low_stock_items(app.state.ledger.list_inventory_items())]

    @app.get("/inventory/value", response_model=InventoryValue, tags=["Inventory"])
    async def get_inventory_value(
        category: str | None = None,
        _api_key: str = Depends(validate_api_key),
    ) -> InventoryValue:
        """Value of stock on hand, overall and per category."""
        items = filter_inventory_items(app.state.ledger.list_inventory_items(), category=category)
        try:
            return inventory_value(items)
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

    # Recipes

    @app.get("/recipes", response_model=list[Recipe], tags=["Recipes"])
    async def list_recipes(
        _api_key: str = Depends(validate_api_key),
    ) -> list[Recipe]:
        """List all recipes."""
        recipes: list[Recipe] = app.state.ledger.list_recipes()
        return recipes

    @app.get("/menu-items/{menu_item_id}/recipe", response_model=Recipe, tags=["Recipes"])
    async def get_recipe(
        menu_item_id: str,
        _api_key: str = Depends(validate_api_key),
    ) -> Recipe:
        """Get the recipe of a menu item."""
        recipe: Recipe | None = app.state.ledger.get_recipe_by_menu_item_id(menu_item_id)
        if recipe is None:
            raise RecipeNotFoundError(menu_item_id)
        return recipe

    @app.put("/menu-items/{menu_item_id}/recipe", response_model=Recipe, tags=["Recipes"])
    async def upsert_recipe(
        menu_item_id: str,
        request: RecipeRequest,
        _api_key: str = Depends(validate_api_key),
    ) -> Recipe:
        """Create or replace the recipe of a menu item."""
        recipe: Recipe = app.state.ledger.upsert_recipe(menu_item_id, request.ingredients)
        await flush_availability()
        return recipe

    @app.delete("/menu-items/{menu_item_id}/recipe", status_code=204, tags=["Recipes"])
    async def delete_recipe(
        menu_item_id: str,
        _api_key: str = Depends(validate_api_key),
    ) -> None:
        """Remove the recipe of a menu item."""
        app.state.ledger.delete_recipe(menu_item_id)

    @app.get(
        "/menu-items/{menu_item_id}/recipe-cost",
        response_model=RecipeCostResponse,
        tags=["Recipes"],
    )
    async def get_recipe_cost(
        menu_item_id: str,
        _api_key: str = Depends(validate_api_key),
    ) -> RecipeCostResponse:
        """Ingredient cost of one unit of a menu item."""
        recipe: Recipe | None = app.state.ledger.get_recipe_by_menu_item_id(menu_item_id)
        if recipe is None:
            raise RecipeNotFoundError(menu_item_id)
        return RecipeCostResponse(
            menu_item_id=menu_item_id,
            cost=recipe_cost(recipe, app.state.ledger.list_inventory_items()),
        )

    # Menu items

    @app.get("/menu-items", response_model=list[MenuItem], tags=["Menu"])
    async def list_menu_items(
        _api_key: str = Depends(validate_api_key),
    ) -> list[MenuItem]:
        """List menu items with their current availability."""
        menu_items: list[MenuItem] = app.state.ledger.list_menu_items()
        return menu_items

    @app.post("/menu-items", response_model=MenuItem, status_code=201, tags=["Menu"])
    async def add_menu_item(
        menu_item: NewMenuItem,
        _api_key: str = Depends(validate_api_key),
    ) -> MenuItem:
        """Register a menu item."""
        stored: MenuItem = app.state.ledger.add_menu_item(menu_item)
        return stored

    @app.post("/menu-items/reconcile", response_model=ReconcileResponse, tags=["Menu"])
    async def reconcile_availability(
        _api_key: str = Depends(validate_api_key),
    ) -> ReconcileResponse:
        """Recompute the availability of every menu item with a recipe."""
        changed = app.state.ledger.reconcile_availability()
        await flush_availability()
        return ReconcileResponse(changed_menu_item_ids=changed)

    @app.get("/menu-items/{menu_item_id}", response_model=MenuItem, tags=["Menu"])
    async def get_menu_item(
        menu_item_id: str,
        _api_key: str = Depends(validate_api_key),
    ) -> MenuItem:
        """Get a menu item by id."""
        menu_item: MenuItem = app.state.ledger.get_menu_item(menu_item_id)
        return menu_item

    @app.patch("/menu-items/{menu_item_id}", response_model=MenuItem, tags=["Menu"])
    async def update_menu_item(
        menu_item_id: str,
        updates: MenuItemUpdate,
        _api_key: str = Depends(validate_api_key),
    ) -> MenuItem:
        """Update fields of a menu item.

        is_available can only be set on menu items without a recipe.
        """
        menu_item: MenuItem = app.state.ledger.update_menu_item(menu_item_id, updates)
        return menu_item

    @app.delete("/menu-items/{menu_item_id}", status_code=204, tags=["Menu"])
    async def delete_menu_item(
        menu_item_id: str,
        _api_key: str = Depends(validate_api_key),
    ) -> None:
        """Delete a menu item."""
        app.state.ledger.delete_menu_item(menu_item_id)

    @app.get(
        "/menu-items/{menu_item_id}/availability",
        response_model=AvailabilityCheck,
        tags=["Menu"],
    )
    async def check_availability(
        menu_item_id: str,
        quantity: int = Query(1, gt=0),
        _api_key: str = Depends(validate_api_key),
    ) -> AvailabilityCheck:
        """Check whether current stock covers a quantity of a menu item."""
        check: AvailabilityCheck = app.state.ledger.check_ingredient_availability(
            menu_item_id, quantity
        )
        return check

    # Orders

    def order_response(request: OrderLineRequest, success: bool) -> OrderInventoryResponse:
        try:
            is_available = app.state.ledger.get_menu_item(request.menu_item_id).is_available
        except MenuItemNotFoundError:
            # Menu item not registered locally; the menu service owns it
            is_available = None
        return OrderInventoryResponse(
            menu_item_id=request.menu_item_id,
            quantity=request.quantity,
            success=success,
            is_available=is_available,
        )

    @app.post("/orders/deduct", response_model=OrderInventoryResponse, tags=["Orders"])
    async def deduct_for_order(
        request: OrderLineRequest,
        _api_key: str = Depends(validate_api_key),
    ) -> OrderInventoryResponse:
        """Deduct the ingredients of an order line, all or nothing.

        success is False when stock is insufficient or the menu item has no recipe.
        """
        logger.info(f"Deduction requested for {request.quantity} x {request.menu_item_id}")
        success = app.state.ledger.deduct_inventory_for_order(
            request.menu_item_id, request.quantity, reference=request.reference
        )
        await flush_availability()
        return order_response(request, success)

    @app.post("/orders/restore", response_model=OrderInventoryResponse, tags=["Orders"])
    async def restore_for_order(
        request: OrderLineRequest,
        _api_key: str = Depends(validate_api_key),
    ) -> OrderInventoryResponse:
        """Restore the ingredients of a cancelled order line."""
        logger.info(f"Restoration requested for {request.quantity} x {request.menu_item_id}")
        app.state.ledger.restore_inventory_for_order(
            request.menu_item_id, request.quantity, reference=request.reference
        )
        await flush_availability()
        return order_response(request, True)

    @app.post("/events/orders", response_model=EventResponse, tags=["Orders"])
    async def receive_order_event(
        event: dict[str, Any],
        _api_key: str = Depends(validate_api_key),
    ) -> JSONResponse:
        """Process an order-line event envelope."""
        result = await app.state.order_event_handler.handle_event(event)
        return JSONResponse(
            status_code=result["statusCode"],
            content=EventResponse(status_code=result["statusCode"], body=result["body"]).model_dump(),
        )

    return app
