"""Inventory data models.

These models represent ingredient stock, recipes and the derived results the
ledger computes over them. All quantities are expressed in a base unit and
held as Decimal so stock arithmetic is exact.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator


class BaseUnit(str, Enum):
    """Canonical units in which stock and recipe quantities are stored."""

    GRAM = "g"
    MILLILITER = "ml"
    PIECE = "pcs"


class UnitOfMeasure(str, Enum):
    """Units accepted at data entry, converted to a BaseUnit on ingestion."""

    GRAM = "g"
    KILOGRAM = "kg"
    MILLILITER = "ml"
    LITER = "l"
    POUND = "lb"
    GALLON = "gal"
    OUNCE = "oz"
    PIECE = "pcs"

    @classmethod
    def _missing_(cls, value: object) -> "UnitOfMeasure | None":
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class StockStatus(str, Enum):
    """Stock level relative to the minimum and reorder thresholds."""

    CRITICAL = "critical"
    LOW = "low"
    GOOD = "good"


class StockMovementType(str, Enum):
    """Reason a stock level changed."""

    ADJUSTMENT = "adjustment"
    RESTOCK = "restock"
    ORDER_DEDUCTION = "order_deduction"
    ORDER_RESTORATION = "order_restoration"


class AvailabilityStatus(str, Enum):
    """Outcome of an ingredient availability check."""

    AVAILABLE = "available"
    INSUFFICIENT_STOCK = "insufficient_stock"
    NO_RECIPE = "no_recipe"


class Money(BaseModel):
    """Monetary amount with its currency."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    amount: Decimal = Field(..., description="Monetary amount")
    currency: str = Field(default="PHP", description="ISO currency code")


class NewInventoryItem(BaseModel):
    """Inventory item as handed to the ledger, already in base units."""

    sku: str = Field(..., description="Unique business key", min_length=1)
    name: str = Field(..., description="Ingredient name", min_length=1)
    category: str = Field(..., description="Inventory category")
    current_stock: Decimal = Field(..., description="Stock on hand in base unit", ge=0)
    minimum_stock: Decimal = Field(..., description="Critical threshold in base unit", ge=0)
    reorder_level: Decimal = Field(..., description="Restock threshold in base unit", ge=0)
    unit: BaseUnit = Field(..., description="Base unit of all quantities")
    unit_cost: Money = Field(..., description="Cost per base unit")
    last_restocked: date = Field(default_factory=date.today, description="Last restock date")
    supplier: str = Field(default="", description="Supplier name")

    @model_validator(mode="after")
    def validate_thresholds(self) -> "NewInventoryItem":
        """Validate that the minimum stock does not exceed the reorder level."""
        if self.minimum_stock > self.reorder_level:
            raise ValueError("minimum_stock must not exceed reorder_level")
        return self


class InventoryItem(NewInventoryItem):
    """Inventory item stored in the ledger."""

    id: str = Field(..., description="Unique identifier for the inventory item")


class InventoryItemInput(BaseModel):
    """Inventory item as entered by a user, in any supported unit."""

    sku: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: str
    current_stock: Decimal = Field(..., ge=0)
    minimum_stock: Decimal = Field(..., ge=0)
    reorder_level: Decimal = Field(..., ge=0)
    unit: UnitOfMeasure
    unit_cost: Decimal = Field(..., description="Cost per entered unit", ge=0)
    currency: str = "PHP"
    supplier: str = ""
    last_restocked: date | None = None


class InventoryItemUpdate(BaseModel):
    """Partial update for an inventory item; unset fields are left untouched."""

    sku: str | None = None
    name: str | None = None
    category: str | None = None
    current_stock: Decimal | None = Field(None, ge=0)
    minimum_stock: Decimal | None = Field(None, ge=0)
    reorder_level: Decimal | None = Field(None, ge=0)
    unit: BaseUnit | None = None
    unit_cost: Money | None = None
    last_restocked: date | None = None
    supplier: str | None = None


class RecipeIngredient(BaseModel):
    """Quantity of one inventory item consumed per unit sold."""

    inventory_item_id: str = Field(..., description="Referenced inventory item")
    quantity: Decimal = Field(..., description="Quantity per unit in base unit", gt=0)
    unit: BaseUnit = Field(..., description="Base unit of the referenced item")


class NewRecipe(BaseModel):
    """Recipe as handed to the ledger for registration."""

    menu_item_id: str = Field(..., description="Menu item this recipe produces")
    ingredients: list[RecipeIngredient] = Field(default_factory=list)


class Recipe(NewRecipe):
    """Recipe stored in the ledger."""

    id: str = Field(..., description="Unique identifier for the recipe")


class RecipeUpdate(BaseModel):
    """Partial update for a recipe."""

    menu_item_id: str | None = None
    ingredients: list[RecipeIngredient] | None = None


class StockMovement(BaseModel):
    """Append-only record of a single stock change."""

    id: str
    inventory_item_id: str
    movement_type: StockMovementType
    quantity: Decimal = Field(..., description="Signed change in base unit")
    reason: str | None = None
    reference: str | None = None
    created_at: datetime


class IngredientShortfall(BaseModel):
    """An ingredient that cannot cover a requested quantity."""

    inventory_item_id: str
    required: Decimal
    available: Decimal
    missing: bool = Field(default=False, description="Item no longer exists in the ledger")


class AvailabilityCheck(BaseModel):
    """Detailed result of checking a menu item against current stock."""

    menu_item_id: str
    quantity: int
    status: AvailabilityStatus
    shortfalls: list[IngredientShortfall] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def available(self) -> bool:
        """Whether every ingredient can cover the requested quantity."""
        return self.status == AvailabilityStatus.AVAILABLE


class CategoryValue(BaseModel):
    """Stock value of one inventory category."""

    category: str
    value: Money
    item_count: int = Field(..., ge=0)


class InventoryValue(BaseModel):
    """Total stock value, broken down by category."""

    total_value: Money
    item_count: int = Field(..., ge=0)
    categories: list[CategoryValue] = Field(default_factory=list)

    @field_validator("categories")
    @classmethod
    def sort_categories(cls, v: list[CategoryValue]) -> list[CategoryValue]:
        """Keep categories in name order."""
        return sorted(v, key=lambda c: c.category)
