"""Menu data models.

Menu items are owned by the menu-management service. The inventory service
keeps its own copy so it can maintain the is_available flag, which it derives
from ingredient stock.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class NewMenuItem(BaseModel):
    """Menu item as registered with the inventory service."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    name: str = Field(..., description="Item name")
    description: str = Field(default="", description="Item description")
    category: str = Field(..., description="Menu category")
    price: Decimal = Field(..., description="Item price", ge=0)
    is_available: bool = Field(default=True, description="Whether item can currently be sold")
    recipe_id: str | None = Field(None, description="Recipe producing this item")


class MenuItem(NewMenuItem):
    """Menu item model."""

    id: str = Field(..., description="Unique identifier for the menu item")


class MenuItemUpdate(BaseModel):
    """Partial update for a menu item."""

    name: str | None = None
    description: str | None = None
    category: str | None = None
    price: Decimal | None = Field(None, ge=0)
    is_available: bool | None = None
