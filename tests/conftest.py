"""Shared pytest fixtures and configuration for all tests."""

import os
from datetime import date
from decimal import Decimal

import pytest

# Keep src.main from building the application at import time
os.environ.setdefault("ENVIRONMENT", "test")

from restaurant_inventory_service.models.inventory_models import (  # noqa: E402
    BaseUnit,
    Money,
    NewInventoryItem,
)
from restaurant_inventory_service.services.demo_seed import seed_demo_data  # noqa: E402
from restaurant_inventory_service.services.inventory_ledger import InventoryLedger  # noqa: E402


@pytest.fixture
def ledger() -> InventoryLedger:
    """Fixture providing an empty inventory ledger."""
    return InventoryLedger()


@pytest.fixture
def seeded_ledger() -> InventoryLedger:
    """Fixture providing a ledger loaded with the demo pizza kitchen."""
    ledger = InventoryLedger()
    seed_demo_data(ledger)
    return ledger


@pytest.fixture
def flour() -> NewInventoryItem:
    """Fixture providing a flour inventory item with 25kg on hand."""
    return NewInventoryItem(
        sku="ING-001",
        name="Flour",
        category="Dry Goods",
        current_stock=Decimal("25000"),
        minimum_stock=Decimal("5000"),
        reorder_level=Decimal("10000"),
        unit=BaseUnit.GRAM,
        unit_cost=Money(amount=Decimal("0.10")),
        last_restocked=date(2024, 10, 18),
        supplier="Grain Suppliers Co.",
    )


@pytest.fixture
def cheese() -> NewInventoryItem:
    """Fixture providing a mozzarella inventory item with 2.5kg on hand."""
    return NewInventoryItem(
        sku="ING-002",
        name="Cheese (Mozzarella)",
        category="Dairy",
        current_stock=Decimal("2500"),
        minimum_stock=Decimal("500"),
        reorder_level=Decimal("1000"),
        unit=BaseUnit.GRAM,
        unit_cost=Money(amount=Decimal("0.60")),
        last_restocked=date(2024, 10, 19),
        supplier="Dairy Delights",
    )


@pytest.fixture
def mock_order_event() -> dict:
    """Fixture providing a sample order-line confirmed event."""
    return {
        "version": "0",
        "id": "event_123",
        "detail-type": "OrderLineConfirmed",
        "source": "order-service",
        "time": "2024-10-21T12:00:00Z",
        "detail": {
            "order_id": "order_1",
            "line_id": "line_1",
            "menu_item_id": "2",
            "quantity": 1,
            "event_type": "order.line.confirmed",
            "timestamp": "2024-10-21T12:00:00Z",
        },
    }
