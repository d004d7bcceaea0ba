"""Unit tests for main application entry point."""

import os
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

from restaurant_inventory_service.models.menu_models import MenuItem
from restaurant_inventory_service.services.inventory_ledger import InventoryLedger
from restaurant_inventory_service.services.menu_service_client import MenuServiceClient
from src.main import create_application, create_lifespan, create_menu_service_client


@pytest.mark.unit
class TestCreateMenuServiceClient:
    """Tests for create_menu_service_client function."""

    @patch.dict(
        os.environ,
        {
            "MENU_SERVICE_BASE_URL": "https://menu-service.example.com",
            "MENU_SERVICE_API_KEY": "test-menu-api-key",
        },
        clear=True,
    )
    def test_creates_client_when_configured(self) -> None:
        """Test that the client is created when URL and key are set."""
        client = create_menu_service_client()

        assert isinstance(client, MenuServiceClient)
        assert client.base_url == "https://menu-service.example.com"
        assert client.api_key == "test-menu-api-key"

    @patch.dict(os.environ, {"MENU_SERVICE_BASE_URL": "https://menu-service.example.com"}, clear=True)
    def test_returns_none_without_api_key(self) -> None:
        """Test that no client is created without an API key."""
        assert create_menu_service_client() is None

    @patch.dict(os.environ, {}, clear=True)
    def test_returns_none_when_not_configured(self) -> None:
        """Test that no client is created without configuration."""
        assert create_menu_service_client() is None


@pytest.mark.unit
class TestCreateLifespan:
    """Tests for the startup lifespan."""

    @pytest.mark.asyncio
    async def test_registers_menu_items_at_startup(self) -> None:
        """Test that menu items fetched from the menu service are registered."""
        ledger = InventoryLedger()
        client = MagicMock(spec=MenuServiceClient)
        client.get_menu_items = AsyncMock(
            return_value=[
                MenuItem(id="1", name="Pepperoni Pizza", category="Main Course", price=Decimal("750"))
            ]
        )

        async with create_lifespan(ledger, client)(FastAPI()):
            assert [m.id for m in ledger.list_menu_items()] == ["1"]

    @pytest.mark.asyncio
    async def test_fetch_failure_leaves_ledger_empty(self) -> None:
        """Test that a failed fetch does not stop startup."""
        ledger = InventoryLedger()
        client = MagicMock(spec=MenuServiceClient)
        client.get_menu_items = AsyncMock(return_value=None)

        async with create_lifespan(ledger, client)(FastAPI()):
            assert ledger.list_menu_items() == []

    @pytest.mark.asyncio
    async def test_without_client(self) -> None:
        """Test that the lifespan works without a menu service."""
        ledger = InventoryLedger()

        async with create_lifespan(ledger, None)(FastAPI()):
            assert ledger.list_menu_items() == []


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.create_app")
    @patch.dict(
        os.environ,
        {
            "LOG_LEVEL": "DEBUG",
            "MENU_SERVICE_BASE_URL": "https://menu-service.example.com",
            "MENU_SERVICE_API_KEY": "test-menu-api-key",
            "RETRY_DELAY_SECONDS": "5",
            "ADMIN_API_KEY": "test-admin-key-1, test-admin-key-2",
            "SEED_DEMO_DATA": "true",
        },
        clear=True,
    )
    def test_creates_application_with_all_dependencies(
        self,
        mock_create_app: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that the ledger, publisher and handlers are wired together."""
        mock_app = MagicMock(spec=FastAPI)
        mock_create_app.return_value = mock_app

        app = create_application()

        assert app == mock_app
        mock_configure_logging.assert_called_once_with("DEBUG")
        mock_setup_observability.assert_called_once_with(mock_app)

        kwargs = mock_create_app.call_args.kwargs
        assert kwargs["api_keys"] == ["test-admin-key-1", "test-admin-key-2"]
        publisher = kwargs["availability_publisher"]
        assert publisher.retry_delay_seconds == 5
        ledger = kwargs["ledger"]
        assert ledger.availability_listener is publisher
        assert kwargs["order_event_handler"].ledger is ledger
        assert len(ledger.list_inventory_items()) == 6

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.create_app")
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults_without_configuration(
        self,
        mock_create_app: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test the development defaults: no publisher, no seed data, dummy key."""
        create_application()

        mock_configure_logging.assert_called_once_with("INFO")
        kwargs = mock_create_app.call_args.kwargs
        assert kwargs["api_keys"] == ["dummy-key-for-development"]
        assert kwargs["availability_publisher"] is None
        assert kwargs["ledger"].list_inventory_items() == []
