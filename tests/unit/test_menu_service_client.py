"""Unit tests for MenuServiceClient."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from restaurant_inventory_service.models.menu_models import MenuItem
from restaurant_inventory_service.services.menu_service_client import MenuServiceClient


@pytest.mark.unit
class TestMenuServiceClient:
    """Test suite for MenuServiceClient."""

    @pytest.fixture
    def client(self) -> MenuServiceClient:
        """Create a MenuServiceClient with test configuration."""
        return MenuServiceClient(base_url="https://menu.test.com/", api_key="test-api-key")

    def test_trailing_slash_stripped(self, client: MenuServiceClient) -> None:
        """Test that the base URL is normalized."""
        assert client.base_url == "https://menu.test.com"
        assert client.api_key == "test-api-key"

    @pytest.mark.asyncio
    async def test_get_menu_items_success(self, client: MenuServiceClient) -> None:
        """Test fetching menu items from the menu service."""
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {
            "items": [
                {
                    "id": "1",
                    "name": "Pepperoni Pizza",
                    "description": "Classic pizza",
                    "category": "Main Course",
                    "price": 750.0,
                    "is_available": True,
                },
                {
                    "id": "2",
                    "name": "Margherita Pizza",
                    "category": "Main Course",
                    "price": "650.00",
                    "is_available": False,
                },
            ]
        }
        mock_get = AsyncMock(return_value=mock_response)

        with patch("httpx.AsyncClient.get", mock_get):
            items = await client.get_menu_items()

        assert len(items) == 2
        assert isinstance(items[0], MenuItem)
        assert items[0].price == Decimal("750.0")
        assert items[1].description == ""
        assert items[1].is_available is False
        call_args = mock_get.call_args
        assert call_args[0][0] == "https://menu.test.com/menu-items"
        assert call_args[1]["headers"]["X-API-Key"] == "test-api-key"

    @pytest.mark.asyncio
    async def test_get_menu_items_empty(self, client: MenuServiceClient) -> None:
        """Test that an empty menu gives an empty list."""
        mock_response = MagicMock()
        mock_response.json.return_value = {"items": []}

        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=mock_response):
            items = await client.get_menu_items()

        assert items == []

    @pytest.mark.asyncio
    async def test_get_menu_items_api_error(self, client: MenuServiceClient) -> None:
        """Test that API errors return None."""
        mock_response = MagicMock()
        mock_response.status_code = 500
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Server error", request=MagicMock(), response=mock_response
        )

        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=mock_response):
            items = await client.get_menu_items()

        assert items is None

    @pytest.mark.asyncio
    async def test_get_menu_items_network_error(self, client: MenuServiceClient) -> None:
        """Test that network errors return None."""
        with patch(
            "httpx.AsyncClient.get",
            new_callable=AsyncMock,
            side_effect=httpx.RequestError("Connection failed", request=MagicMock()),
        ):
            items = await client.get_menu_items()

        assert items is None

    @pytest.mark.asyncio
    async def test_update_availability_success(self, client: MenuServiceClient) -> None:
        """Test pushing an availability flag."""
        mock_patch = AsyncMock(return_value=MagicMock())

        with patch("httpx.AsyncClient.patch", mock_patch):
            result = await client.update_availability("2", False)

        assert result is True
        call_args = mock_patch.call_args
        assert call_args[0][0] == "https://menu.test.com/menu-items/2/availability"
        assert call_args[1]["json"] == {"is_available": False}
        assert call_args[1]["headers"]["X-API-Key"] == "test-api-key"

    @pytest.mark.asyncio
    async def test_update_availability_rejected(self, client: MenuServiceClient) -> None:
        """Test that a rejected update returns False."""
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Not found", request=MagicMock(), response=mock_response
        )

        with patch("httpx.AsyncClient.patch", new_callable=AsyncMock, return_value=mock_response):
            result = await client.update_availability("404", True)

        assert result is False

    @pytest.mark.asyncio
    async def test_update_availability_network_error(self, client: MenuServiceClient) -> None:
        """Test that network errors return False."""
        with patch(
            "httpx.AsyncClient.patch",
            new_callable=AsyncMock,
            side_effect=httpx.RequestError("Connection failed", request=MagicMock()),
        ):
            result = await client.update_availability("2", True)

        assert result is False
