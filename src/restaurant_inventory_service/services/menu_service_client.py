"""Client for interacting with the Menu Service API."""

import logging
from decimal import Decimal

import httpx

from restaurant_inventory_service.models.menu_models import MenuItem

logger = logging.getLogger(__name__)


class MenuServiceClient:
    """HTTP client for the menu-management service.

    The menu service owns menu items. This client fetches them so the ledger
    can hold a local copy, and pushes back the availability flag the ledger
    derives from stock.
    """

    def __init__(self, base_url: str, api_key: str) -> None:
        """Initialize the Menu Service client.

        Args:
            base_url: Base URL of the Menu Service API (e.g., "https://api.example.com")
            api_key: API key for service-to-service authentication
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    async def get_menu_items(self) -> list[MenuItem] | None:
        """Fetch all menu items from the Menu Service.

        Returns:
            List of MenuItem objects, empty list if no items exist, or None on failure
        """
        url = f"{self.base_url}/menu-items"
        headers = {"X-API-Key": self.api_key}

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
                data = response.json()

                items = []
                for item_data in data.get("items", []):
                    item_data["price"] = Decimal(str(item_data["price"]))
                    items.append(MenuItem(**item_data))

                return items

        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.error(f"Failed to fetch menu items: {e}")  # pragma: no cover
            return None

    async def update_availability(self, menu_item_id: str, is_available: bool) -> bool:
        """Set the availability flag of a menu item in the Menu Service.

        Args:
            menu_item_id: The menu item to update
            is_available: New availability

        Returns:
            bool: True if the Menu Service accepted the update, False otherwise
        """
        url = f"{self.base_url}/menu-items/{menu_item_id}/availability"
        headers = {"X-API-Key": self.api_key}

        try:
            async with httpx.AsyncClient() as client:
                response = await client.patch(
                    url, headers=headers, json={"is_available": is_available}
                )
                response.raise_for_status()
                return True

        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.error(
                f"Failed to update availability of menu item {menu_item_id}: {e}"
            )  # pragma: no cover
            return False
