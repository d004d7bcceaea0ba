"""Main application entry point for the restaurant inventory service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI

from restaurant_inventory_service.handlers.api_handler import create_app
from restaurant_inventory_service.handlers.event_handler import OrderEventHandler
from restaurant_inventory_service.observability import configure_logging, setup_observability
from restaurant_inventory_service.services.availability_publisher import AvailabilityPublisher
from restaurant_inventory_service.services.demo_seed import seed_demo_data
from restaurant_inventory_service.services.inventory_ledger import InventoryLedger
from restaurant_inventory_service.services.menu_service_client import MenuServiceClient

logger = logging.getLogger(__name__)


def create_menu_service_client() -> MenuServiceClient | None:
    """Create the menu service client from environment variables.

    Returns:
        MenuServiceClient if MENU_SERVICE_BASE_URL and MENU_SERVICE_API_KEY are
        both set, None otherwise
    """
    menu_service_url = os.getenv("MENU_SERVICE_BASE_URL")
    menu_service_api_key = os.getenv("MENU_SERVICE_API_KEY")

    if not menu_service_url or not menu_service_api_key:
        logger.warning(
            "MENU_SERVICE_BASE_URL or MENU_SERVICE_API_KEY not set - "
            "availability changes will not be published"
        )
        return None

    logger.info(f"Menu service client configured - URL: {menu_service_url}")
    return MenuServiceClient(base_url=menu_service_url, api_key=menu_service_api_key)


def create_lifespan(
    ledger: InventoryLedger, menu_service_client: MenuServiceClient | None
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Create the application lifespan that loads menu items at startup.

    Args:
        ledger: Ledger to register the menu items with
        menu_service_client: Client to fetch menu items from, if configured

    Returns:
        Lifespan context manager factory for FastAPI
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if menu_service_client is not None:
            menu_items = await menu_service_client.get_menu_items()
            if menu_items is None:
                logger.error("Could not load menu items from the menu service")
            else:
                ledger.register_menu_items(menu_items)
                logger.info(f"Loaded {len(menu_items)} menu items from the menu service")
        yield

    return lifespan


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the inventory ledger (optionally seeded with demo data)
    3. Wires the menu service client and availability publisher
    4. Creates the FastAPI app
    5. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Initializing restaurant inventory service...")

    menu_service_client = create_menu_service_client()
    availability_publisher = None
    if menu_service_client is not None:
        retry_delay = int(os.getenv("RETRY_DELAY_SECONDS", "2"))
        availability_publisher = AvailabilityPublisher(
            menu_service_client=menu_service_client,
            retry_delay_seconds=retry_delay,
        )

    ledger = InventoryLedger(availability_listener=availability_publisher)

    if os.getenv("SEED_DEMO_DATA", "false").lower() == "true":
        seed_demo_data(ledger, currency=os.getenv("DEFAULT_CURRENCY", "PHP"))

    order_event_handler = OrderEventHandler(
        ledger=ledger, availability_publisher=availability_publisher
    )

    api_keys_str = os.getenv("ADMIN_API_KEY", "")
    api_keys = [key.strip() for key in api_keys_str.split(",") if key.strip()]

    if not api_keys:
        logger.warning("No ADMIN_API_KEY configured - endpoints will not be accessible")
        api_keys = ["dummy-key-for-development"]

    app = create_app(
        ledger=ledger,
        api_keys=api_keys,
        order_event_handler=order_event_handler,
        availability_publisher=availability_publisher,
        lifespan=create_lifespan(ledger, menu_service_client),
    )

    setup_observability(app)

    logger.info("Restaurant inventory service initialized successfully")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8002"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
