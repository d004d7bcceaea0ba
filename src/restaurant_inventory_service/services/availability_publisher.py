"""Publisher pushing ledger availability changes to the menu service."""

import asyncio
import logging
import threading
from dataclasses import dataclass

from restaurant_inventory_service.observability.metrics import (
    record_availability_publish_failure,
)
from restaurant_inventory_service.services.menu_service_client import MenuServiceClient

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Result of pushing one availability change.

    Attributes:
        menu_item_id: The menu item whose availability changed
        is_available: The availability that was pushed
        success: Whether the menu service accepted it
    """

    menu_item_id: str
    is_available: bool
    success: bool


class AvailabilityPublisher:
    """Queue of availability transitions waiting to reach the menu service.

    An instance is installed as the ledger's availability listener. The ledger
    calls it synchronously, in commit order, while processing an order;
    flush() is awaited afterwards to push the queued changes over HTTP. Only
    the latest state of each menu item is kept, and flushes run one at a
    time so a slow push can never land after a newer one.
    """

    def __init__(self, menu_service_client: MenuServiceClient, retry_delay_seconds: int = 2) -> None:
        """Initialize the publisher.

        Args:
            menu_service_client: Client used to push availability updates
            retry_delay_seconds: Seconds to wait before retrying a failed push
        """
        self.menu_service_client = menu_service_client
        self.retry_delay_seconds = retry_delay_seconds
        self._pending: dict[str, bool] = {}
        self._lock = threading.Lock()
        self._flush_lock = asyncio.Lock()

    def __call__(self, menu_item_id: str, is_available: bool) -> None:
        """Queue an availability change."""
        with self._lock:
            self._pending[menu_item_id] = is_available

    @property
    def pending(self) -> dict[str, bool]:
        """Snapshot of queued changes keyed by menu item id."""
        with self._lock:
            return dict(self._pending)

    def _superseded(self, menu_item_id: str) -> bool:
        with self._lock:
            return menu_item_id in self._pending

    async def flush(self, retry: bool = True) -> list[PublishResult]:
        """Push every queued change to the menu service.

        A flush waits for any flush already running. Each failed push is
        retried once after retry_delay_seconds. A change is dropped without
        being pushed once a newer change for the same menu item is queued;
        the next flush delivers that one instead. Changes that still fail are
        queued again unless a newer change arrived in the meantime.

        Args:
            retry: Whether to retry a failed push once (default: True)

        Returns:
            List of PublishResult, one per pushed change
        """
        async with self._flush_lock:
            with self._lock:
                batch = self._pending
                self._pending = {}

            results = []
            for menu_item_id, is_available in batch.items():
                if self._superseded(menu_item_id):
                    logger.debug(f"Skipping stale availability of {menu_item_id}")
                    continue

                success = await self.menu_service_client.update_availability(
                    menu_item_id, is_available
                )

                if not success and retry and not self._superseded(menu_item_id):
                    logger.warning(
                        f"Availability push for {menu_item_id} failed, retrying..."
                    )  # pragma: no cover
                    await asyncio.sleep(self.retry_delay_seconds)
                    success = await self.menu_service_client.update_availability(
                        menu_item_id, is_available
                    )

                if not success:
                    logger.error(
                        f"Failed to publish availability of {menu_item_id} after all retry attempts"
                    )  # pragma: no cover
                    record_availability_publish_failure(menu_item_id)
                    with self._lock:
                        self._pending.setdefault(menu_item_id, is_available)

                results.append(PublishResult(menu_item_id, is_available, success))

            return results
