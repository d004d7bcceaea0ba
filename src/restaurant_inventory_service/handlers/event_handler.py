"""Handler for order-line events from order processing."""

import logging
import threading
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from restaurant_inventory_service.services.availability_publisher import AvailabilityPublisher
from restaurant_inventory_service.services.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class OrderEventType(str, Enum):
    """Order-line lifecycle events that move stock."""

    LINE_CONFIRMED = "order.line.confirmed"
    LINE_CANCELLED = "order.line.cancelled"


class OrderLineEvent(BaseModel):
    """Model for order-line events.

    Attributes:
        order_id: The order the line belongs to
        line_id: The order line, unique within the order
        menu_item_id: The menu item ordered
        quantity: Number of units on the line
        event_type: Whether the line was confirmed or cancelled
        timestamp: ISO 8601 timestamp of when the event occurred
    """

    order_id: str
    line_id: str
    menu_item_id: str
    quantity: int = Field(..., gt=0)
    event_type: OrderEventType
    timestamp: str

    @property
    def line_key(self) -> tuple[str, str]:
        return (self.order_id, self.line_id)


def parse_order_event(event: dict[str, Any]) -> OrderLineEvent | None:
    """Parse an event envelope into an OrderLineEvent.

    Args:
        event: Raw event dictionary with the payload under "detail"

    Returns:
        OrderLineEvent if parsing succeeds, None otherwise
    """
    try:
        detail = event.get("detail", {})
        return OrderLineEvent(**detail)
    except (ValidationError, TypeError) as e:
        logger.error(f"Failed to parse order event: {e}")  # pragma: no cover
        return None


class OrderEventHandler:
    """Handler applying order-line events to the inventory ledger.

    Confirmed lines deduct stock and cancelled lines restore it. The handler
    remembers which lines are currently deducted, so a line is never deducted
    twice without a cancellation in between, and a line that was never
    deducted is never restored.
    """

    def __init__(
        self,
        ledger: InventoryLedger,
        availability_publisher: AvailabilityPublisher | None = None,
    ) -> None:
        """Initialize the event handler.

        Args:
            ledger: Ledger to deduct from and restore to
            availability_publisher: Optional publisher flushed after every event
        """
        self.ledger = ledger
        self.availability_publisher = availability_publisher
        self._deducted: dict[tuple[str, str], OrderLineEvent] = {}
        self._lock = threading.Lock()

    def is_deducted(self, order_id: str, line_id: str) -> bool:
        """Whether stock is currently deducted for an order line."""
        with self._lock:
            return (order_id, line_id) in self._deducted

    async def handle_line_confirmed(self, event: OrderLineEvent) -> bool:
        """Deduct stock for a confirmed order line.

        Args:
            event: The confirmed line

        Returns:
            True if stock is deducted for the line (including repeated
            deliveries of the same event), False if stock was insufficient
        """
        with self._lock:
            if event.line_key in self._deducted:
                logger.info(
                    f"Order line {event.order_id}/{event.line_id} already deducted, skipping"
                )
                return True

            success = self.ledger.deduct_inventory_for_order(
                event.menu_item_id, event.quantity, reference=event.order_id
            )
            if success:
                self._deducted[event.line_key] = event

        if not success:
            logger.warning(
                f"Insufficient stock for order line {event.order_id}/{event.line_id} "
                f"({event.quantity} x {event.menu_item_id})"
            )

        await self._flush()
        return success

    async def handle_line_cancelled(self, event: OrderLineEvent) -> bool:
        """Restore stock for a cancelled order line.

        The quantity and menu item recorded at confirmation are restored, not
        the ones on the cancellation event.

        Args:
            event: The cancelled line

        Returns:
            True if stock was restored, False if the line was never deducted
        """
        with self._lock:
            confirmed = self._deducted.pop(event.line_key, None)
            if confirmed is None:
                logger.warning(
                    f"Order line {event.order_id}/{event.line_id} was not deducted, "
                    "nothing to restore"
                )
                return False

            self.ledger.restore_inventory_for_order(
                confirmed.menu_item_id, confirmed.quantity, reference=confirmed.order_id
            )

        await self._flush()
        return True

    async def handle_event(self, event: dict[str, Any]) -> dict[str, Any]:
        """Entry point for raw order events.

        Args:
            event: Event dictionary with the order line under "detail"

        Returns:
            Dictionary with statusCode and body
        """
        order_event = parse_order_event(event)
        if not order_event:
            logger.error("Received invalid event format")  # pragma: no cover
            return {
                "statusCode": 400,
                "body": "Invalid event format",
            }

        logger.info(
            f"Processing {order_event.event_type.value} for order line "
            f"{order_event.order_id}/{order_event.line_id}"
        )

        if order_event.event_type == OrderEventType.LINE_CONFIRMED:
            success = await self.handle_line_confirmed(order_event)
            failure_body = f"Insufficient stock for menu item {order_event.menu_item_id}"
        else:
            success = await self.handle_line_cancelled(order_event)
            failure_body = f"Order line {order_event.line_id} has no deducted stock"

        if success:
            return {
                "statusCode": 200,
                "body": f"Processed {order_event.event_type.value} for order {order_event.order_id}",
            }
        return {
            "statusCode": 409,
            "body": failure_body,
        }

    async def _flush(self) -> None:
        if self.availability_publisher is not None:
            await self.availability_publisher.flush()
