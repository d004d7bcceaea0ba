"""Custom metrics for the inventory service."""

from opentelemetry import metrics

meter = metrics.get_meter("inventory-svc")

order_deduction_counter = meter.create_counter(
    name="inventory_order_deductions_total",
    description="Total number of successful stock deductions for order lines",
    unit="1",
)

order_rejection_counter = meter.create_counter(
    name="inventory_order_rejections_total",
    description="Total number of order deductions rejected for lack of stock or recipe",
    unit="1",
)

order_restoration_counter = meter.create_counter(
    name="inventory_order_restorations_total",
    description="Total number of stock restorations for cancelled order lines",
    unit="1",
)

availability_change_counter = meter.create_counter(
    name="menu_availability_changes_total",
    description="Total number of menu item availability transitions",
    unit="1",
)

availability_publish_failure_counter = meter.create_counter(
    name="menu_availability_publish_failures_total",
    description="Total number of availability updates the menu service did not accept",
    unit="1",
)


def record_order_deduction(menu_item_id: str, quantity: int) -> None:
    """Record a successful deduction.

    Args:
        menu_item_id: Menu item the stock was deducted for
        quantity: Number of units ordered
    """
    order_deduction_counter.add(quantity, {"menu_item_id": menu_item_id})


def record_order_rejection(menu_item_id: str, reason: str) -> None:
    """Record a rejected deduction.

    Args:
        menu_item_id: Menu item that could not be deducted
        reason: AvailabilityStatus value explaining the rejection
    """
    order_rejection_counter.add(1, {"menu_item_id": menu_item_id, "reason": reason})


def record_order_restoration(menu_item_id: str, quantity: int) -> None:
    """Record a restoration of previously deducted stock."""
    order_restoration_counter.add(quantity, {"menu_item_id": menu_item_id})


def record_availability_change(menu_item_id: str, is_available: bool) -> None:
    """Record a menu item switching between available and unavailable."""
    availability_change_counter.add(
        1, {"menu_item_id": menu_item_id, "is_available": str(is_available).lower()}
    )


def record_availability_publish_failure(menu_item_id: str) -> None:
    """Record an availability update that could not be pushed to the menu service."""
    availability_publish_failure_counter.add(1, {"menu_item_id": menu_item_id})
