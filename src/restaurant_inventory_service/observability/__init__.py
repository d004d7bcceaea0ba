"""Observability for the inventory service.

configure_logging switches the root logger to JSON output. setup_observability
attaches OTLP tracing and metrics to the FastAPI app; ledger operations open
their spans through traced.
"""

from restaurant_inventory_service.observability.config import configure_logging, setup_observability
from restaurant_inventory_service.observability.decorators import traced

__all__ = ["configure_logging", "setup_observability", "traced"]
