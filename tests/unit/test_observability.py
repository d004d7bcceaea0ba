"""Unit tests for tracing and logging setup."""

import logging
from unittest.mock import MagicMock, patch

import pytest
from pythonjsonlogger import jsonlogger

from restaurant_inventory_service.observability import configure_logging, traced


@pytest.mark.unit
class TestTraced:
    """Test suite for the traced decorator."""

    def test_sync_function(self) -> None:
        """Test that sync results pass through and keep the function name."""

        @traced("inventory.test")
        def add(a: int, b: int) -> int:
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"

    def test_exception_recorded_and_reraised(self) -> None:
        """Test that exceptions are recorded on the span and re-raised."""
        span = MagicMock()
        tracer = MagicMock()
        tracer.start_as_current_span.return_value.__enter__.return_value = span

        with patch("opentelemetry.trace.get_tracer", return_value=tracer):

            @traced()
            def fail() -> None:
                raise ValueError("boom")

            with pytest.raises(ValueError, match="boom"):
                fail()

        tracer.start_as_current_span.assert_called_once_with("fail")
        span.set_attribute.assert_any_call("success", False)
        span.set_attribute.assert_any_call("error.type", "ValueError")
        span.record_exception.assert_called_once()

    @pytest.mark.asyncio
    async def test_async_function(self) -> None:
        """Test that coroutines are awaited inside the span."""

        @traced("inventory.async_test")
        async def double(value: int) -> int:
            return value * 2

        assert await double(21) == 42


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_installs_json_formatter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the root logger gets a single JSON handler at the requested level."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        root_logger = logging.getLogger()
        saved_handlers, saved_level = root_logger.handlers[:], root_logger.level

        try:
            configure_logging("warning")

            assert root_logger.level == logging.WARNING
            assert len(root_logger.handlers) == 1
            assert isinstance(root_logger.handlers[0].formatter, jsonlogger.JsonFormatter)
        finally:
            root_logger.handlers = saved_handlers
            root_logger.setLevel(saved_level)
