"""Unit tests for FastAPI authentication dependencies."""

import pytest
from fastapi import HTTPException

from restaurant_inventory_service.auth.api_dependencies import get_api_key_from_header
from restaurant_inventory_service.auth.api_key_validator import APIKeyValidator


@pytest.mark.unit
class TestGetAPIKeyFromHeader:
    """Test suite for get_api_key_from_header dependency."""

    @pytest.fixture
    def validator(self) -> APIKeyValidator:
        """Validator accepting a single kitchen key."""
        return APIKeyValidator(api_keys=["kitchen-key"])

    def test_returns_valid_key(self, validator: APIKeyValidator) -> None:
        """Test that a valid key is passed through."""
        assert get_api_key_from_header(x_api_key="kitchen-key", validator=validator) == "kitchen-key"

    @pytest.mark.parametrize(
        ("presented", "detail"),
        [(None, "Missing API key"), ("", "Missing API key"), ("wrong-key", "Invalid API key")],
    )
    def test_rejects_missing_or_invalid_key(
        self, validator: APIKeyValidator, presented: str | None, detail: str
    ) -> None:
        """Test that missing and invalid keys raise 401."""
        with pytest.raises(HTTPException) as exc_info:
            get_api_key_from_header(x_api_key=presented, validator=validator)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == detail
