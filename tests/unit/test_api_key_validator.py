"""Unit tests for API key validation."""

import pytest

from restaurant_inventory_service.auth.api_key_validator import APIKeyValidator


@pytest.mark.unit
class TestAPIKeyValidator:
    """Test suite for APIKeyValidator."""

    def test_empty_key_list_rejected(self) -> None:
        """Test that a validator needs at least one key."""
        with pytest.raises(ValueError, match="At least one API key must be provided"):
            APIKeyValidator(api_keys=[])

    def test_duplicate_keys_collapsed(self) -> None:
        """Test that repeated configured keys are stored once."""
        validator = APIKeyValidator(api_keys=["kitchen-key", "kitchen-key"])

        assert validator.api_keys == frozenset({"kitchen-key"})

    @pytest.mark.parametrize(
        ("presented", "expected"),
        [
            ("kitchen-key", True),
            ("manager-key", True),
            ("KITCHEN-KEY", False),
            (" kitchen-key", False),
            ("kitchen-key-2", False),
            ("", False),
        ],
    )
    def test_validate(self, presented: str, expected: bool) -> None:
        """Test exact, case-sensitive matching against every configured key."""
        validator = APIKeyValidator(api_keys=["kitchen-key", "manager-key"])

        assert validator.validate(presented) is expected
