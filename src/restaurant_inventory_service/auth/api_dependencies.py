"""Request guard shared by every inventory route except /health."""

from typing import Annotated

from fastapi import Header, HTTPException

from restaurant_inventory_service.auth.api_key_validator import APIKeyValidator


def get_api_key_from_header(
    x_api_key: Annotated[str | None, Header()] = None,
    validator: APIKeyValidator | None = None,
) -> str:
    """Reject a request whose X-API-Key is absent or not one the service accepts.

    create_app wraps this in a route dependency that passes the validator
    stored on app.state. Without a validator only presence is checked.

    Returns:
        The accepted key

    Raises:
        HTTPException: 401 for a missing or unknown key
    """
    if not x_api_key:
        raise HTTPException(status_code=401, detail="Missing API key")

    if validator and not validator.validate(x_api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")

    return x_api_key
