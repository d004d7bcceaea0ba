"""Shared-secret check for kitchen and back-office callers of the inventory API."""

import hmac


class APIKeyValidator:
    """Holds the accepted X-API-Key values.

    Keys come from the ADMIN_API_KEY setting, one per kitchen terminal or
    back-office tool. Duplicates collapse.
    """

    def __init__(self, api_keys: list[str]) -> None:
        """Store the accepted keys.

        Args:
            api_keys: Keys a caller may present

        Raises:
            ValueError: If no key is configured, which would lock every caller out
        """
        if not api_keys:
            raise ValueError("At least one API key must be provided")

        self.api_keys = frozenset(api_keys)

    def validate(self, api_key: str) -> bool:
        """Return True if the presented key matches one of the accepted keys.

        Each candidate is compared with hmac.compare_digest, so response time
        does not reveal how much of a key was right.
        """
        presented = api_key.encode()
        return any(hmac.compare_digest(presented, valid.encode()) for valid in self.api_keys)
