"""Error hierarchy for pushing activity plans to Garmin Connect."""

from __future__ import annotations


class GarminClientError(Exception):
    """Base exception for all garmin_client errors."""


class GarminAuthError(GarminClientError):
    """No usable session: bad credentials, or saved tokens missing or expired."""


class GarminMFARequired(GarminAuthError):
    """The account requires a verification code and no prompt was provided."""


class GarminAPIError(GarminClientError):
    """Garmin Connect rejected a workout call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GarminRateLimitError(GarminAPIError):
    """HTTP 429 persisted through every retry."""

    def __init__(self, message: str = "Rate limited by Garmin Connect") -> None:
        super().__init__(message, status_code=429)
