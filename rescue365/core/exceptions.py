"""
Rescue365 - Error Types
Errors raised by stores, services and the report lifecycle.
"""

from typing import List, Optional


class Rescue365Error(Exception):
    """Base class for application errors."""


class PermissionDenied(Rescue365Error):
    """A device capability (location, camera) was refused by the user."""

    def __init__(self, capability: str, message: Optional[str] = None):
        self.capability = capability
        super().__init__(message or f"Permission to access {capability} was denied")


class ValidationError(Rescue365Error):
    """A report is missing required fields."""

    def __init__(self, missing_fields: List[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(
            "Missing required fields: " + ", ".join(self.missing_fields)
        )


class StoreError(Rescue365Error):
    """A remote create, read or update failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class AuthError(Rescue365Error):
    """Sign-in or session failure."""


class TransitionError(Rescue365Error):
    """A status change was rejected by the transition policy."""

    def __init__(self, current_status: Optional[str], new_status: str):
        self.current_status = current_status
        self.new_status = new_status
        super().__init__(
            f"Transition {current_status!r} -> {new_status!r} is not allowed"
        )


class ConfigurationError(Rescue365Error):
    """Required service settings are missing."""
