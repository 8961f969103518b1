"""
Exception classes for lease record handling.

Two kinds of failure reach the user: input they can correct and writes the
store rejected. Callers catch both at the point of the user action and hand
them to an error reporter.
"""
from typing import Optional


class LeaseError(Exception):
    """Base class for errors surfaced to the user."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InvalidInput(LeaseError):
    """Raised when user-entered vehicle data fails validation."""

    def __init__(self, reason: str, field: Optional[str] = None) -> None:
        self.reason = reason
        self.field = field
        super().__init__(reason)


class PersistenceFailure(LeaseError):
    """Raised when the vehicle store cannot read or write its file."""

    def __init__(self, message: str = "Error: failed to save vehicles") -> None:
        super().__init__(message)
