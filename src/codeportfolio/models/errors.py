"""Error taxonomy for portfolio editor operations.

Every failure a user-initiated action can produce is one of these kinds. The
HTTP layer maps them to status codes and the editor session converts them to
notifications; anything else is a programming error and propagates.
"""

from __future__ import annotations


class PortfolioError(Exception):
    """Base class for all recoverable portfolio operation failures."""

    kind = "error"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(PortfolioError):
    """Bad input detectable on the client (empty required field, malformed URL)."""

    kind = "validation"


class InvalidUsernameError(ValidationError):
    """Username violates the length or charset rules."""

    kind = "invalid_username"

    def __init__(self, message: str) -> None:
        super().__init__(message, field="username")


class DuplicateUsernameError(PortfolioError):
    """Username is already held by another portfolio."""

    kind = "duplicate_username"

    def __init__(self, username: str) -> None:
        super().__init__(f"Username '{username}' is already taken.", field="username")
        self.username = username


class NotFoundError(PortfolioError):
    """Record is missing or not owned by the caller."""

    kind = "not_found"


class CapacityError(PortfolioError):
    """Image count or file size exceeds its ceiling."""

    kind = "capacity"


class PersistenceError(PortfolioError):
    """The relational store failed to complete a read or write."""

    kind = "persistence"


class StorageError(PersistenceError):
    """The blob store failed to store, resolve or remove an object."""

    kind = "storage"
