"""Error taxonomy for the vault session layer.

Every error carries a stable ``kind`` string so callers (the API layer,
a UI) can branch on it without matching message text. None of these are
retried by the session layer; every failure leaves the session in its
last valid state.
"""

from typing import Optional


class VaultSessionError(Exception):
    """Base exception for session operations."""

    kind = "VaultSessionError"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.kind)


class AuthenticationFailed(VaultSessionError):
    """Wrong master secret, or the backend rejected unlock/initialization."""

    kind = "AuthenticationFailed"

    def __init__(self, reason: str, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or f"Authentication failed: {reason}")


class SecretMismatch(VaultSessionError):
    """Registration secret and its confirmation differ."""

    kind = "SecretMismatch"

    def __init__(self, message: str = "Master password and confirmation do not match."):
        super().__init__(message)


class DuplicateName(VaultSessionError):
    """A category with this name already exists."""

    kind = "DuplicateName"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Category name already exists: {name}")


class CategoryInUse(VaultSessionError):
    """Category still has credentials filed under it."""

    kind = "CategoryInUse"

    def __init__(self, name: str, count: int):
        self.name = name
        self.count = count
        super().__init__(f"Category '{name}' still holds {count} password(s)")


class BackendFailure(VaultSessionError):
    """Any failure reported by or raised from the vault backend.

    The backend's message is surfaced verbatim; the original exception is
    chained as ``__cause__``.
    """

    kind = "BackendFailure"

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(message)


class LoadPartialFailure(VaultSessionError):
    """One or both of the post-unlock fetches failed.

    Authentication stands; the cache is left unloaded.
    """

    kind = "LoadPartialFailure"

    def __init__(self, failed: dict[str, BaseException]):
        self.failed = failed
        names = ", ".join(sorted(failed))
        super().__init__(f"Failed to load vault data: {names}")


class NotAuthenticated(VaultSessionError):
    """Operation requires an unlocked session."""

    kind = "NotAuthenticated"

    def __init__(self, message: str = "Not authenticated. Please unlock the vault first."):
        super().__init__(message)


class InvalidSessionState(VaultSessionError):
    """Transition not allowed from the current authentication state."""

    kind = "InvalidSessionState"


class EmptyName(VaultSessionError):
    """Category name is empty after trimming."""

    kind = "EmptyName"

    def __init__(self, message: str = "Category name cannot be empty"):
        super().__init__(message)


class ReservedName(VaultSessionError):
    """The all-categories sentinel was used as a real category."""

    kind = "ReservedName"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' is reserved and cannot be used as a category")


class NotFound(VaultSessionError):
    """The referenced id is not in the session cache."""

    kind = "NotFound"

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class InvalidSettings(VaultSessionError):
    """Generator settings failed validation."""

    kind = "InvalidSettings"
