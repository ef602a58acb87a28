"""Master password authentication state machine.

Governs the transition from locked to unlocked, either by initializing a
new vault (first run) or by verifying the master password against an
existing one. Whether a vault exists is the caller's decision, passed in
as ``is_registering``.

    LOCKED --submit--> AUTHENTICATING --ok--> UNLOCKED
                              |
                              +--fail--> FAILED --submit--> AUTHENTICATING

UNLOCKED is terminal until ``logout()``.
"""

import logging
from enum import Enum
from typing import Optional

from vaultsession.errors import (
    AuthenticationFailed,
    InvalidSessionState,
    SecretMismatch,
)
from vaultsession.gateway import VaultBackend
from vaultsession.siem import log_unlock_attempt


logger = logging.getLogger(__name__)


class AuthState(str, Enum):
    LOCKED = "locked"
    AUTHENTICATING = "authenticating"
    UNLOCKED = "unlocked"
    FAILED = "failed"


class AuthMode(str, Enum):
    FIRST_RUN = "first_run"
    RETURNING_USER = "returning_user"


# Failure reasons recorded while in FAILED
REASON_MISMATCH = "mismatch"
REASON_INIT_FAILED = "init_failed"
REASON_INVALID_CREDENTIALS = "invalid_credentials"


class Session:
    """Authenticated runtime context.

    Holds the master password in memory for the lifetime of one unlocked
    session. Never persisted.
    """

    def __init__(self, master_secret: str):
        self._master_secret = master_secret
        self.authenticated = True

    @property
    def master_secret(self) -> str:
        if not self.authenticated:
            raise InvalidSessionState("Session has been closed")
        return self._master_secret

    def destroy(self) -> None:
        """Drop the master password reference and close the session."""
        self._master_secret = ""
        self.authenticated = False

    def __repr__(self) -> str:
        return f"Session(authenticated={self.authenticated})"


class Authenticator:
    """Drives unlock and first-run initialization against the backend."""

    def __init__(self, backend: VaultBackend):
        self.backend = backend
        self.state = AuthState.LOCKED
        self.mode = AuthMode.RETURNING_USER
        self.failure_reason: Optional[str] = None
        self.session: Optional[Session] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.UNLOCKED and self.session is not None

    def _fail(self, reason: str) -> None:
        self.state = AuthState.FAILED
        self.failure_reason = reason
        log_unlock_attempt(False, self.mode.value, reason)

    async def submit(
        self,
        secret: str,
        confirm_secret: Optional[str] = None,
        is_registering: bool = False,
    ) -> Session:
        """Attempt to unlock (or create) the vault.

        Args:
            secret: Master password
            confirm_secret: Confirmation, required when registering
            is_registering: True to initialize a new vault

        Returns:
            The new Session on success

        Raises:
            InvalidSessionState: Already unlocked or an attempt is in flight
            SecretMismatch: Registration confirmation differs (no backend call)
            AuthenticationFailed: Backend rejected or failed the attempt
        """
        if self.state in (AuthState.UNLOCKED, AuthState.AUTHENTICATING):
            raise InvalidSessionState(f"Cannot submit while {self.state.value}")

        # A previous failure is cleared, not sticky
        self.state = AuthState.LOCKED
        self.failure_reason = None
        self.mode = AuthMode.FIRST_RUN if is_registering else AuthMode.RETURNING_USER

        self.state = AuthState.AUTHENTICATING

        if self.mode == AuthMode.FIRST_RUN:
            if secret != confirm_secret:
                self._fail(REASON_MISMATCH)
                raise SecretMismatch()
            reason = REASON_INIT_FAILED
            call = self.backend.initialize_vault
        else:
            reason = REASON_INVALID_CREDENTIALS
            call = self.backend.verify_master_password

        try:
            accepted = await call(secret)
        except Exception as exc:
            logger.warning("Backend error during %s: %s", self.mode.value, exc)
            self._fail(reason)
            raise AuthenticationFailed(reason, f"Authentication failed: {exc}") from exc

        if not accepted:
            self._fail(reason)
            raise AuthenticationFailed(reason)

        self.session = Session(secret)
        self.state = AuthState.UNLOCKED
        log_unlock_attempt(True, self.mode.value)
        logger.info("Vault unlocked (%s)", self.mode.value)
        return self.session

    def logout(self) -> None:
        """Close the session and return to LOCKED."""
        if self.session is not None:
            self.session.destroy()
        self.session = None
        self.state = AuthState.LOCKED
        self.failure_reason = None
        logger.info("Vault locked")
