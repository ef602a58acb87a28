"""FastAPI dependencies and error mapping.

The application holds exactly one VaultSession (single-user, local-only).
Routes receive it through dependency injection instead of module globals.
"""

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from vaultsession import (
    AuthenticationFailed,
    BackendFailure,
    CategoryInUse,
    DuplicateName,
    EmptyName,
    InvalidSessionState,
    InvalidSettings,
    LoadPartialFailure,
    NotAuthenticated,
    NotFound,
    ReservedName,
    SecretMismatch,
    VaultSession,
    VaultSessionError,
)


# Rate limiter configuration
# Uses client IP for rate limit tracking
limiter = Limiter(key_func=get_remote_address)

# Session error kind -> HTTP status
ERROR_STATUS = {
    AuthenticationFailed.kind: status.HTTP_401_UNAUTHORIZED,
    NotAuthenticated.kind: status.HTTP_401_UNAUTHORIZED,
    SecretMismatch.kind: status.HTTP_400_BAD_REQUEST,
    DuplicateName.kind: status.HTTP_409_CONFLICT,
    CategoryInUse.kind: status.HTTP_409_CONFLICT,
    InvalidSessionState.kind: status.HTTP_409_CONFLICT,
    EmptyName.kind: 422,
    ReservedName.kind: 422,
    InvalidSettings.kind: 422,
    NotFound.kind: status.HTTP_404_NOT_FOUND,
    BackendFailure.kind: status.HTTP_502_BAD_GATEWAY,
    LoadPartialFailure.kind: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def vault_session_error_handler(request: Request, exc: VaultSessionError) -> JSONResponse:
    """Render a session error as ``{"detail": ..., "error": kind}``."""
    headers = None
    if exc.kind in (AuthenticationFailed.kind, NotAuthenticated.kind):
        headers = {"WWW-Authenticate": "MasterPassword"}
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.kind, status.HTTP_400_BAD_REQUEST),
        content={"detail": str(exc), "error": exc.kind},
        headers=headers,
    )


def get_vault_session(request: Request) -> VaultSession:
    """Dependency returning the application's session controller."""
    return request.app.state.vault_session


def require_unlocked(vault: VaultSession = Depends(get_vault_session)) -> VaultSession:
    """Dependency for endpoints that need an unlocked vault.

    Raises:
        NotAuthenticated: Rendered as 401 by the error handler
    """
    if not vault.is_authenticated:
        raise NotAuthenticated()
    return vault
