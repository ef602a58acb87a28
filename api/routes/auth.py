"""Authentication endpoints.

Unlock (or first-run initialize) the vault with the master password, and
lock it again. The master password is sent once per session; subsequent
requests operate on the unlocked in-process session.
"""

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_vault_session, limiter
from api.models import MessageResponse, SessionStatusResponse, UnlockRequest
from vaultsession import VaultSession
from vaultsession.config import UNLOCK_RATE_LIMIT


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _status(vault: VaultSession) -> SessionStatusResponse:
    return SessionStatusResponse(
        state=vault.auth.state.value,
        mode=vault.auth.mode.value,
        authenticated=vault.is_authenticated,
        failure_reason=vault.auth.failure_reason,
        loaded=vault.cache.loaded,
        load_error=str(vault.load_error) if vault.load_error else None,
    )


@router.post("/unlock", response_model=SessionStatusResponse)
@limiter.limit(UNLOCK_RATE_LIMIT)
async def unlock(
    request: Request,
    unlock_request: UnlockRequest,
    vault: VaultSession = Depends(get_vault_session),
):
    """Unlock the vault, or initialize it when ``is_registering`` is set.

    On success the vault contents are loaded. If loading fails the vault
    stays unlocked and a 503 ``LoadPartialFailure`` is returned; retry
    with ``POST /auth/reload``.
    """
    await vault.unlock(
        unlock_request.master_password,
        confirm_secret=unlock_request.confirm_password,
        is_registering=unlock_request.is_registering,
    )
    return _status(vault)


@router.post("/reload", response_model=SessionStatusResponse)
async def reload(vault: VaultSession = Depends(get_vault_session)):
    """Retry loading credentials and categories."""
    await vault.reload()
    return _status(vault)


@router.post("/logout", response_model=MessageResponse)
async def logout(vault: VaultSession = Depends(get_vault_session)):
    """Lock the vault and discard the in-memory session."""
    vault.logout()
    return MessageResponse(message="Vault locked", success=True)


@router.get("/status", response_model=SessionStatusResponse)
async def session_status(vault: VaultSession = Depends(get_vault_session)):
    """Current authentication state."""
    return _status(vault)
