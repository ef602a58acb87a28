"""Credential management endpoints.

Protected endpoints for credential CRUD. Every change is confirmed by the
vault backend before the session cache reflects it.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies import require_unlocked
from api.models import MessageResponse
from vaultsession import Credential, CredentialDraft, CredentialPatch, VaultSession


router = APIRouter(prefix="/credentials", tags=["Credentials"])


@router.get("", response_model=list[Credential])
async def list_credentials(
    category: Optional[str] = None,
    search: Optional[str] = None,
    vault: VaultSession = Depends(require_unlocked),
):
    """List credentials.

    Without query parameters the session's active filter is applied;
    ``category``/``search`` override it for this request only.
    """
    if category is None and search is None:
        return list(vault.visible_credentials())
    return list(vault.cache.filter(
        category if category is not None else vault.filter_state.category,
        search if search is not None else vault.filter_state.search,
    ))


@router.get("/draft", response_model=CredentialDraft)
async def new_credential_draft(vault: VaultSession = Depends(require_unlocked)):
    """Blank credential pre-filed under the active category."""
    return vault.new_credential_draft()


@router.post("", response_model=Credential, status_code=201)
async def add_credential(
    draft: CredentialDraft,
    vault: VaultSession = Depends(require_unlocked),
):
    """Store a new credential."""
    return await vault.orchestrator.add_credential(draft)


@router.put("/{credential_id}", response_model=Credential)
async def update_credential(
    credential_id: str,
    patch: CredentialPatch,
    vault: VaultSession = Depends(require_unlocked),
):
    """Update some or all fields of a credential."""
    return await vault.orchestrator.update_credential(credential_id, patch)


@router.delete("/{credential_id}", response_model=MessageResponse)
async def delete_credential(
    credential_id: str,
    vault: VaultSession = Depends(require_unlocked),
):
    """Delete a credential."""
    await vault.orchestrator.delete_credential(credential_id)
    return MessageResponse(message="Password deleted successfully", success=True)
