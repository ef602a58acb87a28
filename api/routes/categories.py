"""Category management endpoints.

Names are unique (case-sensitive, trimmed). A category cannot be deleted
while credentials are filed under it.
"""

from fastapi import APIRouter, Depends

from api.dependencies import require_unlocked
from api.models import MessageResponse
from vaultsession import Category, CategoryDraft, CategoryPatch, VaultSession


router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[Category])
async def list_categories(vault: VaultSession = Depends(require_unlocked)):
    """List all categories."""
    return vault.cache.categories


@router.post("", response_model=Category, status_code=201)
async def add_category(
    draft: CategoryDraft,
    vault: VaultSession = Depends(require_unlocked),
):
    """Create a category."""
    return await vault.orchestrator.add_category(draft)


@router.put("/{category_id}", response_model=Category)
async def update_category(
    category_id: str,
    patch: CategoryPatch,
    vault: VaultSession = Depends(require_unlocked),
):
    """Rename or change the icon of a category."""
    return await vault.orchestrator.update_category(category_id, patch)


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    vault: VaultSession = Depends(require_unlocked),
):
    """Delete an unused category."""
    await vault.orchestrator.delete_category(category_id)
    return MessageResponse(message="Category deleted successfully", success=True)
