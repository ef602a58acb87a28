"""Filter and password generator endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import get_vault_session, require_unlocked
from api.models import FilterRequest, FilterResponse, GeneratedPasswordResponse
from vaultsession import GeneratorSettings, VaultSession


router = APIRouter(tags=["Tools"])


@router.get("/filter", response_model=FilterResponse)
async def get_filter(vault: VaultSession = Depends(require_unlocked)):
    """Active category filter and search text."""
    return FilterResponse(category=vault.filter_state.category, search=vault.filter_state.search)


@router.put("/filter", response_model=FilterResponse)
async def set_filter(
    request: FilterRequest,
    vault: VaultSession = Depends(require_unlocked),
):
    """Change the active category filter and/or search text."""
    if request.category is not None:
        vault.select_category(request.category)
    if request.search is not None:
        vault.set_search(request.search)
    return FilterResponse(category=vault.filter_state.category, search=vault.filter_state.search)


@router.get("/generator", response_model=GeneratorSettings)
async def get_generator_settings(vault: VaultSession = Depends(get_vault_session)):
    """Current password generator settings."""
    return vault.generator.settings


@router.put("/generator", response_model=GeneratorSettings)
async def update_generator_settings(
    changes: dict,
    vault: VaultSession = Depends(get_vault_session),
):
    """Change one or more generator options."""
    return vault.generator.update(**changes)


@router.post("/generator/generate", response_model=GeneratedPasswordResponse)
async def generate_password(vault: VaultSession = Depends(get_vault_session)):
    """Generate a password with the current settings."""
    return GeneratedPasswordResponse(password=await vault.generator.generate())
