"""Health check endpoints.

Public endpoints for service health monitoring.
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from api.dependencies import get_vault_session
from api.models import HealthResponse
from vaultsession import VaultSession


router = APIRouter(tags=["Health"])


@router.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Vault Session API"}


@router.get("/health", response_model=HealthResponse)
async def health_check(vault: VaultSession = Depends(get_vault_session)):
    """Detailed health check."""
    exists = getattr(vault.backend, "exists", None)
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        vault_exists=exists() if callable(exists) else False,
    )
