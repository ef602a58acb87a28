"""FastAPI application configuration.

Main entry point for the Vault Session REST API. The API is a local,
single-user surface: one process holds one VaultSession, and each request
is a user intent executed against it.

Implements security best practices including rate limiting on unlock,
security headers, and restrictive CORS configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.dependencies import limiter, vault_session_error_handler
from api.routes import (
    auth_router,
    categories_router,
    credentials_router,
    health_router,
    tools_router,
)
from localvault import LocalVaultBackend
from vaultsession import VaultBackend, VaultSession, VaultSessionError


logger = logging.getLogger(__name__)


def create_app(backend: Optional[VaultBackend] = None) -> FastAPI:
    """Build the API around a fresh session.

    Args:
        backend: Vault backend to use; defaults to the local file vault
    """
    vault = VaultSession(backend or LocalVaultBackend())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle startup and shutdown events."""
        yield
        vault.logout()

    app = FastAPI(
        title="Vault Session API",
        description="""
    Local password vault session API with:
    - Master password unlock / first-run initialization
    - Credential and category management
    - Category filtering and search
    - Backend-side password generation
    """,
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.vault_session = vault

    # Attach rate limiter to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(VaultSessionError, vault_session_error_handler)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next) -> Response:
        """Add security headers to all responses.

        Responses carry decrypted passwords, so caching is disabled.
        """
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Content-Security-Policy"] = "default-src 'self'; frame-ancestors 'none'"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
        response.headers["Pragma"] = "no-cache"
        return response

    # Local UI only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin"],
        max_age=600,
    )

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(credentials_router)
    app.include_router(categories_router)
    app.include_router(tools_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(message)s")
    uvicorn.run(app, host="127.0.0.1", port=8000)
