"""Pydantic models for API request/response validation.

Entity models (credentials, categories, generator settings) are shared
with the session layer; this module only adds the request and response
shapes specific to the HTTP surface.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UnlockRequest(BaseModel):
    """Request model for unlocking or initializing the vault."""
    master_password: str = Field(..., min_length=1, description="Master password")
    confirm_password: Optional[str] = Field(
        default=None, description="Confirmation, required when registering"
    )
    is_registering: bool = Field(default=False, description="Initialize a new vault")


class SessionStatusResponse(BaseModel):
    """Current authentication state of the session."""
    state: str
    mode: str
    authenticated: bool
    failure_reason: Optional[str] = None
    loaded: bool
    load_error: Optional[str] = None


class FilterRequest(BaseModel):
    """Change the active category filter and/or search text."""
    category: Optional[str] = Field(default=None, description="Category name or the all-categories sentinel")
    search: Optional[str] = Field(default=None, description="Case-insensitive search text")


class FilterResponse(BaseModel):
    category: str
    search: str


class GeneratedPasswordResponse(BaseModel):
    """Response model for generated password."""
    password: str


class MessageResponse(BaseModel):
    """Generic message response."""
    message: str
    success: bool


class ErrorResponse(BaseModel):
    """Error body for session errors."""
    detail: str
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    vault_exists: bool
