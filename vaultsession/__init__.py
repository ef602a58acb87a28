"""Vault Session Package.

Client-side session and data-consistency layer of a local password vault:
- config: Centralized configuration constants
- models: Credential, category and generator models
- errors: Error taxonomy
- gateway: Backend request/response protocol
- cache: In-memory credential/category working set and filtering
- auth: Unlock state machine and session
- orchestrator: Credential and category CRUD
- generator: Password generation policy
- session: Session controller wiring the above together
- siem: Security event logging
"""

# Configuration constants
from vaultsession.config import (
    ALL_CATEGORIES,
    DEFAULT_CATEGORY,
    DEFAULT_CATEGORY_ICON,
    MIN_PASSWORD_LENGTH,
    MAX_PASSWORD_LENGTH,
    DEFAULT_PASSWORD_LENGTH,
)

# Models
from vaultsession.models import (
    Credential,
    CredentialDraft,
    CredentialPatch,
    Category,
    CategoryDraft,
    CategoryPatch,
    GeneratorSettings,
)

# Errors
from vaultsession.errors import (
    VaultSessionError,
    AuthenticationFailed,
    SecretMismatch,
    DuplicateName,
    CategoryInUse,
    BackendFailure,
    LoadPartialFailure,
    NotAuthenticated,
    InvalidSessionState,
    EmptyName,
    ReservedName,
    NotFound,
    InvalidSettings,
)

# Components
from vaultsession.gateway import VaultBackend
from vaultsession.cache import CredentialCache, CredentialFilter, FilterState
from vaultsession.auth import AuthMode, AuthState, Authenticator, Session
from vaultsession.orchestrator import CrudOrchestrator
from vaultsession.generator import GeneratorPolicy
from vaultsession.session import VaultSession

# SIEM logging
from vaultsession.siem import log_siem_event, get_siem_events

__all__ = [
    # Config
    "ALL_CATEGORIES",
    "DEFAULT_CATEGORY",
    "DEFAULT_CATEGORY_ICON",
    "MIN_PASSWORD_LENGTH",
    "MAX_PASSWORD_LENGTH",
    "DEFAULT_PASSWORD_LENGTH",
    # Models
    "Credential",
    "CredentialDraft",
    "CredentialPatch",
    "Category",
    "CategoryDraft",
    "CategoryPatch",
    "GeneratorSettings",
    # Errors
    "VaultSessionError",
    "AuthenticationFailed",
    "SecretMismatch",
    "DuplicateName",
    "CategoryInUse",
    "BackendFailure",
    "LoadPartialFailure",
    "NotAuthenticated",
    "InvalidSessionState",
    "EmptyName",
    "ReservedName",
    "NotFound",
    "InvalidSettings",
    # Components
    "VaultBackend",
    "CredentialCache",
    "CredentialFilter",
    "FilterState",
    "AuthMode",
    "AuthState",
    "Authenticator",
    "Session",
    "CrudOrchestrator",
    "GeneratorPolicy",
    "VaultSession",
    # SIEM
    "log_siem_event",
    "get_siem_events",
]
