"""Vault session controller.

Ties the authentication state machine, credential cache, CRUD
orchestrator, generator policy and active filter into one object that
callers own and pass around explicitly. One instance per user session;
nothing here is process-global.
"""

import asyncio
import logging
from typing import Optional

from vaultsession.auth import AuthState, Authenticator, Session
from vaultsession.cache import CredentialCache, CredentialFilter, FilterState
from vaultsession.config import ALL_CATEGORIES, DEFAULT_CATEGORY
from vaultsession.errors import LoadPartialFailure, NotAuthenticated
from vaultsession.gateway import VaultBackend
from vaultsession.generator import GeneratorPolicy
from vaultsession.models import CredentialDraft
from vaultsession.orchestrator import CrudOrchestrator
from vaultsession.siem import log_siem_event


logger = logging.getLogger(__name__)


class VaultSession:
    """Entry point for user intents against one vault."""

    def __init__(self, backend: VaultBackend):
        self.backend = backend
        self.auth = Authenticator(backend)
        self.cache = CredentialCache()
        self.filter_state = FilterState()
        # One intent at a time: CRUD operations and loads share this lock
        self.intent_lock = asyncio.Lock()
        self.orchestrator = CrudOrchestrator(
            backend, self.cache, self.auth, self.filter_state, lock=self.intent_lock
        )
        self.generator = GeneratorPolicy(backend)
        self.load_error: Optional[LoadPartialFailure] = None

    @property
    def state(self) -> AuthState:
        return self.auth.state

    @property
    def is_authenticated(self) -> bool:
        return self.auth.is_authenticated

    async def unlock(
        self,
        secret: str,
        confirm_secret: Optional[str] = None,
        is_registering: bool = False,
    ) -> Session:
        """Authenticate, then load the vault contents once.

        Raises:
            SecretMismatch, AuthenticationFailed: Unlock did not happen
            LoadPartialFailure: Unlocked, but the initial load failed
        """
        session = await self.auth.submit(secret, confirm_secret, is_registering)
        await self.load()
        return session

    async def load(self) -> None:
        """Fetch all credentials and categories and swap them into the cache.

        Both reads are issued together; the cache is replaced only when both
        succeed. A failure does not affect authentication. Runs under the
        intent lock, so no mutation is confirmed between the reads and the
        swap.
        """
        async with self.intent_lock:
            await self._load_locked()

    async def _load_locked(self) -> None:
        if not self.auth.is_authenticated:
            raise NotAuthenticated()
        session = self.auth.session

        results = await asyncio.gather(
            self.backend.get_passwords(session.master_secret),
            self.backend.get_categories(),
            return_exceptions=True,
        )
        if self.auth.session is not session or not self.auth.is_authenticated:
            logger.warning("Session ended during load; results discarded")
            raise NotAuthenticated("Session ended before the vault finished loading.")

        failed = {
            name: result
            for name, result in zip(("get_passwords", "get_categories"), results)
            if isinstance(result, BaseException)
        }
        if failed:
            for name, exc in failed.items():
                logger.warning("Initial load: %s failed: %s", name, exc)
            log_siem_event("vault_load", "FAILURE", details={"failed": sorted(failed)})
            self.load_error = LoadPartialFailure(failed)
            raise self.load_error

        passwords, categories = results
        self.cache.replace_all(passwords, categories)
        self.load_error = None
        logger.info("Loaded %d password(s), %d categor(ies)", len(passwords), len(categories))

    async def reload(self) -> None:
        """User-initiated retry of the combined load."""
        await self.load()

    def logout(self) -> None:
        """Lock the vault and drop everything held for the session."""
        self.auth.logout()
        self.cache.clear()
        self.filter_state.reset()
        self.load_error = None
        log_siem_event("logout", "SUCCESS")

    def select_category(self, name: str) -> None:
        self.filter_state.category = name

    def set_search(self, text: str) -> None:
        self.filter_state.search = text

    def visible_credentials(self) -> CredentialFilter:
        """Credentials matching the active category and search text."""
        return self.cache.filter(self.filter_state.category, self.filter_state.search)

    def new_credential_draft(self) -> CredentialDraft:
        """Blank credential pre-filed under the active category."""
        category = self.filter_state.category
        if category == ALL_CATEGORIES:
            category = DEFAULT_CATEGORY
        return CredentialDraft(category=category)
