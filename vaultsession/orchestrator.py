"""Credential and category CRUD orchestration.

Each operation follows the same protocol:

1. Validate locally where that avoids a wasted backend round trip.
2. Issue exactly one backend call.
3. On success, apply the single matching cache mutation and notify listeners.
4. On failure, leave the cache untouched and raise.

Operations hold the session's intent lock from step 1 through step 3, so
intents run one at a time in submission order and local checks always see
the cache as the previous intent left it.

The cache therefore only ever reflects backend-confirmed state; there is
nothing to roll back when a call fails.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from vaultsession.auth import Authenticator, Session
from vaultsession.cache import CredentialCache, FilterState
from vaultsession.config import ALL_CATEGORIES
from vaultsession.errors import (
    BackendFailure,
    CategoryInUse,
    DuplicateName,
    EmptyName,
    NotAuthenticated,
    NotFound,
    ReservedName,
)
from vaultsession.gateway import VaultBackend
from vaultsession.models import (
    Category,
    CategoryDraft,
    CategoryPatch,
    Credential,
    CredentialDraft,
    CredentialPatch,
)
from vaultsession.siem import log_siem_event


logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[str, Any], None]

# Notification event names
CREDENTIAL_ADDED = "credential_added"
CREDENTIAL_UPDATED = "credential_updated"
CREDENTIAL_DELETED = "credential_deleted"
CATEGORY_ADDED = "category_added"
CATEGORY_UPDATED = "category_updated"
CATEGORY_DELETED = "category_deleted"


class CrudOrchestrator:
    """Sequences backend calls with cache mutations."""

    def __init__(
        self,
        backend: VaultBackend,
        cache: CredentialCache,
        auth: Authenticator,
        filter_state: FilterState,
        lock: Optional[asyncio.Lock] = None,
    ):
        self.backend = backend
        self.cache = cache
        self.auth = auth
        self.filter_state = filter_state
        self.lock = lock or asyncio.Lock()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Register a callable receiving (event_name, payload) on success."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str, payload: Any, entity_id: str) -> None:
        log_siem_event(event, "SUCCESS", details={"id": entity_id})
        for listener in list(self._listeners):
            listener(event, payload)

    def _require_session(self) -> Session:
        if not self.auth.is_authenticated:
            raise NotAuthenticated()
        return self.auth.session

    def _ensure_current(self, session: Session, operation: str) -> None:
        """Refuse to touch the cache if the session ended during the call.

        Logout clears the cache synchronously; a confirmation arriving after
        that belongs to a session that no longer exists.
        """
        if self.auth.session is not session or not self.auth.is_authenticated:
            logger.warning("Session ended while %s was in flight; result discarded", operation)
            log_siem_event(operation, "DISCARDED", details={"reason": "session_ended"})
            raise NotAuthenticated("Session ended before the change could be applied.")

    async def _call(self, operation: str, request: Awaitable[T]) -> T:
        """Await one backend call, converting any failure to BackendFailure."""
        try:
            return await request
        except Exception as exc:
            logger.warning("Backend %s failed: %s", operation, exc)
            log_siem_event(operation, "FAILURE", details={"error": type(exc).__name__})
            raise BackendFailure(operation, str(exc)) from exc

    # Credentials

    def _check_credential_category(self, category: str) -> None:
        # The category itself is not required to exist; only the sentinel is refused
        if category == ALL_CATEGORIES:
            raise ReservedName(category)

    async def add_credential(self, draft: CredentialDraft) -> Credential:
        """Store a new credential; id and timestamps come from the backend."""
        async with self.lock:
            session = self._require_session()
            self._check_credential_category(draft.category)

            created = await self._call(
                "add_password",
                self.backend.add_password(draft, session.master_secret),
            )
            self._ensure_current(session, "add_password")
            self.cache.upsert_credential(created)
        self._notify(CREDENTIAL_ADDED, created, created.id)
        return created

    async def update_credential(self, credential_id: str, patch: CredentialPatch) -> Credential:
        """Merge ``patch`` into the cached credential and send the full entity."""
        async with self.lock:
            session = self._require_session()
            current = self.cache.get_credential(credential_id)
            if current is None:
                raise NotFound("Credential", credential_id)

            merged = patch.apply(current)
            self._check_credential_category(merged.category)

            updated = await self._call(
                "update_password",
                self.backend.update_password(merged, session.master_secret),
            )
            self._ensure_current(session, "update_password")
            self.cache.upsert_credential(updated)
        self._notify(CREDENTIAL_UPDATED, updated, updated.id)
        return updated

    async def delete_credential(self, credential_id: str) -> None:
        async with self.lock:
            session = self._require_session()
            if self.cache.get_credential(credential_id) is None:
                raise NotFound("Credential", credential_id)

            deleted = await self._call("delete_password", self.backend.delete_password(credential_id))
            if not deleted:
                raise BackendFailure("delete_password", "Backend did not delete the password")

            self._ensure_current(session, "delete_password")
            self.cache.remove_credential(credential_id)
        self._notify(CREDENTIAL_DELETED, credential_id, credential_id)

    # Categories

    def _validated_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        name = name.strip()
        if not name:
            raise EmptyName()
        if name == ALL_CATEGORIES:
            raise ReservedName(name)
        if self.cache.category_named(name, exclude_id=exclude_id) is not None:
            raise DuplicateName(name)
        return name

    async def add_category(self, draft: CategoryDraft) -> Category:
        """Create a category with a unique, trimmed name."""
        async with self.lock:
            session = self._require_session()
            name = self._validated_name(draft.name)

            created = await self._call(
                "add_category",
                self.backend.add_category(draft.model_copy(update={"name": name})),
            )
            self._ensure_current(session, "add_category")
            self.cache.upsert_category(created)
        self._notify(CATEGORY_ADDED, created, created.id)
        return created

    async def update_category(self, category_id: str, patch: CategoryPatch) -> Category:
        """Rename and/or re-icon a category.

        Credentials filed under the old name are not rewritten.
        """
        async with self.lock:
            session = self._require_session()
            current = self.cache.get_category(category_id)
            if current is None:
                raise NotFound("Category", category_id)

            if patch.name is not None:
                patch = patch.model_copy(
                    update={"name": self._validated_name(patch.name, exclude_id=category_id)}
                )

            updated = await self._call(
                "update_category", self.backend.update_category(patch.apply(current))
            )
            self._ensure_current(session, "update_category")
            self.cache.upsert_category(updated)
        self._notify(CATEGORY_UPDATED, updated, updated.id)
        return updated

    async def delete_category(self, category_id: str) -> None:
        """Delete a category that no credential references.

        Resets the active filter to all categories if it pointed at the
        deleted category, after the backend confirms.
        """
        async with self.lock:
            session = self._require_session()
            category = self.cache.get_category(category_id)
            if category is None:
                raise NotFound("Category", category_id)

            in_use = self.cache.credentials_in(category.name)
            if in_use:
                raise CategoryInUse(category.name, len(in_use))

            deleted = await self._call("delete_category", self.backend.delete_category(category_id))
            if not deleted:
                raise BackendFailure("delete_category", "Backend did not delete the category")

            self._ensure_current(session, "delete_category")
            self.cache.remove_category(category_id)
            if self.filter_state.category == category.name:
                self.filter_state.category = ALL_CATEGORIES
        self._notify(CATEGORY_DELETED, category, category_id)
