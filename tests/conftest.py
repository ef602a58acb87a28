"""Shared pytest fixtures for the vault session test suite.

``FakeBackend`` is an in-memory vault backend that records every call,
so tests can assert exactly which backend operations an intent issued.
"""

import asyncio
import itertools
import os
import sys

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from vaultsession import (
    Category,
    CategoryDraft,
    Credential,
    CredentialDraft,
    GeneratorSettings,
    VaultSession,
)
from vaultsession import config


MASTER = "hunter2"


class FakeBackend:
    """In-memory backend recording calls; operations in ``fail`` raise.

    A non-zero ``delay`` makes every call yield to the event loop before
    completing, so overlapping intents can be exercised.
    """

    def __init__(self, master_password=None):
        self.master_password = master_password
        self.calls: list[str] = []
        self.fail: set[str] = set()
        self.accept = True
        self.credentials: dict[str, Credential] = {}
        self.categories: dict[str, Category] = {}
        self.last_settings = None
        self.delay = 0.0
        self._ids = itertools.count(1)
        self._clock = itertools.count(1_700_000_000)

    async def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if self.delay:
            await asyncio.sleep(self.delay)
        if operation in self.fail:
            raise RuntimeError(f"{operation} failed")

    def _check_master(self, master_password: str) -> None:
        if master_password != self.master_password:
            raise RuntimeError("Incorrect master password")

    def count(self, operation: str) -> int:
        return self.calls.count(operation)

    def seed_category(self, name: str, icon: str = "*") -> Category:
        category = Category(id=f"cat-{next(self._ids)}", name=name, icon=icon)
        self.categories[category.id] = category
        return category

    def seed_credential(self, title: str, category: str, **fields) -> Credential:
        now = next(self._clock)
        credential = Credential(
            id=f"pw-{next(self._ids)}", title=title, category=category,
            created_at=now, updated_at=now, **fields
        )
        self.credentials[credential.id] = credential
        return credential

    async def initialize_vault(self, master_password: str) -> bool:
        await self._record("initialize_vault")
        if self.accept:
            self.master_password = master_password
        return self.accept

    async def verify_master_password(self, master_password: str) -> bool:
        await self._record("verify_master_password")
        return self.accept and master_password == self.master_password

    async def get_passwords(self, master_password: str) -> list[Credential]:
        await self._record("get_passwords")
        self._check_master(master_password)
        return list(self.credentials.values())

    async def get_categories(self) -> list[Category]:
        await self._record("get_categories")
        return list(self.categories.values())

    async def add_password(self, password: CredentialDraft, master_password: str) -> Credential:
        await self._record("add_password")
        self._check_master(master_password)
        now = next(self._clock)
        credential = Credential(
            **password.model_dump(), id=f"pw-{next(self._ids)}", created_at=now, updated_at=now
        )
        self.credentials[credential.id] = credential
        return credential

    async def update_password(self, password: Credential, master_password: str) -> Credential:
        await self._record("update_password")
        self._check_master(master_password)
        current = self.credentials[password.id]
        updated = password.model_copy(update={
            "created_at": current.created_at,
            "updated_at": next(self._clock),
        })
        self.credentials[updated.id] = updated
        return updated

    async def delete_password(self, id: str) -> bool:
        await self._record("delete_password")
        return self.credentials.pop(id, None) is not None

    async def add_category(self, category: CategoryDraft) -> Category:
        await self._record("add_category")
        created = Category(**category.model_dump(), id=f"cat-{next(self._ids)}")
        self.categories[created.id] = created
        return created

    async def update_category(self, category: Category) -> Category:
        await self._record("update_category")
        if category.id not in self.categories:
            raise RuntimeError("Category does not exist")
        self.categories[category.id] = category
        return category

    async def delete_category(self, id: str) -> bool:
        await self._record("delete_category")
        return self.categories.pop(id, None) is not None

    async def generate_password(self, settings: GeneratorSettings) -> str:
        await self._record("generate_password")
        self.last_settings = settings
        return "g" * settings.length


@pytest.fixture(autouse=True)
def _isolate_siem_log(tmp_path, monkeypatch):
    """Redirect security event logging to a temp directory for every test."""
    monkeypatch.setattr(config, "SIEM_LOG_FILE", str(tmp_path / "logs" / "siem_events.jsonl"))


@pytest.fixture
def backend():
    """Fake backend for a returning user whose master password is MASTER."""
    return FakeBackend(master_password=MASTER)


@pytest.fixture
def vault(backend):
    return VaultSession(backend)


@pytest_asyncio.fixture
async def unlocked(vault, backend):
    """Session unlocked against a backend holding two categories."""
    backend.seed_category("Personal")
    backend.seed_category("Work")
    await vault.unlock(MASTER)
    backend.calls.clear()
    return vault
