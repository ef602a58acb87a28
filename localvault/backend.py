"""Local file-backed vault backend.

Implements the session layer's backend protocol on top of a single JSON
file. Credential passwords are encrypted with a key derived from the
master password; titles, usernames, urls, notes and categories are
stored as-is. Every credential operation re-verifies the master password.

Blocking work (PBKDF2, file I/O) runs in a worker thread so the event
loop stays responsive.
"""

import asyncio
import logging
import time
import uuid
from threading import Lock
from typing import Optional

from cryptography.fernet import Fernet

from localvault.crypto import (
    decrypt,
    encrypt,
    generate_salt,
    get_fernet,
    hash_password,
    verify_password_hash,
)
from localvault.passwords import generate_password
from localvault.storage import read_vault_file, vault_file_exists, write_vault_file
from vaultsession.config import DEFAULT_CATEGORIES, PBKDF2_ITERATIONS, VAULT_FILE
from vaultsession.models import (
    Category,
    CategoryDraft,
    Credential,
    CredentialDraft,
    GeneratorSettings,
)


logger = logging.getLogger(__name__)


class VaultBackendError(Exception):
    """Operation rejected by the local vault."""
    pass


def _now() -> int:
    return int(time.time())


def _new_id() -> str:
    return uuid.uuid4().hex


class LocalVaultBackend:
    """Encrypted JSON vault on the local filesystem."""

    def __init__(self, vault_path: Optional[str] = None, iterations: Optional[int] = None):
        self.vault_path = vault_path or VAULT_FILE
        self.iterations = iterations or PBKDF2_ITERATIONS
        self._lock = Lock()

    def exists(self) -> bool:
        """True if a vault has been initialized at ``vault_path``."""
        return vault_file_exists(self.vault_path)

    # File helpers

    def _load(self) -> dict:
        data = read_vault_file(self.vault_path)
        if data is None:
            raise VaultBackendError("Vault does not exist")
        return data

    def _save(self, data: dict) -> None:
        write_vault_file(self.vault_path, data)

    def _verify(self, data: dict, master_password: str) -> bool:
        return verify_password_hash(
            master_password,
            bytes.fromhex(data["master_salt"]),
            bytes.fromhex(data["master_hash"]),
            data.get("iterations", self.iterations),
        )

    def _open(self, master_password: str) -> tuple[dict, Fernet]:
        """Load the vault and derive its key, rejecting a wrong master password."""
        data = self._load()
        if not self._verify(data, master_password):
            raise VaultBackendError("Incorrect master password")
        fernet = get_fernet(
            master_password,
            bytes.fromhex(data["key_salt"]),
            data.get("iterations", self.iterations),
        )
        return data, fernet

    @staticmethod
    def _index_of(items: list[dict], item_id: str) -> Optional[int]:
        for index, item in enumerate(items):
            if item["id"] == item_id:
                return index
        return None

    # Synchronous implementations

    def _initialize_vault(self, master_password: str) -> bool:
        with self._lock:
            if self.exists():
                raise VaultBackendError("Vault already exists")

            master_salt = generate_salt()
            data = {
                "master_hash": hash_password(master_password, master_salt, self.iterations).hex(),
                "master_salt": master_salt.hex(),
                "key_salt": generate_salt().hex(),
                "iterations": self.iterations,
                "passwords": [],
                "categories": [
                    {"id": _new_id(), "name": name, "icon": icon}
                    for name, icon in DEFAULT_CATEGORIES
                ],
            }
            self._save(data)
        logger.info("Initialized vault at %s", self.vault_path)
        return True

    def _verify_master_password(self, master_password: str) -> bool:
        return self._verify(self._load(), master_password)

    def _get_passwords(self, master_password: str) -> list[Credential]:
        data, fernet = self._open(master_password)
        return [
            Credential(**{**entry, "password": decrypt(fernet, entry["password"])})
            for entry in data["passwords"]
        ]

    def _get_categories(self) -> list[Category]:
        return [Category(**entry) for entry in self._load()["categories"]]

    def _add_password(self, draft: CredentialDraft, master_password: str) -> Credential:
        with self._lock:
            data, fernet = self._open(master_password)
            now = _now()
            credential = Credential(**draft.model_dump(), id=_new_id(), created_at=now, updated_at=now)

            entry = credential.model_dump()
            entry["password"] = encrypt(fernet, credential.password)
            data["passwords"].append(entry)
            self._save(data)
        return credential

    def _update_password(self, credential: Credential, master_password: str) -> Credential:
        with self._lock:
            data, fernet = self._open(master_password)
            index = self._index_of(data["passwords"], credential.id)
            if index is None:
                raise VaultBackendError("Password does not exist")

            updated = credential.model_copy(update={
                "created_at": data["passwords"][index]["created_at"],
                "updated_at": _now(),
            })
            entry = updated.model_dump()
            entry["password"] = encrypt(fernet, updated.password)
            data["passwords"][index] = entry
            self._save(data)
        return updated

    def _delete_entry(self, section: str, item_id: str, label: str) -> bool:
        with self._lock:
            data = self._load()
            index = self._index_of(data[section], item_id)
            if index is None:
                raise VaultBackendError(f"{label} does not exist")
            del data[section][index]
            self._save(data)
        return True

    def _add_category(self, draft: CategoryDraft) -> Category:
        with self._lock:
            data = self._load()
            category = Category(**draft.model_dump(), id=_new_id())
            data["categories"].append(category.model_dump())
            self._save(data)
        return category

    def _update_category(self, category: Category) -> Category:
        with self._lock:
            data = self._load()
            index = self._index_of(data["categories"], category.id)
            if index is None:
                raise VaultBackendError("Category does not exist")
            data["categories"][index] = category.model_dump()
            self._save(data)
        return category

    # Backend protocol

    async def initialize_vault(self, master_password: str) -> bool:
        return await asyncio.to_thread(self._initialize_vault, master_password)

    async def verify_master_password(self, master_password: str) -> bool:
        return await asyncio.to_thread(self._verify_master_password, master_password)

    async def get_passwords(self, master_password: str) -> list[Credential]:
        return await asyncio.to_thread(self._get_passwords, master_password)

    async def get_categories(self) -> list[Category]:
        return await asyncio.to_thread(self._get_categories)

    async def add_password(self, password: CredentialDraft, master_password: str) -> Credential:
        return await asyncio.to_thread(self._add_password, password, master_password)

    async def update_password(self, password: Credential, master_password: str) -> Credential:
        return await asyncio.to_thread(self._update_password, password, master_password)

    async def delete_password(self, id: str) -> bool:
        return await asyncio.to_thread(self._delete_entry, "passwords", id, "Password")

    async def add_category(self, category: CategoryDraft) -> Category:
        return await asyncio.to_thread(self._add_category, category)

    async def update_category(self, category: Category) -> Category:
        return await asyncio.to_thread(self._update_category, category)

    async def delete_category(self, id: str) -> bool:
        return await asyncio.to_thread(self._delete_entry, "categories", id, "Category")

    async def generate_password(self, settings: GeneratorSettings) -> str:
        return generate_password(settings)
