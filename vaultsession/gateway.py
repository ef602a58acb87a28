"""Backend gateway boundary.

The vault backend performs encryption, decryption, storage and master
password verification. The session layer only talks to it through this
protocol: one awaitable call per operation, any failure raised as an
exception. Implementations hold no session state on the core's behalf.
"""

from typing import Protocol, runtime_checkable

from vaultsession.models import (
    Category,
    CategoryDraft,
    Credential,
    CredentialDraft,
    GeneratorSettings,
)


@runtime_checkable
class VaultBackend(Protocol):
    """Request/response operations consumed by the session layer."""

    async def initialize_vault(self, master_password: str) -> bool: ...

    async def verify_master_password(self, master_password: str) -> bool: ...

    async def get_passwords(self, master_password: str) -> list[Credential]: ...

    async def get_categories(self) -> list[Category]: ...

    async def add_password(self, password: CredentialDraft, master_password: str) -> Credential: ...

    async def update_password(self, password: Credential, master_password: str) -> Credential: ...

    async def delete_password(self, id: str) -> bool: ...

    async def add_category(self, category: CategoryDraft) -> Category: ...

    async def update_category(self, category: Category) -> Category: ...

    async def delete_category(self, id: str) -> bool: ...

    async def generate_password(self, settings: GeneratorSettings) -> str: ...
