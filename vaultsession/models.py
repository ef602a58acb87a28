"""Pydantic models for vault entities.

Credentials and categories are exchanged with the backend as whole
entities. Edits are expressed as patches (sets of optional fields) that
are merged into the full entity before it is sent.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from vaultsession.config import (
    DEFAULT_CATEGORY,
    DEFAULT_CATEGORY_ICON,
    DEFAULT_PASSWORD_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
)


class CredentialDraft(BaseModel):
    """A credential that has not been stored yet (no id, no timestamps)."""
    title: str = ""
    username: str = ""
    password: str = ""
    url: str = ""
    notes: str = ""
    category: str = DEFAULT_CATEGORY


class Credential(CredentialDraft):
    """A stored credential as returned by the backend."""
    model_config = ConfigDict(frozen=True)

    id: str
    created_at: int = 0
    updated_at: int = 0


class CredentialPatch(BaseModel):
    """Partial edit of a credential; unset fields keep their value."""
    title: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    category: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)

    def apply(self, credential: Credential) -> Credential:
        """Merge set fields into ``credential`` and return the full entity."""
        return credential.model_copy(update=self.changes())


class CategoryDraft(BaseModel):
    """A category that has not been stored yet."""
    name: str
    icon: str = Field(default=DEFAULT_CATEGORY_ICON, min_length=1)


class Category(CategoryDraft):
    """A stored category as returned by the backend."""
    model_config = ConfigDict(frozen=True)

    id: str


class CategoryPatch(BaseModel):
    """Partial edit of a category."""
    name: Optional[str] = None
    icon: Optional[str] = Field(default=None, min_length=1)

    def apply(self, category: Category) -> Category:
        return category.model_copy(update=self.model_dump(exclude_none=True))


class GeneratorSettings(BaseModel):
    """Password generation options sent to the backend."""
    model_config = ConfigDict(validate_assignment=True)

    length: int = Field(
        default=DEFAULT_PASSWORD_LENGTH,
        ge=MIN_PASSWORD_LENGTH,
        le=MAX_PASSWORD_LENGTH,
        description="Password length",
    )
    include_uppercase: bool = Field(default=True, description="Include uppercase letters")
    include_lowercase: bool = Field(default=True, description="Include lowercase letters")
    include_numbers: bool = Field(default=True, description="Include digits")
    include_symbols: bool = Field(default=True, description="Include special characters")
