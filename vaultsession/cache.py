"""In-memory working set of credentials and categories.

The cache is written only with backend-confirmed entities. It performs no
I/O and never computes timestamps itself.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from vaultsession.config import ALL_CATEGORIES
from vaultsession.models import Category, Credential


@dataclass
class FilterState:
    """Active category selection and search text for the session."""
    category: str = ALL_CATEGORIES
    search: str = ""

    def reset(self) -> None:
        self.category = ALL_CATEGORIES
        self.search = ""


class CredentialFilter:
    """Lazy, restartable view over the cache.

    Each iteration re-runs the query against the cache's current contents,
    preserving cache order.
    """

    def __init__(self, cache: "CredentialCache", category: str, search: str):
        self._cache = cache
        self.category = category
        self.search = search

    def _matches(self, credential: Credential) -> bool:
        if self.category != ALL_CATEGORIES and credential.category != self.category:
            return False
        if not self.search:
            return True
        needle = self.search.lower()
        return (
            needle in credential.title.lower()
            or needle in credential.username.lower()
            or needle in credential.url.lower()
        )

    def __iter__(self) -> Iterator[Credential]:
        return (c for c in self._cache.credentials if self._matches(c))


class CredentialCache:
    """Holds the decrypted credentials and categories for one session."""

    def __init__(self):
        # dicts keep insertion order; replacing a key keeps its position
        self._credentials: dict[str, Credential] = {}
        self._categories: dict[str, Category] = {}
        self.loaded = False

    @property
    def credentials(self) -> list[Credential]:
        return list(self._credentials.values())

    @property
    def categories(self) -> list[Category]:
        return list(self._categories.values())

    def replace_all(self, credentials: list[Credential], categories: list[Category]) -> None:
        """Swap in a complete working set in one step."""
        new_credentials = {c.id: c for c in credentials}
        new_categories = {c.id: c for c in categories}
        self._credentials, self._categories = new_credentials, new_categories
        self.loaded = True

    def clear(self) -> None:
        self._credentials, self._categories = {}, {}
        self.loaded = False

    def upsert_credential(self, credential: Credential) -> None:
        self._credentials[credential.id] = credential

    def remove_credential(self, credential_id: str) -> None:
        self._credentials.pop(credential_id, None)

    def upsert_category(self, category: Category) -> None:
        self._categories[category.id] = category

    def remove_category(self, category_id: str) -> None:
        self._categories.pop(category_id, None)

    def get_credential(self, credential_id: str) -> Optional[Credential]:
        return self._credentials.get(credential_id)

    def get_category(self, category_id: str) -> Optional[Category]:
        return self._categories.get(category_id)

    def category_named(self, name: str, exclude_id: Optional[str] = None) -> Optional[Category]:
        """Find a category by exact (case-sensitive) name."""
        for category in self._categories.values():
            if category.name == name and category.id != exclude_id:
                return category
        return None

    def credentials_in(self, category_name: str) -> list[Credential]:
        return [c for c in self._credentials.values() if c.category == category_name]

    def filter(self, category_name: str = ALL_CATEGORIES, search_text: str = "") -> CredentialFilter:
        return CredentialFilter(self, category_name, search_text)

    def __len__(self) -> int:
        return len(self._credentials)
