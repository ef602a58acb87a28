"""Local Vault Backend Package.

File-backed implementation of the vault backend protocol:
- storage: Atomic vault file I/O with owner-only permissions
- crypto: PBKDF2 hashing/key derivation and Fernet encryption
- passwords: Random password generation
- backend: LocalVaultBackend
"""

from localvault.backend import LocalVaultBackend, VaultBackendError
from localvault.crypto import DecryptionError
from localvault.storage import StorageError, FileCorruptedError

__all__ = [
    "LocalVaultBackend",
    "VaultBackendError",
    "DecryptionError",
    "StorageError",
    "FileCorruptedError",
]
