"""Cryptographic operations for the local vault.

Master password hashing and encryption key derivation both use PBKDF2
with SHA-256 per OWASP 2023 recommendations, with independent salts.
Credential passwords are encrypted with Fernet (AES-128-CBC + HMAC).
"""

import base64
import hashlib
import hmac
import os

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from vaultsession.config import SALT_LENGTH


class DecryptionError(Exception):
    """Ciphertext could not be decrypted with the derived key."""
    pass


def generate_salt() -> bytes:
    """Generate a cryptographically secure random salt.

    Returns:
        16-byte random salt
    """
    return os.urandom(SALT_LENGTH)


def hash_password(password: str, salt: bytes, iterations: int) -> bytes:
    """Hash a master password using PBKDF2-SHA256.

    Args:
        password: Password to hash
        salt: Random salt bytes
        iterations: PBKDF2 iteration count

    Returns:
        32-byte hash digest
    """
    return hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations)


def verify_password_hash(password: str, salt: bytes, stored_hash: bytes, iterations: int) -> bool:
    """Verify a password against a stored hash in constant time.

    Returns:
        True if password matches, False otherwise
    """
    computed_hash = hash_password(password, salt, iterations)
    return hmac.compare_digest(computed_hash, stored_hash)


def derive_key(password: str, salt: bytes, iterations: int) -> bytes:
    """Derive a Fernet-compatible key from password using PBKDF2.

    Args:
        password: Master password
        salt: Random salt for key derivation
        iterations: PBKDF2 iteration count

    Returns:
        Base64-encoded 32-byte key suitable for Fernet
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(password.encode()))


def get_fernet(password: str, salt: bytes, iterations: int) -> Fernet:
    """Get a Fernet instance keyed from the master password."""
    return Fernet(derive_key(password, salt, iterations))


def encrypt(fernet: Fernet, plaintext: str) -> str:
    """Encrypt a string.

    Returns:
        Base64-encoded encrypted string
    """
    return fernet.encrypt(plaintext.encode()).decode()


def decrypt(fernet: Fernet, ciphertext: str) -> str:
    """Decrypt a string.

    Raises:
        DecryptionError: If the token is invalid for this key
    """
    try:
        return fernet.decrypt(ciphertext.encode()).decode()
    except InvalidToken as e:
        raise DecryptionError("Failed to decrypt password") from e
