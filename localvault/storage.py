"""Vault file I/O.

The whole vault lives in one JSON document. Reads validate the top-level
shape; writes go to a sibling temp file that is fsynced and then renamed
over the vault, so an interrupted write leaves the previous vault intact.
On Unix the file is owner read/write only and its directory owner-only.
"""

import json
import os
import stat
import sys
from typing import Optional


# Owner read/write only (0600)
VAULT_FILE_MODE = stat.S_IRUSR | stat.S_IWUSR
VAULT_DIR_MODE = 0o700

REQUIRED_KEYS = ("master_hash", "master_salt", "key_salt", "passwords", "categories")


class StorageError(Exception):
    """Base exception for vault file operations."""
    pass


class FileCorruptedError(StorageError):
    """Vault file exists but is not a readable vault document."""
    pass


def _restrict(path: str, mode: int) -> None:
    # Windows uses ACLs instead of mode bits
    if sys.platform == "win32":
        return
    try:
        os.chmod(path, mode)
    except OSError:
        pass


def _make_parent(path: str) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(parent):
        os.makedirs(parent, exist_ok=True)
        _restrict(parent, VAULT_DIR_MODE)


def vault_file_exists(path: str) -> bool:
    return os.path.isfile(path)


def read_vault_file(path: str) -> Optional[dict]:
    """Read and shape-check the vault document.

    Args:
        path: Vault file location

    Returns:
        The parsed document, or None if no vault file exists

    Raises:
        FileCorruptedError: Invalid JSON or missing top-level keys
        StorageError: The file could not be read
    """
    if not vault_file_exists(path):
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise FileCorruptedError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise StorageError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise FileCorruptedError(f"{path} does not contain a vault object")
    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise FileCorruptedError(f"{path} is missing: {', '.join(missing)}")
    return data


def write_vault_file(path: str, data: dict) -> None:
    """Atomically replace the vault document.

    Raises:
        StorageError: The document could not be written; the previous
            vault file is left as it was
    """
    tmp_path = f"{path}.tmp"
    try:
        _make_parent(path)
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        _restrict(tmp_path, VAULT_FILE_MODE)
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise StorageError(f"Failed to write {path}: {e}") from e
