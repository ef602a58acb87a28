"""Centralized configuration constants.

All configurable values in one place for easy maintenance.
Security-sensitive settings can be overridden via environment variables.
"""

import os

# File paths
VAULT_FILE = os.environ.get("VAULT_FILE", "password_vault.json")

# Directories
LOG_DIR = os.environ.get("LOG_DIR", "logs")
SIEM_LOG_FILE = os.path.join(LOG_DIR, "siem_events.jsonl")

# Log rotation
SIEM_LOG_MAX_BYTES = int(os.environ.get("SIEM_LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB default
SIEM_LOG_BACKUP_COUNT = int(os.environ.get("SIEM_LOG_BACKUP_COUNT", 5))

# Security constants - OWASP 2023 recommendations
PBKDF2_ITERATIONS = int(os.environ.get("PBKDF2_ITERATIONS", 600_000))  # OWASP 2023 for SHA-256
SALT_LENGTH = 16

# Unlock rate limiting (API surface only)
MAX_LOGIN_ATTEMPTS = 5
UNLOCK_RATE_LIMIT = os.environ.get("UNLOCK_RATE_LIMIT", f"{MAX_LOGIN_ATTEMPTS}/minute")

# Password generation
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128
DEFAULT_PASSWORD_LENGTH = 16
SYMBOL_CHARS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

# Categories
# ALL_CATEGORIES is a filter sentinel and is never stored as a real category
ALL_CATEGORIES = os.environ.get("ALL_CATEGORIES", "ALL")
DEFAULT_CATEGORY = "Personal"
DEFAULT_CATEGORY_ICON = "\U0001F4C1"  # folder
DEFAULT_CATEGORIES = [
    ("Personal", "\U0001F464"),
    ("Work", "\U0001F4BC"),
    ("Finance", "\U0001F4B0"),
    ("Social Media", "\U0001F4F1"),
]
