"""Random password generation for the local vault backend."""

import secrets
import string

from vaultsession.config import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH, SYMBOL_CHARS
from vaultsession.models import GeneratorSettings


def generate_password(settings: GeneratorSettings) -> str:
    """Generate a random password from the selected character pools.

    Each character is drawn uniformly from the union of the selected pools.

    Args:
        settings: Length and character type options

    Returns:
        Generated password string

    Raises:
        ValueError: If no character types are selected or length is out of range
    """
    if not MIN_PASSWORD_LENGTH <= settings.length <= MAX_PASSWORD_LENGTH:
        raise ValueError(
            f"Password length must be between {MIN_PASSWORD_LENGTH} and {MAX_PASSWORD_LENGTH}."
        )

    pool = ""
    if settings.include_uppercase:
        pool += string.ascii_uppercase
    if settings.include_lowercase:
        pool += string.ascii_lowercase
    if settings.include_numbers:
        pool += string.digits
    if settings.include_symbols:
        pool += SYMBOL_CHARS

    if not pool:
        raise ValueError("At least one character type must be selected.")

    return "".join(secrets.choice(pool) for _ in range(settings.length))
