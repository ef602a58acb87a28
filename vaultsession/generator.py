"""Password generation policy.

Holds the user's generation options for the current session and asks
the backend to generate. No randomness happens on this side.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from vaultsession.errors import BackendFailure, InvalidSettings
from vaultsession.gateway import VaultBackend
from vaultsession.models import GeneratorSettings


logger = logging.getLogger(__name__)


class GeneratorPolicy:
    """Session-scoped generator options, delegated to the backend."""

    def __init__(self, backend: VaultBackend, settings: Optional[GeneratorSettings] = None):
        self.backend = backend
        self.settings = settings or GeneratorSettings()

    def update(self, **changes) -> GeneratorSettings:
        """Change one or more options.

        Raises:
            InvalidSettings: Unknown option or value out of range; the
                current settings are kept
        """
        unknown = set(changes) - set(GeneratorSettings.model_fields)
        if unknown:
            raise InvalidSettings(f"Unknown generator option(s): {', '.join(sorted(unknown))}")

        try:
            self.settings = GeneratorSettings(**{**self.settings.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidSettings(str(e)) from e
        return self.settings

    def reset(self) -> None:
        self.settings = GeneratorSettings()

    async def generate(self) -> str:
        """Generate a password with the current settings."""
        try:
            return await self.backend.generate_password(self.settings.model_copy())
        except Exception as exc:
            logger.warning("Backend generate_password failed: %s", exc)
            raise BackendFailure("generate_password", str(exc)) from exc
