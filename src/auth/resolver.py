"""Tenant resolution from the Authorization header and the auth configuration file."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from src.models import TenantAuth

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for authentication failures mapped to an HTTP status."""

    status_code = 500


class AuthenticationError(AuthError):
    """Raised when the Authorization header is missing or malformed."""

    status_code = 401


class AuthorizationNotFoundError(AuthError):
    """Raised when a token does not resolve to a complete tenant record."""

    status_code = 404


def extract_token(auth_header: str | None) -> str:
    """Return the second whitespace-separated field of an Authorization header."""
    parts = (auth_header or "").split()
    if len(parts) < 2:
        raise AuthenticationError("Authorization required.")
    return parts[1]


class AuthResolver:
    """Looks up tenants keyed by bearer token in a JSON document.

    The document is read on every lookup so edits apply without a restart.
    """

    def __init__(self, config_path: str) -> None:
        self._config_path = Path(config_path)

    def load(self) -> dict[str, object]:
        raw = json.loads(self._config_path.read_text())
        if not isinstance(raw, dict):
            raise ValueError(f"Auth configuration must be a JSON object: {self._config_path}")
        return raw

    def resolve(self, token: str) -> TenantAuth | None:
        entry = self.load().get(token)
        if entry is None:
            return None
        try:
            return TenantAuth.model_validate(entry)
        except ValidationError:
            logger.warning("Incomplete tenant configuration for a known token.")
            return None

    async def authenticate(self, auth_header: str | None) -> TenantAuth:
        """Resolve the tenant for a raw Authorization header or raise an AuthError.

        The configuration file is read in a worker thread so the event loop is not
        blocked while the request waits for it.
        """
        token = extract_token(auth_header)
        tenant = await asyncio.to_thread(self.resolve, token)
        if tenant is None:
            raise AuthorizationNotFoundError("No Roman auth found.")
        return tenant
