"""Tenant authentication for the roman webhook."""

from src.auth.resolver import (
    AuthenticationError,
    AuthError,
    AuthorizationNotFoundError,
    AuthResolver,
    extract_token,
)

__all__ = [
    "AuthError",
    "AuthResolver",
    "AuthenticationError",
    "AuthorizationNotFoundError",
    "extract_token",
]
