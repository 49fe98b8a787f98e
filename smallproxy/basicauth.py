"""Basic authentication tokens and the list of accepted credentials."""

from __future__ import annotations

import logging

from .encoding import base64_encode

logger = logging.getLogger(__name__)

# "user:password" must fit in a 258-byte buffer including its terminator.
_MAX_CREDENTIAL_BYTES = 256 + 2 - 1


class BasicAuthError(ValueError):
    """Raised for a credential pair that cannot form a basic-auth token."""


def basicauth_string(user: str | None, password: str | None) -> str:
    """Return the base64 token for ``user`` and ``password``."""
    if user is None or password is None:
        raise BasicAuthError("Illegal basicauth rule: missing user or pass")
    raw = f"{user}:{password}".encode("utf-8")
    if len(raw) > _MAX_CREDENTIAL_BYTES:
        raise BasicAuthError("User / pass in basicauth rule too long")
    return base64_encode(raw)


class BasicAuthList:
    """Credentials accepted by the proxy, kept as base64 tokens."""

    def __init__(self) -> None:
        self._tokens: list[str] = []

    def add(self, user: str | None, password: str | None) -> None:
        """Accept the given credentials from now on."""
        self._tokens.append(basicauth_string(user, password))
        logger.info("Added basic auth user : %s", user)

    def check(self, authstring: str) -> bool:
        """Whether ``authstring`` is one of the accepted tokens."""
        return authstring in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)