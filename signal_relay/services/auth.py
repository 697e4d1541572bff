"""Pass/fail authentication of signaling connections."""
from __future__ import annotations

import base64
import binascii
import logging
import secrets
from dataclasses import dataclass

from ..core.config import Settings

logger = logging.getLogger(__name__)


class AuthenticationFailed(PermissionError):
    """Raised when a connection presents credentials that are not accepted."""


@dataclass(slots=True)
class Credentials:
    username: str | None = None
    password: str | None = None


def credentials_from_request(
    authorization: str | None,
    username: str | None = None,
    password: str | None = None,
) -> Credentials:
    """Build credentials from an HTTP Basic header, falling back to explicit values."""

    if authorization and authorization.lower().startswith("basic "):
        try:
            decoded = base64.b64decode(authorization[6:].strip(), validate=True).decode()
            header_user, header_password = decoded.split(":", 1)
        except (binascii.Error, UnicodeDecodeError, ValueError):
            logger.debug("Ignoring undecodable Basic authorization header")
        else:
            return Credentials(username=header_user, password=header_password)
    return Credentials(username=username, password=password)


class Authenticator:
    """Compare presented credentials against the configured pair."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def enabled(self) -> bool:
        return self._settings.enable_auth

    def authenticate(self, credentials: Credentials | None) -> bool:
        if not self.enabled:
            return True
        if credentials is None or credentials.username is None or credentials.password is None:
            return False

        user_ok = secrets.compare_digest(credentials.username.encode(), self._settings.auth_username.encode())
        password_ok = secrets.compare_digest(credentials.password.encode(), self._settings.auth_password.encode())
        return user_ok and password_ok

    def require(self, credentials: Credentials | None) -> None:
        """Raise ``AuthenticationFailed`` unless ``credentials`` are accepted."""

        if not self.authenticate(credentials):
            username = credentials.username if credentials else None
            logger.info("Authentication failed for user %r", username)
            raise AuthenticationFailed("invalid credentials")
