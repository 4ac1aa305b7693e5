"""Identity resolution exceptions."""

from __future__ import annotations

from modules.core.exceptions import AuthenticationRequired, NotFound


class UnauthenticatedUser(AuthenticationRequired):
    """No authenticated principal accompanies the request."""


class UserNotFound(NotFound):
    """The authenticated principal has no backing (active) user record."""
