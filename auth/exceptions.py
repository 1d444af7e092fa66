"""
Domain errors raised by the credential store and token service.

Route handlers translate these into HTTP responses; nothing below the
API layer knows about status codes.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for authentication failures."""


class UsernameTaken(AuthError):
    """A user with this username already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(f"username {username!r} is already taken")
        self.username = username


class InvalidCredentials(AuthError):
    """Unknown username or wrong password.

    ``user_found`` records which branch failed so the API layer can keep
    the two published response shapes apart.
    """

    def __init__(self, user_found: bool) -> None:
        super().__init__("invalid username or password")
        self.user_found = user_found


class InvalidToken(AuthError):
    """Token is malformed, mis-signed or expired."""
