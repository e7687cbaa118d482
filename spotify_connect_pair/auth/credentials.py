"""
Spotify login credentials.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class AuthenticationType(IntEnum):
    """
    Authentication type carried with credentials.

    Values match the Spotify protocol AuthenticationType enum.
    """

    USER_PASS = 0
    STORED_SPOTIFY_CREDENTIALS = 1
    STORED_FACEBOOK_CREDENTIALS = 2
    SPOTIFY_TOKEN = 3
    FACEBOOK_TOKEN = 4


@dataclass
class Credentials:
    """Username plus authentication data of a given type."""

    username: Optional[str]
    auth_type: AuthenticationType
    auth_data: bytes = b""

    @classmethod
    def with_password(cls, username: str, password: str) -> "Credentials":
        """Create username/password credentials."""
        return cls(username, AuthenticationType.USER_PASS, password.encode("utf-8"))

    @classmethod
    def with_access_token(cls, username: Optional[str], token: str) -> "Credentials":
        """Create credentials authenticating with an access token."""
        return cls(username, AuthenticationType.SPOTIFY_TOKEN, token.encode("utf-8"))

    def __repr__(self) -> str:
        # auth_data is a secret
        return (
            f"Credentials(username={self.username!r}, auth_type={self.auth_type.name}, "
            f"auth_data=<{len(self.auth_data)} bytes>)"
        )
