"""
Session Service capability interface.

The Spotify session (access point handshake, token provider, credential
cache) lives outside this package. The credential bridge only needs the
narrow capability below, so any session implementation, or a fake in
tests, can be plugged in through a SessionFactory.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, runtime_checkable

from .credentials import Credentials
from .tokens import AccessToken


@dataclass
class SessionConfig:
    """Session settings passed to the factory."""

    client_id: Optional[str] = None  # None keeps the session's default client id


@runtime_checkable
class SessionService(Protocol):
    """
    Protocol for an authenticated Spotify session.

    Implementations own the network handshake and the credential cache.
    """

    async def connect(self, credentials: Credentials, store_credentials: bool) -> None:
        """
        Perform the authenticated handshake.

        Args:
            credentials: Credentials to log in with
            store_credentials: Save the resulting reusable credentials to the cache

        Raises:
            Exception: If the handshake fails
        """
        ...

    async def get_token(self, scope: str) -> AccessToken:
        """
        Request an access token for a scope.

        Raises:
            Exception: If no token can be produced
        """
        ...

    def cached_credentials(self) -> Optional[Credentials]:
        """Reusable credentials saved by the last connect, if any."""
        ...


SessionFactory = Callable[[SessionConfig], SessionService]
