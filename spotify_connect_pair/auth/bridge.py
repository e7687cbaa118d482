"""
Credential bridge.

Turns initial credentials into reusable credentials or access tokens by
driving an external Session Service. Pairing and token requests are rare
one-shot operations, so each call runs to completion on its own
single-threaded event loop and never shares a session with another call.
"""

import asyncio
import logging

from .credentials import AuthenticationType, Credentials
from .exceptions import SessionServiceError
from .session import SessionConfig, SessionFactory, SessionService

logger = logging.getLogger(__name__)

# Client ID of the official Spotify desktop client
DEFAULT_CLIENT_ID = "65b708073fc0480ea92a077233ca87bd"
DEFAULT_SCOPE = "streaming"


async def _connect(
    session_factory: SessionFactory,
    config: SessionConfig,
    credentials: Credentials,
    store_credentials: bool,
) -> SessionService:
    session = session_factory(config)
    try:
        await session.connect(credentials, store_credentials)
    except SessionServiceError:
        raise
    except Exception as e:
        raise SessionServiceError(f"Session handshake failed: {e}") from e
    return session


def obtain_reusable_credentials(
    session_factory: SessionFactory, credentials: Credentials
) -> Credentials:
    """
    Create reusable credentials.

    Spotify hands back reusable credentials as welcome data on every
    authenticated connection, even a username/password one. The session
    saves them to its cache, where they are read back.

    Args:
        session_factory: Creates the Session Service
        credentials: Initial credentials (password, token, ...)

    Returns:
        Reusable credentials from the session cache

    Raises:
        SessionServiceError: If the handshake fails or the cache is empty
            afterwards
    """
    session = asyncio.run(
        _connect(session_factory, SessionConfig(), credentials, store_credentials=True)
    )

    reusable = session.cached_credentials()
    if reusable is None:
        raise SessionServiceError("There are no reusable credentials saved in cache")

    logger.info(f"Obtained reusable credentials for {reusable.username}")
    return reusable


def exchange_for_token(
    session_factory: SessionFactory,
    credentials: Credentials,
    client_id: str,
    scope: str,
) -> str:
    """
    Get an access token.

    Args:
        session_factory: Creates the Session Service
        credentials: Credentials to log in with (not persisted)
        client_id: Client ID the token is issued to
        scope: Requested permission scope

    Returns:
        Access token string

    Raises:
        SessionServiceError: If the handshake fails or no token is produced
    """

    async def _get_token() -> str:
        session = await _connect(
            session_factory,
            SessionConfig(client_id=client_id),
            credentials,
            store_credentials=False,
        )
        try:
            token = await session.get_token(scope)
        except Exception as e:
            raise SessionServiceError(f"Unable to get a Spotify token: {e}") from e
        return token.access_token

    access_token = asyncio.run(_get_token())
    logger.debug(f"Obtained access token for scope {scope}")
    return access_token


def change_to_token_credentials(
    session_factory: SessionFactory, credentials: Credentials
) -> Credentials:
    """Transform existing credentials into token credentials for streaming."""
    token = exchange_for_token(session_factory, credentials, DEFAULT_CLIENT_ID, DEFAULT_SCOPE)
    return Credentials(
        username=credentials.username,
        auth_type=AuthenticationType.SPOTIFY_TOKEN,
        auth_data=token.encode("utf-8"),
    )
