"""
Spotify credential module.

Mints reusable credentials and access tokens through a Session Service.
"""

from .bridge import (
    DEFAULT_CLIENT_ID,
    DEFAULT_SCOPE,
    change_to_token_credentials,
    exchange_for_token,
    obtain_reusable_credentials,
)
from .credentials import AuthenticationType, Credentials
from .exceptions import SessionServiceError
from .session import SessionConfig, SessionFactory, SessionService
from .tokens import AccessToken

__all__ = [
    "DEFAULT_CLIENT_ID",
    "DEFAULT_SCOPE",
    "change_to_token_credentials",
    "exchange_for_token",
    "obtain_reusable_credentials",
    "AuthenticationType",
    "Credentials",
    "SessionServiceError",
    "SessionConfig",
    "SessionFactory",
    "SessionService",
    "AccessToken",
]
