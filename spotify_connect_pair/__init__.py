"""
spotify-connect-pair - Spotify Connect Zeroconf pairing client.

Registers a user on Spotify Connect devices through the Zeroconf
getInfo/addUser exchange, and mints reusable credentials and access
tokens through an external Spotify session.
"""

__version__ = "0.1.0"

from .config import Config, ConfigError, load_config
from .connect import (
    CommunicationError,
    DecodeError,
    DeviceInfo,
    PairingError,
    ProtocolOutcome,
    ProtocolRejection,
    TransportError,
    ZeroconfClient,
    add_user,
    get_device_info,
)
from .auth import (
    Credentials,
    SessionServiceError,
    exchange_for_token,
    obtain_reusable_credentials,
)

__all__ = [
    "__version__",
    "Config",
    "ConfigError",
    "load_config",
    "CommunicationError",
    "DecodeError",
    "DeviceInfo",
    "PairingError",
    "ProtocolOutcome",
    "ProtocolRejection",
    "TransportError",
    "ZeroconfClient",
    "add_user",
    "get_device_info",
    "Credentials",
    "SessionServiceError",
    "exchange_for_token",
    "obtain_reusable_credentials",
]
